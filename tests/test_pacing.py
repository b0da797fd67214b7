"""Unit tests for PacingController."""
import logging

import pytest

from vision import PacingController


class TestComputeDelay:

    def test_first_frame_uses_floor(self, clock):
        pacing = PacingController(30, clock=clock)
        assert pacing.compute_delay(clock()) == 1

    def test_interval_is_rounded(self):
        assert PacingController(30).frame_interval_ms == 33
        assert PacingController(24).frame_interval_ms == 42
        assert PacingController(60).frame_interval_ms == 17
        assert PacingController(80).frame_interval_ms == 13

    def test_subtracts_elapsed_time(self):
        pacing = PacingController(30)
        pacing.last_timestamp_ms = 1000.0
        assert pacing.compute_delay(1010.0) == 23

    @pytest.mark.parametrize("elapsed", [33, 34, 100, 10_000, 1e9])
    def test_never_below_one_ms(self, elapsed):
        pacing = PacingController(30)
        pacing.last_timestamp_ms = 0.0
        assert pacing.compute_delay(float(elapsed)) == 1

    def test_no_elapsed_time_waits_full_interval(self):
        pacing = PacingController(25)
        pacing.last_timestamp_ms = 500.0
        assert pacing.compute_delay(500.0) == 40


class TestThrottle:

    def test_records_timestamp_before_waiting(self, clock):
        pacing = PacingController(30, clock=clock)
        seen = []

        def wait(ms):
            seen.append((ms, pacing.last_timestamp_ms))
            clock.advance(ms)

        pacing.throttle(wait)
        assert seen == [(1, 1000.0)]

        clock.advance(10)
        pacing.throttle(wait)
        # 11 ms since the previous timestamp (1 ms wait + 10 ms of work)
        assert seen[-1] == (22, 1011.0)

    def test_previous_wait_counts_as_elapsed(self, clock):
        pacing = PacingController(20, clock=clock)
        waits = []

        def wait(ms):
            waits.append(ms)
            clock.advance(ms)

        for _ in range(5):
            clock.advance(15)  # processing time per frame
            pacing.throttle(wait)

        # 50 ms interval; the elapsed time includes the previous wait
        assert waits == [1, 34, 1, 34, 1]

    def test_overload_keeps_making_progress(self, clock):
        pacing = PacingController(30, clock=clock)
        waits = []
        for _ in range(3):
            clock.advance(200)
            waits.append(pacing.throttle(lambda ms: None))
        assert waits == [1, 1, 1]

    def test_reset(self, clock):
        pacing = PacingController(30, clock=clock)
        pacing.throttle(lambda ms: None)
        pacing.reset()
        assert pacing.last_timestamp_ms is None


class TestFrameRateFallback:

    @pytest.mark.parametrize("rate", [0, -1, 0.0, None, float("nan"), float("inf")])
    def test_unusable_rate_uses_fallback(self, rate, caplog):
        caplog.set_level(logging.WARNING, logger="vision.pacing")
        pacing = PacingController(rate, fallback_frame_rate=25)
        assert pacing.frame_rate == 25
        assert pacing.frame_interval_ms == 40
        assert any(r.levelno == logging.WARNING for r in caplog.records)
