"""Pytest configuration and shared fixtures for the marker vision pipeline.

Provides synthetic frames and in-memory stand-ins for the capture source,
the display window and the clock so the processing loop can run headless.
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from vision import VisionConfig


class FakeSource:
    """Capture source replaying a fixed list of frames."""

    def __init__(self, frames: Optional[List[np.ndarray]] = None, frame_rate: float = 30.0,
                 frame_count: int = 0, is_file: bool = True, opens: bool = True,
                 source="clip.mp4"):
        self.frames = list(frames or [])
        self._frame_rate = frame_rate
        self._frame_count = frame_count
        self._is_file = is_file
        self._opens = opens
        self.source = source

        self.opened = False
        self.released = False
        self.reads = 0
        self.resolution = None

    @property
    def is_file(self):
        return self._is_file

    @property
    def is_opened(self):
        return self.opened

    def open(self):
        self.opened = self._opens
        return self.opened

    def set_resolution(self, width, height):
        self.resolution = (width, height)

    @property
    def frame_rate(self):
        return self._frame_rate

    @property
    def frame_count(self):
        return self._frame_count

    def read(self):
        self.reads += 1
        if self.reads > len(self.frames):
            return None
        return self.frames[self.reads - 1]

    def release(self):
        self.released = True


class FakeDisplay:
    """Records shown frames and requested waits."""

    def __init__(self, title="Vision", on_wait=None):
        self.title = title
        self.shown = []
        self.waits = []
        self.closed = False
        self.on_wait = on_wait

    def show(self, frame):
        self.shown.append(frame)

    def wait(self, delay_ms):
        self.waits.append(delay_ms)
        if self.on_wait is not None:
            self.on_wait(delay_ms)
        return -1

    def close(self):
        self.closed = True


class FakeClock:
    """Millisecond clock advanced manually."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms: float):
        self.now += ms


def blank_frame(width: int = 640, height: int = 480) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


def frame_with_rectangles(rects, width: int = 640, height: int = 480, value: int = 255) -> np.ndarray:
    """BGR frame with filled bright-green rectangles given as (x0, y0, x1, y1)."""
    frame = blank_frame(width, height)
    for x0, y0, x1, y1 in rects:
        cv2.rectangle(frame, (x0, y0), (x1, y1), (0, value, 0), -1)
    return frame


@pytest.fixture(autouse=True)
def reset_pipeline_loggers():
    """Drop handlers installed by setup_logging so they don't outlive the test's stderr."""
    yield
    for name in ("vision", "pipeline"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def config():
    return VisionConfig()


@pytest.fixture
def debug_config():
    return VisionConfig(debug=True)


@pytest.fixture
def blank():
    return blank_frame()


@pytest.fixture
def empty_mask():
    return np.zeros((480, 640), dtype=np.uint8)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def make_source():
    return FakeSource
