"""
Marker Vision Pipeline

Main script that drives the frame-processing pipeline from a video file or a camera.
Process: Resize -> Green channel -> (Fisheye) -> Threshold -> Blur -> Erode -> Quadrilaterals

Usage:
    python pipeline.py video <video> <fisheye (true/false)> [--debug]
    python pipeline.py camera <index> <fisheye (true/false)> [--debug]
"""

import argparse
import dataclasses
import logging
import sys
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from vision import (
    ConfigError,
    DetectionResult,
    FramePreprocessor,
    PacingController,
    ShapeExtractor,
    SourceUnavailableError,
    VideoSource,
    VisionConfig,
    WindowDisplay,
)
from vision.logging_config import setup_logging
from vision.visualization import draw_candidates

logger = logging.getLogger(__name__)

USAGE = ("Usage:\n"
         "vision video <video> <fisheye (true/false)> [--debug]\n"
         "vision camera <index> <fisheye (true/false)> [--debug]")


class LoopState(Enum):
    OPENING = "opening"
    RUNNING = "running"
    DRAINING = "draining"
    FAILED = "failed"
    CLOSED = "closed"


class LoopOutcome(Enum):
    COMPLETED = "completed"
    CONFIG_ERROR = "config_error"
    SOURCE_UNAVAILABLE = "source_unavailable"
    FAILED = "failed"


EXIT_CODES = {
    LoopOutcome.COMPLETED: 0,
    LoopOutcome.CONFIG_ERROR: 1,
    LoopOutcome.SOURCE_UNAVAILABLE: 1,
    LoopOutcome.FAILED: 1,
}


def exit_code_for(outcome: LoopOutcome) -> int:
    """Process exit code for a run outcome: 0 on success, 1 on any fatal outcome."""
    return EXIT_CODES.get(outcome, 1)


class VisionPipeline:
    """Per-frame pipeline: preprocessing, shape extraction and the debug overlay."""

    def __init__(self,
                 config: Optional[VisionConfig] = None,
                 preprocessor: Optional[FramePreprocessor] = None,
                 extractor: Optional[ShapeExtractor] = None):
        """Initialize all pipeline stages."""
        self.config = config or VisionConfig()
        self.preprocessor = preprocessor or FramePreprocessor(self.config)
        self.extractor = extractor or ShapeExtractor(self.config)

    def process(self, frame: np.ndarray, frame_index: int = 0) -> Tuple[np.ndarray, DetectionResult]:
        """
        Run the pipeline on one frame.

        Args:
            frame: BGR input frame
            frame_index: Sequence number of the frame

        Returns:
            Tuple of (frame to display, detection result)
        """
        mask = self.preprocessor.preprocess(frame)
        result = self.extractor.extract(mask, frame_index)

        if not self.config.debug:
            return mask, result

        overlay = draw_candidates(mask, result,
                                  color=self.config.candidate_color,
                                  label_color=self.config.label_color)
        return overlay, result


class ProcessingLoop:
    """
    Reads frames from a source, runs them through the pipeline and shows them,
    paced to the source's frame rate.

    States: OPENING -> RUNNING -> (DRAINING | FAILED) -> CLOSED
    """

    def __init__(self,
                 source: VideoSource,
                 display: WindowDisplay,
                 pipeline: Optional[VisionPipeline] = None,
                 config: Optional[VisionConfig] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.config = config or (pipeline.config if pipeline else VisionConfig())
        self.source = source
        self.display = display
        self.pipeline = pipeline or VisionPipeline(self.config)
        self.clock = clock

        self.state: Optional[LoopState] = None
        self.states: List[LoopState] = []
        self.frames_read = 0
        self.last_result: Optional[DetectionResult] = None
        self._frame: Optional[np.ndarray] = None

    def _enter(self, state: LoopState) -> None:
        self.state = state
        self.states.append(state)

    def _open(self) -> PacingController:
        if not self.source.open():
            raise SourceUnavailableError(f"Capture source can't be opened: {self.source.source!r}")

        self.source.set_resolution(*self.config.working_size)
        frame_rate = self.source.frame_rate
        logger.info("Frame rate: %s", frame_rate)
        if self.source.is_file:
            logger.info("Total frame count: %d", self.source.frame_count)

        # Sampled once; variable-rate sources are not re-polled
        return PacingController(frame_rate,
                                clock=self.clock,
                                min_delay_ms=self.config.min_delay_ms,
                                fallback_frame_rate=self.config.fallback_frame_rate)

    def _frame_limit(self) -> int:
        """Upper bound on frames to read, 0 for unbounded."""
        if not self.source.is_file:
            return 0
        return max(0, self.source.frame_count)

    def _step(self, pacing: PacingController) -> bool:
        """Process a single frame; False once the stream is exhausted."""
        self._frame = self.source.read()
        if self._frame is None:
            return False
        self.frames_read += 1

        shown, self.last_result = self.pipeline.process(self._frame, self.frames_read)
        self.display.show(shown)

        if self.source.is_file and self.frames_read == 1:
            # Inspection point: hold the first frame of a file until a key is pressed
            self.display.wait(0)
        else:
            pacing.throttle(self.display.wait)

        logger.debug("%d", self.frames_read)
        return True

    def _close(self) -> None:
        self._frame = None
        try:
            self.source.release()
        finally:
            self.display.close()
            self._enter(LoopState.CLOSED)

    def run(self) -> LoopOutcome:
        """
        Drive the loop until end of stream.

        Returns:
            LoopOutcome.COMPLETED on a clean end of stream

        Raises:
            SourceUnavailableError: the source could not be opened
            Exception: any fault raised while processing a frame
        """
        self._enter(LoopState.OPENING)
        try:
            pacing = self._open()

            self._enter(LoopState.RUNNING)
            limit = self._frame_limit()
            while limit == 0 or self.frames_read < limit:
                if not self._step(pacing):
                    break

            self._enter(LoopState.DRAINING)
            logger.info("End of stream after %d frame(s)", self.frames_read)
            return LoopOutcome.COMPLETED
        except Exception:
            self._enter(LoopState.FAILED)
            raise
        finally:
            self._close()


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigError instead of exiting with status 2."""

    def error(self, message):
        raise ConfigError(message)


def parse_bool(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise argparse.ArgumentTypeError(f"{value!r} is not a boolean (true/false)")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="vision", description="Quadrilateral marker detection from video")
    parser.add_argument('mode', choices=['video', 'camera'], help='Read from a video file or a camera')
    parser.add_argument('source', type=str, help='Video path (video mode) or device index (camera mode)')
    parser.add_argument('fisheye', type=parse_bool, help='Correct fisheye distortion (true/false)')
    parser.add_argument('--debug', '-d', action='store_true', help='Draw candidates and log every frame')
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Tuple[Union[str, int], VisionConfig]:
    """
    Parse command-line arguments into a capture source and a configuration.

    Raises:
        ConfigError: on any invalid argument
    """
    args = build_parser().parse_args(argv)

    source: Union[str, int] = args.source
    if args.mode == 'camera':
        try:
            source = int(args.source)
        except ValueError:
            raise ConfigError("The index is not a valid integer.") from None

    config = dataclasses.replace(VisionConfig(), fisheye=args.fisheye, debug=args.debug)
    return source, config


def run(argv: Optional[Sequence[str]] = None,
        source_factory: Callable[[Union[str, int]], VideoSource] = VideoSource,
        display_factory: Callable[[str], WindowDisplay] = WindowDisplay) -> LoopOutcome:
    """Process boundary: every failure is logged and turned into an outcome."""
    try:
        source, config = parse_args(argv)
    except ConfigError as e:
        logger.error("%s", e)
        logger.error(USAGE)
        return LoopOutcome.CONFIG_ERROR

    if config.debug:
        setup_logging(debug=True)

    loop = ProcessingLoop(source_factory(source), display_factory(config.window_title), config=config)
    try:
        return loop.run()
    except SourceUnavailableError as e:
        logger.error("%s", e)
        return LoopOutcome.SOURCE_UNAVAILABLE
    except Exception as e:
        logger.error("Unhandled error: %s", e)
        logger.debug("Traceback:", exc_info=True)
        return LoopOutcome.FAILED


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    return exit_code_for(run(argv))


if __name__ == "__main__":
    sys.exit(main())
