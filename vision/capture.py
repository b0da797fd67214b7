"""
Capture Module

Thin wrapper around cv2.VideoCapture for video files and camera devices.
"""

import logging
import cv2
import numpy as np
from typing import Optional, Union

logger = logging.getLogger(__name__)


class VideoSource:
    """A video file (path) or a camera (device index)."""

    def __init__(self, source: Union[str, int]):
        self.source = source
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_file(self) -> bool:
        return isinstance(self.source, str)

    @property
    def is_opened(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self) -> bool:
        """Open the underlying capture; returns whether it reports itself open."""
        if self._capture is None:
            self._capture = cv2.VideoCapture(self.source)
        return self.is_opened

    def set_resolution(self, width: int, height: int) -> None:
        """Request a capture resolution; devices may ignore it."""
        if self._capture is None:
            return
        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    @property
    def frame_rate(self) -> float:
        if self._capture is None:
            return 0.0
        return float(self._capture.get(cv2.CAP_PROP_FPS))

    @property
    def frame_count(self) -> int:
        """Total frames for files, 0 for cameras or when unknown."""
        if self._capture is None or not self.is_file:
            return 0
        return int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT))

    def read(self) -> Optional[np.ndarray]:
        """Next frame, or None at end of stream."""
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        if not ok:
            return None
        return frame

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def __enter__(self) -> "VideoSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        kind = "file" if self.is_file else "camera"
        return f"VideoSource({kind}={self.source!r})"
