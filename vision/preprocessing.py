"""
Preprocessing Module

Turns a raw BGR frame into the binary mask used for shape extraction:
resize -> channel isolation -> optional fisheye correction -> threshold
-> box blur -> erosion.
"""

import cv2
import numpy as np
from typing import Optional

from .calibration import CalibrationModel
from .config import VisionConfig
from .exceptions import FrameError


class FramePreprocessor:
    """Normalizes frames and produces the binary mask."""

    def __init__(self,
                 config: Optional[VisionConfig] = None,
                 calibration: Optional[CalibrationModel] = None):
        """
        Initialize frame preprocessor.

        Args:
            config: Optional config, uses VisionConfig() if None
            calibration: Optional calibration model, built from config.calibration if None
        """
        self.config = config or VisionConfig()
        self.calibration = calibration or CalibrationModel(self.config.calibration)

        k = self.config.blur_kernel_size
        self.blur_size = (k, k)
        self.erode_kernel = np.ones((3, 3), np.uint8)

    def validate(self, frame: np.ndarray) -> None:
        """Reject frames the pipeline cannot process."""
        if frame is None:
            raise FrameError("Frame is missing")
        if frame.size == 0:
            raise FrameError("Frame is empty")
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise FrameError(f"Expected a 3-channel frame, got shape {frame.shape}")

    def resize(self, frame: np.ndarray) -> np.ndarray:
        """Stretch/shrink to the working resolution; unchanged if it already matches."""
        h, w = frame.shape[:2]
        if (w, h) == self.config.working_size:
            return frame
        return cv2.resize(frame, self.config.working_size, interpolation=cv2.INTER_LINEAR)

    def isolate_channel(self, frame: np.ndarray) -> np.ndarray:
        """Keep only the configured channel (green by default)."""
        return cv2.extractChannel(frame, self.config.channel)

    def correct_fisheye(self, gray: np.ndarray) -> np.ndarray:
        return self.calibration.undistort(gray)

    def threshold(self, gray: np.ndarray) -> np.ndarray:
        """Binarize: >= threshold becomes 255, everything else 0."""
        return cv2.inRange(gray, self.config.threshold, 255)

    def blur(self, mask: np.ndarray) -> np.ndarray:
        return cv2.blur(mask, self.blur_size)

    def erode(self, mask: np.ndarray) -> np.ndarray:
        return cv2.erode(mask, self.erode_kernel,
                         iterations=self.config.erode_iterations,
                         borderType=cv2.BORDER_CONSTANT, borderValue=0)

    def preprocess(self, frame: np.ndarray, fisheye_enabled: Optional[bool] = None) -> np.ndarray:
        """
        Run the full preprocessing chain on one frame.

        Args:
            frame: BGR input frame
            fisheye_enabled: Override for the configured fisheye toggle

        Returns:
            Single-channel mask at the working resolution
        """
        self.validate(frame)
        if fisheye_enabled is None:
            fisheye_enabled = self.config.fisheye

        image = self.resize(frame)
        image = self.isolate_channel(image)
        if fisheye_enabled:
            image = self.correct_fisheye(image)
        image = self.threshold(image)
        image = self.blur(image)
        return self.erode(image)
