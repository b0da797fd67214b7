"""
Configuration settings for the marker vision pipeline.
Centralized configuration for all modules.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

from .exceptions import ConfigError


@dataclass(frozen=True)
class CalibrationParams:
    """Fixed fisheye calibration of the camera (intrinsics + distortion)."""

    CAMERA_MATRIX: Tuple[Tuple[float, float, float], ...] = (
        (272.2831082345223, 0.0, 330.5055386901159),
        (0.0, 272.06956412226043, 198.95483961693228),
        (0.0, 0.0, 1.0),
    )

    DISTORTION: Tuple[float, float, float, float] = (
        -0.03635131955587948,
        -0.02746289182992547,
        0.03422666268794602,
        -0.0164632465730478,
    )

    def camera_matrix(self) -> np.ndarray:
        """3x3 intrinsic matrix K as float64."""
        return np.array(self.CAMERA_MATRIX, dtype=np.float64)

    def distortion(self) -> np.ndarray:
        """Fisheye coefficients D as a 4x1 float64 column."""
        return np.array(self.DISTORTION, dtype=np.float64).reshape(4, 1)


@dataclass(frozen=True)
class VisionConfig:
    """Configuration for the entire vision pipeline."""

    # Working resolution
    width: int = 640
    height: int = 480

    # Preprocessing
    channel: int = 1            # green in BGR order
    threshold: int = 240        # values >= threshold become white
    blur_radius: float = 0.9
    erode_iterations: int = 1

    # Shape extraction
    min_area: float = 100.0
    max_area: float = 7000.0
    approx_epsilon: float = 0.05   # fraction of the contour's arc length
    vertex_count: int = 4

    # Display and pacing
    window_title: str = "Vision"
    min_delay_ms: int = 1
    fallback_frame_rate: float = 30.0

    # Debug overlay colors (BGR)
    candidate_color: Tuple[int, int, int] = (0, 255, 0)
    label_color: Tuple[int, int, int] = (255, 255, 255)

    # Toggles
    fisheye: bool = False
    debug: bool = False

    calibration: CalibrationParams = field(default_factory=CalibrationParams)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"Working resolution must be positive, got {self.width}x{self.height}")
        if not 0 <= self.channel <= 2:
            raise ConfigError(f"Channel index must be 0, 1 or 2, got {self.channel}")
        if not 0 <= self.threshold <= 255:
            raise ConfigError(f"Threshold must be within 0..255, got {self.threshold}")
        if self.blur_radius < 0:
            raise ConfigError(f"Blur radius must be non-negative, got {self.blur_radius}")
        if self.min_area < 0 or self.min_area > self.max_area:
            raise ConfigError(f"Invalid area bounds [{self.min_area}, {self.max_area}]")
        if self.min_delay_ms < 1:
            raise ConfigError(f"Minimum delay must be at least 1 ms, got {self.min_delay_ms}")
        if self.fallback_frame_rate <= 0:
            raise ConfigError(f"Fallback frame rate must be positive, got {self.fallback_frame_rate}")

    @property
    def working_size(self) -> Tuple[int, int]:
        """(width, height) as expected by cv2."""
        return (self.width, self.height)

    @property
    def blur_kernel_size(self) -> int:
        # round half up, then 2r + 1
        radius = int(self.blur_radius + 0.5)
        return 2 * radius + 1
