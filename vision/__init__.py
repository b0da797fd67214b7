"""
Marker Vision Modules

This package contains the components of the marker detection pipeline:
- calibration: fixed fisheye lens model and remap table
- preprocessing: resize, channel isolation, undistortion, threshold, blur, erosion
- shape_extraction: contour tracing and quadrilateral selection
- pacing: frame-rate throttling for the processing loop
- capture / display: adapters for the video source and the window
"""

from .config import CalibrationParams, VisionConfig
from .exceptions import VisionError, ConfigError, SourceUnavailableError, FrameError
from .calibration import CalibrationModel
from .preprocessing import FramePreprocessor
from .shape_extraction import Candidate, DetectionResult, ShapeExtractor
from .pacing import PacingController
from .capture import VideoSource
from .display import WindowDisplay

__all__ = [
    'CalibrationParams',
    'VisionConfig',
    'VisionError',
    'ConfigError',
    'SourceUnavailableError',
    'FrameError',
    'CalibrationModel',
    'FramePreprocessor',
    'Candidate',
    'DetectionResult',
    'ShapeExtractor',
    'PacingController',
    'VideoSource',
    'WindowDisplay',
]
