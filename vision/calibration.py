"""
Calibration Module

Fixed fisheye lens model of the camera and the pixel remapping table
used to undistort frames.
"""

import cv2
import numpy as np
from typing import Dict, Optional, Tuple

from .config import CalibrationParams


class CalibrationModel:
    """Fisheye intrinsics/distortion with a per-resolution remap cache."""

    def __init__(self, params: Optional[CalibrationParams] = None):
        """
        Initialize calibration model.

        Args:
            params: Optional calibration, uses the built-in CalibrationParams if None
        """
        self.params = params or CalibrationParams()

        self._camera_matrix = self.params.camera_matrix()
        self._distortion = self.params.distortion()
        self._tables: Dict[Tuple[int, int], Tuple[np.ndarray, np.ndarray]] = {}

    @staticmethod
    def _read_only(array: np.ndarray) -> np.ndarray:
        view = array.view()
        view.setflags(write=False)
        return view

    @property
    def camera_matrix(self) -> np.ndarray:
        return self._read_only(self._camera_matrix)

    @property
    def distortion(self) -> np.ndarray:
        return self._read_only(self._distortion)

    def remap_table(self, size: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Get the undistortion maps for a resolution, computing them on first use.

        Args:
            size: (width, height) of the frames to undistort

        Returns:
            Tuple of (map1, map2) in CV_16SC2 fixed-point format
        """
        key = (int(size[0]), int(size[1]))
        table = self._tables.get(key)
        if table is None:
            map1, map2 = cv2.fisheye.initUndistortRectifyMap(
                self._camera_matrix, self._distortion, np.eye(3),
                self._camera_matrix, key, cv2.CV_16SC2
            )
            table = (map1, map2)
            self._tables[key] = table
        return table

    def undistort(self, image: np.ndarray) -> np.ndarray:
        """Remap an image through the fisheye table, filling outside pixels with black."""
        h, w = image.shape[:2]
        map1, map2 = self.remap_table((w, h))
        return cv2.remap(image, map1, map2, cv2.INTER_LINEAR,
                         borderMode=cv2.BORDER_CONSTANT, borderValue=0)
