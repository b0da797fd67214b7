"""
Visualization utilities for the debug overlay.
Draws detected candidates onto the processed frame.
"""

import cv2
import numpy as np
from typing import Tuple

from .shape_extraction import DetectionResult


def to_bgr(img: np.ndarray) -> np.ndarray:
    """Copy of the image with three channels."""
    if len(img.shape) == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    return img.copy()


def add_label_to_image(img: np.ndarray,
                       text: str,
                       color: Tuple[int, int, int] = (255, 255, 255)) -> np.ndarray:
    """
    Add a black status banner along the bottom of an image.

    Args:
        img: Input image (BGR or grayscale)
        text: Label text
        color: Text color

    Returns:
        BGR image with label added
    """
    vis = to_bgr(img)

    h, w = vis.shape[:2]
    font_scale = w / 1200.0
    thickness = max(1, int(w / 600.0))
    bar_h = int(h * 0.06)
    text_y = h - int(bar_h * 0.3)

    cv2.rectangle(vis, (0, h - bar_h), (w, h), (0, 0, 0), -1)
    cv2.putText(vis, text, (10, text_y), cv2.FONT_HERSHEY_SIMPLEX,
                font_scale, color, thickness, cv2.LINE_AA)

    return vis


def draw_candidates(img: np.ndarray,
                    result: DetectionResult,
                    color: Tuple[int, int, int] = (0, 255, 0),
                    label_color: Tuple[int, int, int] = (255, 255, 255),
                    thickness: int = 2) -> np.ndarray:
    """
    Outline every candidate and number it by rank.

    Args:
        img: Processed frame (mask or BGR)
        result: Detection result for the frame
        color: Outline color
        label_color: Rank label color
        thickness: Outline thickness

    Returns:
        BGR image with candidates drawn
    """
    vis = to_bgr(img)

    polygons = [cand.polygon for cand in result]
    cv2.drawContours(vis, polygons, -1, color, thickness)

    for rank, cand in enumerate(result, 1):
        x, y = cand.vertices.min(axis=0)
        cv2.putText(vis, str(rank), (int(x), max(int(y) - 4, 10)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, label_color, 1, cv2.LINE_AA)

    banner = f"Frame {result.frame_index}: {len(result)} candidate(s)"
    return add_label_to_image(vis, banner, color=label_color)
