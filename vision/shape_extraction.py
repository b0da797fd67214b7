"""
Shape Extraction Module

Traces contours on the binary mask, filters them by area and keeps the ones
that simplify to quadrilaterals, ranked by area.
"""

import logging
import cv2
import numpy as np
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .config import VisionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Candidate:
    """A contour approximated to exactly four vertices."""

    contour: np.ndarray
    polygon: np.ndarray
    area: float
    perimeter: float

    @property
    def vertices(self) -> np.ndarray:
        """Polygon corners as an (N, 2) int array."""
        return self.polygon.reshape(-1, 2)


@dataclass
class DetectionResult:
    """Candidates found in one frame, largest first."""

    candidates: List[Candidate] = field(default_factory=list)
    frame_index: int = 0

    def __len__(self) -> int:
        return len(self.candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]

    @property
    def areas(self) -> List[float]:
        return [c.area for c in self.candidates]


class ShapeExtractor:
    """Extracts quadrilateral candidates from a binary mask."""

    def __init__(self, config: Optional[VisionConfig] = None):
        """
        Initialize shape extractor.

        Args:
            config: Optional config, uses VisionConfig() if None
        """
        self.config = config or VisionConfig()

    def find_contours(self, mask: np.ndarray) -> List[np.ndarray]:
        """Flat list of boundary contours, corner points only."""
        contours, _ = cv2.findContours(mask, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)

    def area_in_range(self, area: float) -> bool:
        return self.config.min_area <= area <= self.config.max_area

    def approximate(self, contour: np.ndarray) -> np.ndarray:
        """Closed Douglas-Peucker simplification at a fraction of the arc length."""
        peri = cv2.arcLength(contour, True)
        return cv2.approxPolyDP(contour, self.config.approx_epsilon * peri, True)

    def filter_contours(self, contours: List[np.ndarray]) -> List[Candidate]:
        """
        Filter contours by area and vertex count.

        Returns:
            Unsorted list of candidates
        """
        candidates = []

        for cnt in contours:
            area = float(cv2.contourArea(cnt))
            if not self.area_in_range(area):
                continue

            approx = self.approximate(cnt)
            if len(approx) != self.config.vertex_count:
                continue

            peri = float(cv2.arcLength(cnt, True))
            candidates.append(Candidate(contour=cnt, polygon=approx, area=area, perimeter=peri))

        return candidates

    def extract(self, mask: np.ndarray, frame_index: int = 0) -> DetectionResult:
        """
        Detect quadrilateral candidates in a mask.

        Args:
            mask: Single-channel mask, nonzero pixels are foreground
            frame_index: Sequence number of the frame the mask came from

        Returns:
            DetectionResult sorted by non-increasing area
        """
        contours = self.find_contours(mask)
        candidates = self.filter_contours(contours)
        candidates.sort(key=lambda c: c.area, reverse=True)

        if self.config.debug:
            for rank, cand in enumerate(candidates, 1):
                logger.debug("Frame %d candidate %d: area=%.1f arc length=%.2f",
                             frame_index, rank, cand.area, cand.perimeter)

        return DetectionResult(candidates=candidates, frame_index=frame_index)
