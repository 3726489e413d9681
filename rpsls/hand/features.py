"""
Sign Feature Extractor

Turns one frame's hand pose into the geometric metrics used by the
sign classifier. All distances are divided by the diagonal of the pose's
bounding box, so the metrics do not depend on hand size or position.

Usage:
    from rpsls.hand.features import SignFeatureExtractor

    extractor = SignFeatureExtractor()
    metrics = extractor.extract(pose)
"""

import numpy as np
from typing import Any, Dict, Optional
from dataclasses import dataclass, asdict

from .skeleton import (
    HandPose,
    WRIST,
    THUMB_TIP,
    INDEX_MCP, INDEX_PIP, INDEX_TIP,
    MIDDLE_PIP, MIDDLE_TIP,
    RING_PIP, RING_TIP,
    PINKY_PIP, PINKY_TIP,
)
from ..thresholds import SignThresholds


@dataclass(frozen=True)
class SignMetrics:
    """Geometric metrics for a single hand pose."""
    # Normalized fingertip gaps
    gap_im: float
    gap_mr: float
    gap_rp: float

    # Middle-ring gap over the mean of the outer gaps
    spread_ratio: float
    # Coefficient of variation of the three gaps
    cv: float

    # Thumb tip to index MCP
    thumb_to_index_mcp: float
    thumb_out_hard: bool
    thumb_out_soft: bool
    thumb_along: bool

    index_extended: bool
    middle_extended: bool
    ring_extended: bool
    pinky_extended: bool
    extended_count: int

    index_bent: bool
    middle_bent: bool
    ring_bent: bool
    pinky_bent: bool

    # Cosine between index and middle PIP->TIP directions
    cos_im: float

    @property
    def max_gap(self) -> float:
        return max(self.gap_im, self.gap_mr, self.gap_rp)

    @property
    def min_gap(self) -> float:
        return min(self.gap_im, self.gap_mr, self.gap_rp)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python dict for logging and JSON output."""
        return asdict(self)


class SignFeatureExtractor:
    """
    Computes SignMetrics from a HandPose.

    Extension is judged by how much farther the tip is from the wrist than
    the PIP joint. Between bent_margin and extended_margin a finger is
    neither extended nor bent.
    """

    # finger name -> (tip, pip)
    FINGERS = {
        'index': (INDEX_TIP, INDEX_PIP),
        'middle': (MIDDLE_TIP, MIDDLE_PIP),
        'ring': (RING_TIP, RING_PIP),
        'pinky': (PINKY_TIP, PINKY_PIP),
    }

    def __init__(self, thresholds: Optional[SignThresholds] = None):
        """
        Args:
            thresholds: Extraction thresholds (defaults if None)
        """
        self.thresholds = thresholds or SignThresholds()

    def extract(self, pose: HandPose) -> SignMetrics:
        """
        Extract sign metrics from a hand pose.

        Args:
            pose: HandPose with 21 landmarks

        Returns:
            SignMetrics
        """
        t = self.thresholds
        points = pose.points
        scale = self.compute_scale(pose)

        def dist(a: int, b: int) -> float:
            return float(np.linalg.norm(points[a] - points[b])) / scale

        extended = {}
        bent = {}
        for name, (tip, pip) in self.FINGERS.items():
            reach = dist(tip, WRIST) - dist(pip, WRIST)
            extended[name] = reach > t.extended_margin
            bent[name] = reach < t.bent_margin

        thumb = dist(THUMB_TIP, INDEX_MCP)

        gap_im = dist(INDEX_TIP, MIDDLE_TIP)
        gap_mr = dist(MIDDLE_TIP, RING_TIP)
        gap_rp = dist(RING_TIP, PINKY_TIP)

        pair_avg = (gap_im + gap_rp) / 2
        spread_ratio = gap_mr / max(pair_avg, t.epsilon)

        gaps = np.array([gap_im, gap_mr, gap_rp])
        mean = float(gaps.mean())
        stdev = float(gaps.std())  # population stdev
        cv = stdev / mean if mean > 0 else 1.0

        cos_im = float(np.clip(
            np.dot(
                self._direction(points[INDEX_TIP] - points[INDEX_PIP]),
                self._direction(points[MIDDLE_TIP] - points[MIDDLE_PIP])
            ),
            -1.0, 1.0
        ))

        return SignMetrics(
            gap_im=gap_im,
            gap_mr=gap_mr,
            gap_rp=gap_rp,
            spread_ratio=spread_ratio,
            cv=cv,
            thumb_to_index_mcp=thumb,
            thumb_out_hard=thumb > t.thumb_out_hard,
            thumb_out_soft=thumb > t.thumb_out_soft,
            thumb_along=thumb < t.thumb_along,
            index_extended=extended['index'],
            middle_extended=extended['middle'],
            ring_extended=extended['ring'],
            pinky_extended=extended['pinky'],
            extended_count=sum(extended.values()),
            index_bent=bent['index'],
            middle_bent=bent['middle'],
            ring_bent=bent['ring'],
            pinky_bent=bent['pinky'],
            cos_im=cos_im,
        )

    def compute_scale(self, pose: HandPose) -> float:
        """Bounding-box diagonal, each side floored to epsilon."""
        min_x, min_y, max_x, max_y = pose.bounding_box()
        eps = self.thresholds.epsilon
        return float(np.hypot(max(max_x - min_x, eps), max(max_y - min_y, eps)))

    def _direction(self, vec: np.ndarray) -> np.ndarray:
        """Unit vector; zero vectors stay zero."""
        length = float(np.linalg.norm(vec))
        if length == 0:
            length = self.thresholds.epsilon
        return vec / length
