"""
Sign Thresholds

Every numeric constant used by the feature extractor and the rule-based
classifier, in one tunable structure.

Values are normalized by the hand's bounding-box diagonal unless noted.

Usage:
    from rpsls.thresholds import SignThresholds

    thresholds = SignThresholds(spock_ratio=1.5)
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

from .utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignThresholds:
    """Tunable thresholds for sign feature extraction and classification."""
    # Finger extension: (tip-to-wrist) - (pip-to-wrist)
    extended_margin: float = 0.07
    bent_margin: float = 0.03

    # Thumb tip to index MCP
    thumb_out_hard: float = 0.33
    thumb_out_soft: float = 0.31
    thumb_along: float = 0.28

    # Scissors
    scissors_max_gap: float = 0.28
    scissors_min_cos: float = 0.80

    # Spock (primary)
    spock_ratio: float = 1.45
    spock_min_gap_mr: float = 0.18
    pair_tight: float = 0.22

    # Spock (soft)
    spock_soft_gap_slack: float = 0.02
    spock_soft_pair_slack: float = 0.02
    spock_soft_strong_ratio: float = 1.70

    # Paper (strict)
    paper_max_cv: float = 0.35
    paper_strict_max_ratio: float = 1.35
    paper_strict_max_gap: float = 0.30

    # Paper (loose)
    paper_loose_max_ratio: float = 1.25
    paper_loose_max_gap: float = 0.32
    paper_loose_max_gap_range: float = 0.18

    # Rock / lizard finger counts
    rock_max_extended: int = 1
    lizard_fallback_max_extended: int = 2

    # Spock tie-breaker
    tiebreak_spock_ratio: float = 1.35
    tiebreak_spock_min_gap_mr: float = 0.16

    # Floor for denominators and vector lengths
    epsilon: float = 1e-6

    def __post_init__(self):
        if self.bent_margin > self.extended_margin:
            raise ValueError(
                f"bent_margin ({self.bent_margin}) must not exceed "
                f"extended_margin ({self.extended_margin})"
            )
        if self.thumb_out_soft > self.thumb_out_hard:
            raise ValueError(
                f"thumb_out_soft ({self.thumb_out_soft}) must not exceed "
                f"thumb_out_hard ({self.thumb_out_hard})"
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SignThresholds':
        """Create thresholds from a mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning(f"Ignoring unknown threshold keys: {', '.join(unknown)}")

        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
