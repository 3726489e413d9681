"""
Rule-Based Sign Classifier

Maps SignMetrics to one of the rock-paper-scissors-lizard-spock labels
with an ordered decision list: rules are tried in order and the first
match wins. Rule predicates overlap, so the order is part of the
behaviour.

Rule order:
    1. scissors
    2. spock (primary)
    3. spock (soft)
    4. paper (strict)
    5. paper (loose)
    6. rock
    7. lizard
    8. spock / lizard tie-breakers
    -> unknown

Usage:
    from rpsls.classification.classifier import SignClassifier

    classifier = SignClassifier()
    label = classifier.classify(metrics)
"""

from typing import Callable, List, NamedTuple, Optional

from ..hand.features import SignMetrics
from ..thresholds import SignThresholds
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

ROCK = 'rock'
PAPER = 'paper'
SCISSORS = 'scissors'
LIZARD = 'lizard'
SPOCK = 'spock'
UNKNOWN = 'unknown'

SIGN_LABELS = (ROCK, PAPER, SCISSORS, LIZARD, SPOCK)
ALL_LABELS = SIGN_LABELS + (UNKNOWN,)


class Rule(NamedTuple):
    """A named classification rule."""
    name: str
    label: str
    predicate: Callable[[SignMetrics], bool]


class SignClassifier:
    """
    Ordered decision list over SignMetrics.

    classify() is total: every metrics bundle maps to exactly one of
    ALL_LABELS.
    """

    def __init__(self, thresholds: Optional[SignThresholds] = None):
        """
        Args:
            thresholds: Classification thresholds (defaults if None)
        """
        self.thresholds = thresholds or SignThresholds()
        self.rules: List[Rule] = [
            Rule('scissors', SCISSORS, self._is_scissors),
            Rule('spock_primary', SPOCK, self._is_spock_primary),
            Rule('spock_soft', SPOCK, self._is_spock_soft),
            Rule('paper_strict', PAPER, self._is_paper_strict),
            Rule('paper_loose', PAPER, self._is_paper_loose),
            Rule('rock', ROCK, self._is_rock),
            Rule('lizard', LIZARD, self._is_lizard),
            Rule('tiebreak_spock', SPOCK, self._tiebreak_spock),
            Rule('tiebreak_lizard', LIZARD, self._tiebreak_lizard),
        ]

    def classify(self, metrics: SignMetrics) -> str:
        """
        Classify a metrics bundle.

        Args:
            metrics: SignMetrics for one frame

        Returns:
            One of ALL_LABELS
        """
        rule = self.match(metrics)
        return rule.label if rule is not None else UNKNOWN

    def match(self, metrics: SignMetrics) -> Optional[Rule]:
        """Return the first rule whose predicate holds, or None."""
        for rule in self.rules:
            if rule.predicate(metrics):
                logger.debug(f"Matched rule '{rule.name}' -> {rule.label}")
                return rule
        return None

    def get_rule(self, name: str) -> Rule:
        """Look up a rule by name."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        raise KeyError(f"No rule named '{name}'")

    # Rules

    def _is_scissors(self, m: SignMetrics) -> bool:
        t = self.thresholds
        return (
            m.index_extended and m.middle_extended
            and not m.ring_extended and not m.pinky_extended
            and m.ring_bent and m.pinky_bent
            and m.gap_im <= t.scissors_max_gap
            and m.cos_im >= t.scissors_min_cos
        )

    def _is_spock_primary(self, m: SignMetrics) -> bool:
        t = self.thresholds
        return (
            m.extended_count == 4
            and m.spread_ratio > t.spock_ratio
            and m.gap_im < t.pair_tight and m.gap_rp < t.pair_tight
            and m.gap_mr > t.spock_min_gap_mr
            and m.thumb_out_hard
        )

    def _is_spock_soft(self, m: SignMetrics) -> bool:
        t = self.thresholds
        strong_v = (
            (m.spread_ratio > t.spock_ratio
             and m.gap_mr > t.spock_min_gap_mr - t.spock_soft_gap_slack)
            or m.spread_ratio > t.spock_soft_strong_ratio
        )
        pair_limit = t.pair_tight + t.spock_soft_pair_slack
        return (
            m.extended_count == 4
            and strong_v
            and m.gap_im < pair_limit and m.gap_rp < pair_limit
            and m.thumb_out_soft
        )

    def _is_paper_strict(self, m: SignMetrics) -> bool:
        t = self.thresholds
        return (
            m.extended_count == 4
            and m.thumb_along
            and m.spread_ratio <= t.paper_strict_max_ratio
            and m.cv < t.paper_max_cv
            and m.max_gap < t.paper_strict_max_gap
        )

    def _is_paper_loose(self, m: SignMetrics) -> bool:
        t = self.thresholds
        return (
            m.extended_count == 4
            and m.thumb_along
            and m.spread_ratio <= t.paper_loose_max_ratio
            and m.max_gap <= t.paper_loose_max_gap
            and (m.max_gap - m.min_gap) <= t.paper_loose_max_gap_range
        )

    def _is_rock(self, m: SignMetrics) -> bool:
        return m.extended_count <= self.thresholds.rock_max_extended and not m.thumb_out_soft

    def _is_lizard(self, m: SignMetrics) -> bool:
        return (
            m.thumb_out_soft
            and not m.middle_extended and not m.ring_extended
            and (m.index_extended or m.pinky_extended)
        )

    def _tiebreak_spock(self, m: SignMetrics) -> bool:
        t = self.thresholds
        return (
            m.extended_count == 4
            and m.thumb_out_soft
            and m.spread_ratio > t.tiebreak_spock_ratio
            and m.gap_mr > t.tiebreak_spock_min_gap_mr
        )

    def _tiebreak_lizard(self, m: SignMetrics) -> bool:
        return m.extended_count <= self.thresholds.lizard_fallback_max_extended and m.thumb_out_soft
