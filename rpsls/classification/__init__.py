"""Sign classification module."""

from .classifier import (
    SignClassifier,
    Rule,
    SIGN_LABELS,
    ALL_LABELS,
    UNKNOWN,
)
from .stabilizer import TemporalStabilizer
from ..thresholds import SignThresholds

__all__ = [
    "SignClassifier",
    "Rule",
    "SIGN_LABELS",
    "ALL_LABELS",
    "UNKNOWN",
    "TemporalStabilizer",
    "SignThresholds",
]
