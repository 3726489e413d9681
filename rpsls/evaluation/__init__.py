"""Evaluation metrics module."""

from .metrics import (
    SignEvaluator,
    EvaluationResult,
    compute_accuracy,
    compute_flip_rate,
    compute_precision_recall,
    aggregate_results,
)

__all__ = [
    "SignEvaluator",
    "EvaluationResult",
    "compute_accuracy",
    "compute_flip_rate",
    "compute_precision_recall",
    "aggregate_results",
]
