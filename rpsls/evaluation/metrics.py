"""
Evaluation Metrics for Sign Classification

Scores per-frame sign predictions against labeled recordings:
- Accuracy and per-label recall
- Confusion matrix over all six labels
- Unknown rate (frames with no confident match)
- Flip rate (frame-to-frame label changes, i.e. jitter)

Usage:
    from rpsls.evaluation.metrics import SignEvaluator

    evaluator = SignEvaluator()
    result = evaluator.evaluate(predictions, ground_truth)
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
from collections import Counter
from dataclasses import dataclass, field

from ..classification.classifier import ALL_LABELS, UNKNOWN


@dataclass
class EvaluationResult:
    """Evaluation results container."""
    accuracy: float
    num_frames: int
    unknown_rate: float
    flip_rate: float
    per_label_accuracy: Dict[str, float] = field(default_factory=dict)
    confusion_matrix: Optional[np.ndarray] = None
    num_transitions: int = 0  # Adjacent prediction pairs behind flip_rate

    def to_dict(self) -> Dict:
        return {
            'accuracy': self.accuracy,
            'num_frames': self.num_frames,
            'unknown_rate': self.unknown_rate,
            'flip_rate': self.flip_rate,
            'num_transitions': self.num_transitions,
            'per_label_accuracy': dict(self.per_label_accuracy),
            'confusion_matrix': (
                self.confusion_matrix.tolist() if self.confusion_matrix is not None else None
            ),
        }


class SignEvaluator:
    """
    Evaluation of sign predictions against ground truth.

    Frames without a ground-truth label are skipped. The flip rate is
    measured on the full prediction sequence, since it describes output
    stability rather than correctness.
    """

    LABELS = ALL_LABELS

    def evaluate(
        self,
        predictions: Sequence[str],
        ground_truth: Sequence[Optional[str]]
    ) -> EvaluationResult:
        """
        Evaluate predictions against ground truth.

        Args:
            predictions: Predicted label per frame
            ground_truth: True label per frame (None = unlabeled)

        Returns:
            EvaluationResult with all metrics
        """
        if len(predictions) != len(ground_truth):
            raise ValueError(
                f"Length mismatch: {len(predictions)} predictions vs "
                f"{len(ground_truth)} labels"
            )

        pairs = [(p, gt) for p, gt in zip(predictions, ground_truth) if gt is not None]
        preds = [p for p, _ in pairs]
        truth = [gt for _, gt in pairs]
        n = len(pairs)

        return EvaluationResult(
            accuracy=compute_accuracy(preds, truth),
            num_frames=n,
            unknown_rate=sum(p == UNKNOWN for p in preds) / n if n > 0 else 0.0,
            flip_rate=compute_flip_rate(predictions),
            per_label_accuracy=self._per_label_accuracy(preds, truth),
            confusion_matrix=self._confusion_matrix(preds, truth),
            num_transitions=max(len(predictions) - 1, 0)
        )

    def _per_label_accuracy(
        self,
        predictions: List[str],
        ground_truth: List[str]
    ) -> Dict[str, float]:
        """Recall for each label that occurs in the ground truth."""
        correct = Counter()
        total = Counter()

        for p, gt in zip(predictions, ground_truth):
            total[gt] += 1
            if p == gt:
                correct[gt] += 1

        return {label: correct[label] / total[label] for label in total}

    def _confusion_matrix(
        self,
        predictions: List[str],
        ground_truth: List[str]
    ) -> np.ndarray:
        """Confusion matrix; rows are truth, columns are prediction."""
        index = {label: i for i, label in enumerate(self.LABELS)}
        matrix = np.zeros((len(self.LABELS), len(self.LABELS)), dtype=np.int32)

        for p, gt in zip(predictions, ground_truth):
            if p in index and gt in index:
                matrix[index[gt], index[p]] += 1

        return matrix


def compute_accuracy(
    predictions: Sequence[str],
    ground_truth: Sequence[str]
) -> float:
    """Compute simple accuracy."""
    if not predictions:
        return 0.0
    return sum(p == gt for p, gt in zip(predictions, ground_truth)) / len(predictions)


def compute_flip_rate(labels: Sequence[str]) -> float:
    """Fraction of adjacent frame pairs whose labels differ."""
    if len(labels) < 2:
        return 0.0
    flips = sum(a != b for a, b in zip(labels[:-1], labels[1:]))
    return flips / (len(labels) - 1)


def compute_precision_recall(
    predictions: Sequence[str],
    ground_truth: Sequence[str],
    label: str
) -> Tuple[float, float, float]:
    """
    Compute precision, recall, and F1 for a specific label.

    Returns:
        (precision, recall, f1) tuple
    """
    tp = sum(p == label and gt == label for p, gt in zip(predictions, ground_truth))
    fp = sum(p == label and gt != label for p, gt in zip(predictions, ground_truth))
    fn = sum(p != label and gt == label for p, gt in zip(predictions, ground_truth))

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0

    return precision, recall, f1


def _weighted_mean(values: Sequence[float], weights: Sequence[int]) -> float:
    total = sum(weights)
    if total == 0:
        return 0.0
    return sum(v * w for v, w in zip(values, weights)) / total


def aggregate_results(results: List[EvaluationResult]) -> EvaluationResult:
    """
    Aggregate multiple evaluation results.

    Accuracy and unknown rate are weighted by labeled frames, flip rate
    by the number of prediction transitions it was measured over.
    """
    total_frames = sum(r.num_frames for r in results)
    total_transitions = sum(r.num_transitions for r in results)

    if total_frames == 0 and total_transitions == 0:
        return EvaluationResult(0.0, 0, 0.0, 0.0, {}, None)

    frame_weights = [r.num_frames for r in results]
    accuracy = _weighted_mean([r.accuracy for r in results], frame_weights)
    unknown_rate = _weighted_mean([r.unknown_rate for r in results], frame_weights)
    flip_rate = _weighted_mean([r.flip_rate for r in results], [r.num_transitions for r in results])

    matrices = [r.confusion_matrix for r in results if r.confusion_matrix is not None]
    confusion = np.sum(matrices, axis=0) if matrices else None

    # Per-label recall from the summed confusion matrix
    per_label = {}
    if confusion is not None:
        for i, label in enumerate(SignEvaluator.LABELS):
            row_total = int(confusion[i].sum())
            if row_total > 0:
                per_label[label] = float(confusion[i, i]) / row_total

    return EvaluationResult(
        accuracy=accuracy,
        num_frames=total_frames,
        unknown_rate=unknown_rate,
        flip_rate=flip_rate,
        per_label_accuracy=per_label,
        confusion_matrix=confusion,
        num_transitions=total_transitions
    )
