"""
Temporal Label Stabilizer

Majority vote over a sliding window of recent raw labels, to suppress
frame-to-frame jitter in the classifier output.

Usage:
    from rpsls.classification.stabilizer import TemporalStabilizer

    stabilizer = TemporalStabilizer(window_size=5)
    stable = stabilizer.push(raw_label)
"""

from collections import Counter, deque
from typing import Optional, Tuple


class TemporalStabilizer:
    """
    Sliding-window mode filter over raw labels.

    The window is FIFO with fixed capacity. Ties go to the label that
    first appears in the window, scanning oldest to newest.

    One instance per tracked hand; not safe for concurrent pushes.
    """

    def __init__(self, window_size: int = 5):
        """
        Args:
            window_size: Number of recent labels to vote over
        """
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")

        self.window_size = window_size
        self._history = deque(maxlen=window_size)
        self._current: Optional[str] = None

    def push(self, label: str) -> str:
        """
        Add a raw label and return the stable label.

        Args:
            label: Raw per-frame label

        Returns:
            Most frequent label in the current window
        """
        self._history.append(label)
        # Counter keeps insertion order, and most_common is stable for ties
        self._current = Counter(self._history).most_common(1)[0][0]
        return self._current

    @property
    def history(self) -> Tuple[str, ...]:
        """Labels in the window, oldest first."""
        return tuple(self._history)

    @property
    def current(self) -> Optional[str]:
        """Last stable label, or None before the first push."""
        return self._current

    def __len__(self) -> int:
        return len(self._history)
