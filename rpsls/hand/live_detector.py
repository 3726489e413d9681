"""
Live Hand Detection via MediaPipe

Runs MediaPipe Hands on video or camera frames and yields one hand pose
(or None) per frame for the sign pipeline. Only the first detected hand
is used.

References:
    - Zhang et al. (2020) — MediaPipe Hands: On-device Real-time Hand Tracking

Usage:
    from rpsls.hand.live_detector import LiveHandDetector

    detector = LiveHandDetector()
    for frame_idx, pose in detector.iter_video(0):  # camera 0
        ...
"""

import cv2
import numpy as np
from typing import Iterator, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

from .skeleton import HandPose
from ..utils.logging_utils import get_logger

try:
    import mediapipe as mp
except ImportError:
    mp = None

logger = get_logger(__name__)


@dataclass
class LiveDetectionConfig:
    """Configuration for live hand detection."""
    model_complexity: int = 1           # 0 = lite, 1 = full (more accurate)
    max_num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    # Video mode gives temporal tracking between frames
    static_image_mode: bool = False


class LiveHandDetector:
    """
    Detect a single hand on each frame using MediaPipe Hands.

    Poses are in normalised [0, 1] image coordinates. Frames with no
    detection yield ``None``.
    """

    def __init__(self, config: Optional[LiveDetectionConfig] = None):
        if mp is None:
            raise ImportError(
                "mediapipe is required for live hand detection. "
                "Install with: pip install mediapipe"
            )
        self.config = config or LiveDetectionConfig()

    def _create_hands(self, static_image_mode: bool):
        cfg = self.config
        return mp.solutions.hands.Hands(
            static_image_mode=static_image_mode,
            max_num_hands=cfg.max_num_hands,
            model_complexity=cfg.model_complexity,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence,
        )

    def iter_video(
        self,
        source: Union[str, int],
        max_frames: Optional[int] = None,
    ) -> Iterator[Tuple[int, Optional[HandPose]]]:
        """
        Yield ``(frame_idx, pose)`` for each frame of a video or camera.

        Args:
            source: video file path or camera device index
            max_frames: stop after this many frames (None = until the
                source ends)

        Yields:
            (frame index, HandPose or None)
        """
        cap = cv2.VideoCapture(source)
        if not cap.isOpened():
            raise IOError(f"Cannot open video source: {source}")

        hands = self._create_hands(self.config.static_image_mode)
        frame_idx = 0

        try:
            while max_frames is None or frame_idx < max_frames:
                ret, frame = cap.read()
                if not ret:
                    break

                yield frame_idx, self._detect(hands, frame)
                frame_idx += 1
        finally:
            hands.close()
            cap.release()
            logger.debug(f"Released video source {source} after {frame_idx} frames")

    def detect_from_frames(self, frames: Sequence[np.ndarray]) -> List[Optional[HandPose]]:
        """
        Process a list of BGR frames (useful when frames are already loaded).

        Args:
            frames: list of BGR numpy arrays

        Returns:
            One HandPose or None per frame
        """
        # no temporal tracking across arbitrary frames
        hands = self._create_hands(static_image_mode=True)
        try:
            return [self._detect(hands, frame) for frame in frames]
        finally:
            hands.close()

    def _detect(self, hands, frame: np.ndarray) -> Optional[HandPose]:
        # MediaPipe expects RGB
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = hands.process(frame_rgb)

        if not results.multi_hand_landmarks:
            return None

        return self.to_pose(results.multi_hand_landmarks[0])

    @staticmethod
    def to_pose(hand_landmarks) -> HandPose:
        """Convert a MediaPipe NormalizedLandmarkList to a HandPose."""
        return HandPose.from_landmarks(hand_landmarks.landmark)

    @staticmethod
    def detection_rate(poses: Sequence[Optional[HandPose]]) -> float:
        """
        Fraction of frames where a hand was detected.

        Args:
            poses: one HandPose or None per frame

        Returns:
            float in [0, 1]
        """
        if len(poses) == 0:
            return 0.0
        return sum(p is not None for p in poses) / len(poses)
