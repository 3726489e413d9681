"""
Hand Pose and Recording Loader

Wraps the 21 MediaPipe hand landmarks of a single frame and loads
recorded landmark sequences from JSON files.

MediaPipe 21-Keypoint Structure:
    0: Wrist
    1-4: Thumb (CMC, MCP, IP, TIP)
    5-8: Index (MCP, PIP, DIP, TIP)
    9-12: Middle (MCP, PIP, DIP, TIP)
    13-16: Ring (MCP, PIP, DIP, TIP)
    17-20: Pinky (MCP, PIP, DIP, TIP)

Usage:
    from rpsls.hand.skeleton import HandPose, RecordingLoader

    pose = HandPose.from_landmarks(result.multi_hand_landmarks[0].landmark)
    recording = RecordingLoader().load("path/to/recording.json")
"""

import json
import numpy as np
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

NUM_LANDMARKS = 21

WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

FINGERTIP_INDICES = [THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP]

LANDMARK_NAMES = [
    'wrist',
    'thumb_cmc', 'thumb_mcp', 'thumb_ip', 'thumb_tip',
    'index_mcp', 'index_pip', 'index_dip', 'index_tip',
    'middle_mcp', 'middle_pip', 'middle_dip', 'middle_tip',
    'ring_mcp', 'ring_pip', 'ring_dip', 'ring_tip',
    'pinky_mcp', 'pinky_pip', 'pinky_dip', 'pinky_tip'
]


@dataclass
class HandPose:
    """Hand landmarks for a single frame, (x, y) normalized to [0, 1]."""
    points: np.ndarray  # Shape (21, 2)

    def __post_init__(self):
        points = np.asarray(self.points, dtype=np.float64)

        if points.ndim != 2 or points.shape[0] != NUM_LANDMARKS or points.shape[1] < 2:
            raise ValueError(
                f"Hand pose needs {NUM_LANDMARKS} (x, y) landmarks, got shape {points.shape}"
            )

        # z from the detector is relative depth, not used by the geometry
        self.points = points[:, :2].copy()

    @classmethod
    def from_landmarks(cls, landmarks: Sequence[Any]) -> 'HandPose':
        """
        Build a pose from a landmark sequence.

        Args:
            landmarks: 21 entries, each an (x, y[, z]) tuple/list, a dict
                with 'x' and 'y' keys, or an object with .x and .y
                attributes (MediaPipe NormalizedLandmark)

        Returns:
            HandPose

        Raises:
            ValueError: If any entry is not a landmark with x and y
        """
        coords = []
        for i, lm in enumerate(landmarks):
            try:
                if isinstance(lm, dict):
                    coords.append((float(lm['x']), float(lm['y'])))
                elif isinstance(lm, (list, tuple, np.ndarray)):
                    coords.append((float(lm[0]), float(lm[1])))
                else:
                    coords.append((float(lm.x), float(lm.y)))
            except (KeyError, IndexError, AttributeError, TypeError, ValueError) as e:
                raise ValueError(f"Landmark {i} is not an (x, y) point: {lm!r}") from e

        return cls(points=np.array(coords, dtype=np.float64).reshape(-1, 2))

    def point(self, idx: int) -> np.ndarray:
        """Get (x, y) of a landmark by index."""
        return self.points[idx]

    @property
    def wrist(self) -> np.ndarray:
        """Get wrist position."""
        return self.points[WRIST]

    @property
    def fingertips(self) -> np.ndarray:
        """Get all fingertip positions. Shape (5, 2)."""
        return self.points[FINGERTIP_INDICES]

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """Axis-aligned bounding box as (min_x, min_y, max_x, max_y)."""
        min_x, min_y = self.points.min(axis=0)
        max_x, max_y = self.points.max(axis=0)
        return (float(min_x), float(min_y), float(max_x), float(max_y))

    def transformed(self, scale: float = 1.0, offset: Tuple[float, float] = (0.0, 0.0)) -> 'HandPose':
        """Return a uniformly scaled and translated copy."""
        return HandPose(points=self.points * scale + np.asarray(offset, dtype=np.float64))


@dataclass
class Recording:
    """A recorded landmark sequence with optional per-frame labels."""
    name: str
    poses: List[Optional[HandPose]] = field(default_factory=list)
    labels: List[Optional[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.poses)

    @property
    def has_labels(self) -> bool:
        return any(label is not None for label in self.labels)


class RecordingLoader:
    """
    Loads single-hand landmark recordings from JSON files.

    Supports:
    - A list of frames, or a dict with a 'frames' key
    - Frames given as null (no hand), a bare landmark list, or a dict
      with 'landmarks' (or 'hand') and an optional ground-truth 'label'
    """

    def load(self, path: Union[str, Path]) -> Recording:
        """
        Load a recording from a JSON file.

        Args:
            path: Path to JSON file

        Returns:
            Recording with one (possibly None) pose per frame
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Recording not found: {path}")

        with open(path, 'r') as f:
            data = json.load(f)

        return self.parse(data, name=path.stem)

    def parse(self, data: Union[Dict, List], name: str = 'recording') -> Recording:
        """Parse already-decoded JSON data into a Recording."""
        if isinstance(data, dict):
            frames = data.get('frames', [])
        elif isinstance(data, list):
            frames = data
        else:
            raise ValueError(f"Unsupported recording format: {type(data).__name__}")

        if not isinstance(frames, list):
            raise ValueError(f"Recording frames must be a list, got {type(frames).__name__}")

        recording = Recording(name=name)

        for frame_idx, frame_data in enumerate(frames):
            pose, label = self._parse_frame(frame_data, frame_idx)
            recording.poses.append(pose)
            recording.labels.append(label)

        logger.debug(f"Loaded {len(recording)} frames from {name}")
        return recording

    def _parse_frame(self, frame_data: Any, frame_idx: int) -> Tuple[Optional[HandPose], Optional[str]]:
        """Parse a single frame into (pose, label)."""
        if frame_data is None:
            return None, None

        label = None
        landmarks = frame_data

        if isinstance(frame_data, dict):
            label = frame_data.get('label')
            landmarks = frame_data.get('landmarks', frame_data.get('hand'))

        if not landmarks:
            return None, label

        if not isinstance(landmarks, (list, tuple)):
            logger.warning(f"Frame {frame_idx}: landmarks must be a list; treating as no hand")
            return None, label

        try:
            return HandPose.from_landmarks(landmarks), label
        except ValueError as e:
            logger.warning(f"Frame {frame_idx}: {e}; treating as no hand")
            return None, label
