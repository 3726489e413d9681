"""
Hand Sign Pipeline

Main entry point: hand pose -> metrics -> raw label -> stable label.

Usage:
    python -m rpsls.pipeline --config configs/default.yaml --input recording.json
    python -m rpsls.pipeline --camera 0 --verbose
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from .hand.skeleton import HandPose, RecordingLoader
from .hand.features import SignFeatureExtractor, SignMetrics
from .classification.classifier import SignClassifier, UNKNOWN
from .classification.stabilizer import TemporalStabilizer
from .utils.config import load_config, Config
from .utils.logging_utils import setup_logging, get_logger, ProgressLogger

logger = get_logger(__name__)


@dataclass
class FrameResult:
    """Pipeline output for one frame with a detected hand."""
    frame_idx: int
    raw_label: str
    stable_label: str
    rule: Optional[str]
    metrics: SignMetrics

    def to_dict(self) -> dict:
        return {
            'frame_idx': self.frame_idx,
            'raw_label': self.raw_label,
            'stable_label': self.stable_label,
            'rule': self.rule,
            'metrics': self.metrics.to_dict(),
        }


class SignPipeline:
    """
    Per-session hand sign recognition.

    Owns its own stabilizer, so each tracked hand or game session needs
    its own pipeline instance.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize pipeline with configuration.

        Args:
            config: Configuration object (defaults if None)
        """
        self.config = config or Config()

        self.extractor = SignFeatureExtractor(self.config.classifier)
        self.classifier = SignClassifier(self.config.classifier)
        self.stabilizer = TemporalStabilizer(self.config.stabilizer.window_size)

        self._frame_counter = 0

        logger.info(
            f"Pipeline initialized (window={self.config.stabilizer.window_size})"
        )

    @property
    def current_label(self) -> Optional[str]:
        """Last stable label, or None if no hand has been seen."""
        return self.stabilizer.current

    def reset(self):
        """Start a new session with an empty label history."""
        self.stabilizer = TemporalStabilizer(self.config.stabilizer.window_size)
        self._frame_counter = 0
        logger.debug("Pipeline reset")

    def process(self, pose: Optional[HandPose], frame_idx: Optional[int] = None) -> Optional[FrameResult]:
        """
        Process one frame.

        Frames without a hand return None and leave the label history
        untouched.

        Args:
            pose: HandPose, or None when no hand was detected
            frame_idx: Frame index (defaults to an internal counter)

        Returns:
            FrameResult, or None for frames without a hand
        """
        if frame_idx is None:
            frame_idx = self._frame_counter
        self._frame_counter = frame_idx + 1

        if pose is None:
            return None

        metrics = self.extractor.extract(pose)
        rule = self.classifier.match(metrics)
        raw_label = rule.label if rule is not None else UNKNOWN

        previous = self.stabilizer.current
        stable_label = self.stabilizer.push(raw_label)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Frame {frame_idx}: {raw_label} -> {stable_label} {metrics.to_dict()}")
        if stable_label != previous:
            logger.info(f"Frame {frame_idx}: sign changed {previous} -> {stable_label}")

        return FrameResult(
            frame_idx=frame_idx,
            raw_label=raw_label,
            stable_label=stable_label,
            rule=rule.name if rule is not None else None,
            metrics=metrics
        )

    def run(self, poses: Iterable[Optional[HandPose]]) -> List[Optional[FrameResult]]:
        """
        Process a sequence of poses.

        Returns:
            One FrameResult (or None for frames without a hand) per pose
        """
        return [self.process(pose, frame_idx=i) for i, pose in enumerate(poses)]

    def run_stream(
        self,
        frames: Iterable[Tuple[int, Optional[HandPose]]],
        total: Optional[int] = None
    ) -> Iterator[Optional[FrameResult]]:
        """Process ``(frame_idx, pose)`` pairs lazily, logging progress."""
        progress = ProgressLogger(__name__, total=total, log_interval=300)
        progress.start()

        for frame_idx, pose in frames:
            yield self.process(pose, frame_idx=frame_idx)
            progress.update()

        progress.finish()


def _video_frames(config: Config, source, max_frames: Optional[int]):
    """Open a video source with MediaPipe."""
    # Imported here so recording-only runs do not need OpenCV/MediaPipe
    from .hand.live_detector import LiveHandDetector, LiveDetectionConfig

    det = config.detection
    detector = LiveHandDetector(LiveDetectionConfig(
        model_complexity=det.model_complexity,
        max_num_hands=det.max_num_hands,
        min_detection_confidence=det.min_detection_confidence,
        min_tracking_confidence=det.min_tracking_confidence,
        static_image_mode=det.static_image_mode,
    ))
    return detector.iter_video(source, max_frames=max_frames)


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Rock-Paper-Scissors-Lizard-Spock Hand Sign Detection"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (defaults built in if omitted)"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=str,
        help="JSON landmark recording or video file"
    )
    source.add_argument(
        "--camera",
        type=int,
        help="Camera device index"
    )
    parser.add_argument(
        "--max_frames",
        type=int,
        default=None,
        help="Stop after this many frames"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write per-frame results to this JSON file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config) if args.config else Config()
    pipeline = SignPipeline(config)

    if args.camera is not None:
        results = pipeline.run_stream(_video_frames(config, args.camera, args.max_frames))
    elif args.input.lower().endswith('.json'):
        logger.info(f"Recording: {args.input}")
        recording = RecordingLoader().load(args.input)
        poses = recording.poses[:args.max_frames] if args.max_frames else recording.poses
        results = pipeline.run_stream(enumerate(poses), total=len(poses))
    else:
        logger.info(f"Video: {args.input}")
        results = pipeline.run_stream(_video_frames(config, args.input, args.max_frames))

    collected = []
    num_hand_frames = 0
    for result in results:
        if result is None:
            continue
        num_hand_frames += 1
        if args.output:
            collected.append(result.to_dict())

    logger.info(f"Final sign: {pipeline.current_label or 'none'} ({num_hand_frames} frames with a hand)")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(collected, f, indent=2)
        logger.info(f"Results saved to: {output_path}")


if __name__ == "__main__":
    main()
