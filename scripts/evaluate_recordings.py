#!/usr/bin/env python
"""
Batch Evaluation Script

Runs the sign pipeline over every labeled JSON recording in a directory
and reports accuracy and jitter for both raw and stabilized labels:
1. Load recording
2. Run a fresh pipeline (one session per recording)
3. Score raw and stable labels against ground truth
4. Write a JSON summary

Usage:
    python scripts/evaluate_recordings.py --input_dir data/recordings
"""

import argparse
from pathlib import Path
import json
from tqdm import tqdm
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from rpsls.hand.skeleton import RecordingLoader
from rpsls.pipeline import SignPipeline
from rpsls.evaluation.metrics import SignEvaluator, aggregate_results
from rpsls.utils.config import load_config, Config
from rpsls.utils.logging_utils import setup_logging, get_logger

logger = get_logger("evaluate_recordings")


def evaluate_recording(
    path: Path,
    loader: RecordingLoader,
    config: Config,
    evaluator: SignEvaluator
) -> dict:
    """Evaluate a single recording."""
    result = {
        'recording': path.stem,
        'success': False,
        'error': None
    }

    try:
        recording = loader.load(path)
        pipeline = SignPipeline(config)
        outputs = pipeline.run(recording.poses)

        # Only frames with a hand carry a prediction
        frames = [(out, gt) for out, gt in zip(outputs, recording.labels) if out is not None]
        truth = [gt for _, gt in frames]

        result['raw'] = evaluator.evaluate([out.raw_label for out, _ in frames], truth)
        result['stable'] = evaluator.evaluate([out.stable_label for out, _ in frames], truth)
        result['num_frames'] = len(recording)
        result['hand_frames'] = len(frames)
        result['success'] = True

    except Exception as e:
        result['error'] = str(e)
        logger.error(f"Error evaluating {path.name}: {e}")

    return result


def main():
    parser = argparse.ArgumentParser(description="Evaluate sign detection on labeled recordings")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/default.yaml",
        help="Configuration file"
    )
    parser.add_argument(
        "--input_dir",
        type=str,
        required=True,
        help="Directory of JSON recordings"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="./outputs/evaluation_summary.json",
        help="Summary output file"
    )

    args = parser.parse_args()

    setup_logging()
    config = load_config(args.config)
    loader = RecordingLoader()
    evaluator = SignEvaluator()

    paths = sorted(Path(args.input_dir).glob("*.json"))
    logger.info(f"Found {len(paths)} recordings in {args.input_dir}")

    all_results = [
        evaluate_recording(path, loader, config, evaluator)
        for path in tqdm(paths, desc="Evaluating")
    ]
    succeeded = [r for r in all_results if r['success']]

    raw = aggregate_results([r['raw'] for r in succeeded])
    stable = aggregate_results([r['stable'] for r in succeeded])

    logger.info(f"Evaluated {len(succeeded)}/{len(all_results)} recordings")
    logger.info(f"  Raw accuracy:    {raw.accuracy:.3f}  flip rate: {raw.flip_rate:.3f}")
    logger.info(f"  Stable accuracy: {stable.accuracy:.3f}  flip rate: {stable.flip_rate:.3f}")

    for r in succeeded:
        r['raw'] = r['raw'].to_dict()
        r['stable'] = r['stable'].to_dict()

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump({
            'recordings': all_results,
            'raw': raw.to_dict(),
            'stable': stable.to_dict()
        }, f, indent=2)
    logger.info(f"Summary saved to: {output_path}")


if __name__ == "__main__":
    main()
