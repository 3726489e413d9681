"""
Configuration Management

Handles loading, merging and saving YAML configuration files.

Usage:
    from rpsls.utils.config import load_config

    config = load_config('configs/default.yaml')
"""

import yaml
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass, field

from ..thresholds import SignThresholds


@dataclass
class StabilizerConfig:
    """Temporal stabilizer configuration."""
    window_size: int = 5

    def __post_init__(self):
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")


@dataclass
class DetectionConfig:
    """MediaPipe hand detection configuration."""
    model_complexity: int = 1
    max_num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    static_image_mode: bool = False


@dataclass
class Config:
    """Main configuration container."""
    project_name: str = "rpsls-sign-detector"
    version: str = "1.0.0"

    # Sub-configurations
    classifier: SignThresholds = field(default_factory=SignThresholds)
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        config = cls()
        config_dict = config_dict or {}

        project = config_dict.get('project', {})
        config.project_name = project.get('name', config.project_name)
        config.version = project.get('version', config.version)

        config.classifier = SignThresholds.from_dict(
            (config_dict.get('classifier') or {}).get('thresholds') or {}
        )

        stabilizer = config_dict.get('stabilizer', {})
        config.stabilizer = StabilizerConfig(
            window_size=stabilizer.get('window_size', 5)
        )

        detection = config_dict.get('detection', {})
        config.detection = DetectionConfig(
            model_complexity=detection.get('model_complexity', 1),
            max_num_hands=detection.get('max_num_hands', 1),
            min_detection_confidence=detection.get('min_detection_confidence', 0.5),
            min_tracking_confidence=detection.get('min_tracking_confidence', 0.5),
            static_image_mode=detection.get('static_image_mode', False)
        )

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project': {
                'name': self.project_name,
                'version': self.version
            },
            'classifier': {
                'thresholds': self.classifier.to_dict()
            },
            'stabilizer': {
                'window_size': self.stabilizer.window_size
            },
            'detection': {
                'model_complexity': self.detection.model_complexity,
                'max_num_hands': self.detection.max_num_hands,
                'min_detection_confidence': self.detection.min_detection_confidence,
                'min_tracking_confidence': self.detection.min_tracking_confidence,
                'static_image_mode': self.detection.static_image_mode
            }
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Config object
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return Config.from_dict(config_dict)


def merge_configs(base: Dict, override: Dict) -> Dict:
    """
    Merge two config dictionaries.

    Args:
        base: Base configuration
        override: Override values

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def save_config(config: Config, path: str):
    """Save configuration to YAML file."""
    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
