"""Utility functions and classes."""

from .logging_utils import setup_logging, get_logger, ProgressLogger
from .config import load_config, save_config, merge_configs, Config

__all__ = [
    "setup_logging",
    "get_logger",
    "ProgressLogger",
    "load_config",
    "save_config",
    "merge_configs",
    "Config",
]
