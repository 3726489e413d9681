"""Hand pose and feature extraction module."""

from .skeleton import HandPose, Recording, RecordingLoader
from .features import SignFeatureExtractor, SignMetrics

__all__ = [
    "HandPose",
    "Recording",
    "RecordingLoader",
    "SignFeatureExtractor",
    "SignMetrics",
]
