"""
Rock-Paper-Scissors-Lizard-Spock Hand Sign Detection

Classifies a hand sign from 21 MediaPipe hand landmarks per frame and
stabilizes the label over time.
"""

__version__ = "1.0.0"

from . import utils
from . import hand
from . import classification
from . import evaluation
