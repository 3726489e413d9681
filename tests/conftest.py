"""Shared fixtures: synthetic hand poses in normalized image coordinates."""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rpsls.hand.skeleton import HandPose

WRIST_XY = (0.5, 0.9)
THUMB_JOINTS = [(0.40, 0.85), (0.33, 0.78), (0.28, 0.72)]  # CMC, MCP, IP
THUMB_TUCKED = (0.36, 0.68)
THUMB_OUT = (0.08, 0.62)

# index, middle, ring, pinky
FINGER_X = [0.38, 0.46, 0.54, 0.62]


def build_pose(extended=(True, True, True, True), tip_x=None, thumb_out=False):
    """
    Upright hand, wrist at the bottom. Extended fingers reach y=0.3,
    bent fingers curl back below their MCP.
    """
    tip_x = tip_x or FINGER_X
    points = [WRIST_XY] + THUMB_JOINTS + [THUMB_OUT if thumb_out else THUMB_TUCKED]

    for x, tx, ext in zip(FINGER_X, tip_x, extended):
        mcp = (x, 0.6)
        pip = (x, 0.5)
        if ext:
            dip = ((x + tx) / 2, 0.4)
            tip = (tx, 0.3)
        else:
            dip = (x, 0.56)
            tip = (x, 0.62)
        points += [mcp, pip, dip, tip]

    return HandPose(points=np.array(points))


@pytest.fixture
def paper_pose():
    return build_pose()


@pytest.fixture
def rock_pose():
    return build_pose(extended=(False, False, False, False))


@pytest.fixture
def scissors_pose():
    return build_pose(extended=(True, True, False, False), tip_x=[0.40, 0.46, 0.54, 0.62])


@pytest.fixture
def spock_pose():
    return build_pose(tip_x=[0.40, 0.45, 0.62, 0.67], thumb_out=True)


@pytest.fixture
def lizard_pose():
    return build_pose(extended=(True, False, False, False), thumb_out=True)
