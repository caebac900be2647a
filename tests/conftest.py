"""
Shared fixtures: synthetic Face Mesh landmark sets and a manual timer.
No camera, no landmark model needed.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

# Add project root to path
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from proctor.feature_extractor import (
    LEFT_EYE_OUTER,
    RIGHT_EYE_OUTER,
    LEFT_EYE_UPPER,
    LEFT_EYE_LOWER,
    RIGHT_EYE_UPPER,
    RIGHT_EYE_LOWER,
    NOSE_TIP,
)

MESH_SIZE = 478


def make_face(
    eye_distance: float = 140.0,
    angle: float = 0.0,
    left_open: float = 10.0,
    right_open: float = 10.0,
    center=(270.0, 200.0),
    nose_length: float = 60.0,
) -> list:
    """
    Build a full Face Mesh landmark list with controlled geometry.

    The nose tip is placed so that the eye-midpoint-to-nose vector gives
    exactly `angle` degrees.
    """
    cx, cy = center
    points = [(cx, cy)] * MESH_SIZE

    lx, rx = cx - eye_distance / 2.0, cx + eye_distance / 2.0
    points[LEFT_EYE_OUTER] = (lx, cy)
    points[RIGHT_EYE_OUTER] = (rx, cy)

    points[LEFT_EYE_UPPER] = (lx + 20.0, cy - left_open / 2.0)
    points[LEFT_EYE_LOWER] = (lx + 20.0, cy + left_open / 2.0)
    points[RIGHT_EYE_UPPER] = (rx - 20.0, cy - right_open / 2.0)
    points[RIGHT_EYE_LOWER] = (rx - 20.0, cy + right_open / 2.0)

    theta = math.radians(angle + 90.0)
    points[NOSE_TIP] = (cx + nose_length * math.cos(theta), cy + nose_length * math.sin(theta))
    return points


class ManualTimer:
    """Stand-in for threading.Timer that only runs when fire() is called."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        # Like threading.Timer, a cancelled timer never runs
        if not self.cancelled:
            self.function()


class TimerRecorder:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]

    def pending(self):
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def face():
    return make_face


@pytest.fixture
def timers():
    return TimerRecorder()


@pytest.fixture
def aggregator(timers):
    from proctor.warning_aggregator import WarningAggregator
    agg = WarningAggregator(
        final_threshold=3,
        display_seconds=3.0,
        refresh_on_violation=True,
        timer_factory=timers,
        audio=False,
    )
    yield agg
    agg.close()
