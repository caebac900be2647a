"""
Behavior Detector Tests
=======================
Debounced edge-trigger behavior of the shared detector state machine
and the four configured detector instances.
"""

from __future__ import annotations

import pytest

from proctor.behavior_detector import (
    DwellDetector,
    multiple_faces_detector,
    gaze_angle_detector,
    gaze_proximity_detector,
    eyes_closed_detector,
    build_feature_detectors,
)
from proctor.config import (
    MULTIPLE_FACES_MESSAGE,
    LOOKING_AWAY_MESSAGE,
    EYES_CLOSED_MESSAGE,
)
from proctor.feature_extractor import FeatureVector


class RecordingAggregator:
    def __init__(self):
        self.messages = []

    def report_violation(self, message):
        self.messages.append(message)


def _features(distance=140.0, left=10.0, right=10.0, angle=0.0):
    return FeatureVector(distance, left, right, angle)


def _flag_detector(threshold, aggregator=None):
    return DwellDetector("flag", bool, "flagged", threshold, aggregator)


def _run(detector, signals):
    return [detector.update(s) for s in signals]


# ─── Dwell / edge-trigger properties ──────────────────────────

@pytest.mark.parametrize("threshold", [0, 1, 2, 5])
def test_fires_once_after_threshold_plus_one_ticks(threshold):
    det = _flag_detector(threshold)
    results = _run(det, [True] * (threshold + 1))
    assert results == [False] * threshold + [True]
    assert det.count == 0


@pytest.mark.parametrize("threshold", [1, 2, 5])
def test_threshold_ticks_then_false_never_fires(threshold):
    det = _flag_detector(threshold)
    results = _run(det, [True] * threshold + [False])
    assert not any(results)
    assert det.count == 0


def test_refire_needs_a_fresh_full_episode():
    det = _flag_detector(2)
    assert _run(det, [True, True, True]) == [False, False, True]
    assert det.update(False) is False
    assert _run(det, [True, True]) == [False, False]
    assert det.update(True) is True


def test_persistent_condition_fires_every_threshold_plus_one_ticks():
    """Edge-triggered: a condition that never ends fires once per episode."""
    det = _flag_detector(2)
    results = _run(det, [True] * 9)
    assert [i for i, fired in enumerate(results) if fired] == [2, 5, 8]
    assert det.fire_count == 3


def test_hold_keeps_counter():
    det = _flag_detector(2)
    det.update(True)
    det.update(True)
    det.hold()
    assert det.count == 2
    assert det.update(True) is True


def test_reset_zeroes_counter():
    det = _flag_detector(2)
    det.update(True)
    det.reset()
    assert det.count == 0


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        _flag_detector(-1)


def test_fired_violation_reaches_aggregator():
    agg = RecordingAggregator()
    det = _flag_detector(0, agg)
    det.update(True)
    det.update(False)
    assert agg.messages == ["flagged"]


# ─── Configured detectors ─────────────────────────────────────

def test_head_angle_sequence_fires_on_fourth_tick():
    """Angles [10, 40, 45, 50, 5]: three consecutive > 30 fire on tick 4."""
    det = gaze_angle_detector(dwell_threshold=2, angle_threshold=30.0)
    counts = []
    fired = []
    for angle in [10, 40, 45, 50, 5]:
        fired.append(det.update(_features(angle=angle)))
        counts.append(det.count)
    assert fired == [False, False, False, True, False]
    assert counts == [0, 1, 2, 0, 0]


def test_negative_head_angle_counts_as_looking_away():
    det = gaze_angle_detector(dwell_threshold=0)
    assert det.update(_features(angle=-35.0)) is True
    assert det.update(_features(angle=-30.0)) is False


def test_face_count_sequence_fires_on_third_extra_face():
    """Face counts [1, 2, 2, 2, 1]: fires on the 3rd consecutive count > 1."""
    agg = RecordingAggregator()
    det = multiple_faces_detector(agg, dwell_threshold=2)
    fired = _run(det, [1, 2, 2, 2, 1])
    assert fired == [False, False, False, True, False]
    assert agg.messages == [MULTIPLE_FACES_MESSAGE]


def test_proximity_detector_uses_eye_distance():
    det = gaze_proximity_detector(dwell_threshold=0, min_eye_distance=100.0)
    assert det.update(_features(distance=99.9)) is True
    assert det.update(_features(distance=100.0)) is False
    assert det.message == LOOKING_AWAY_MESSAGE


def test_eyes_closed_requires_both_eyes():
    det = eyes_closed_detector(dwell_threshold=0, closed_threshold=5.0)
    assert det.update(_features(left=2.0, right=8.0)) is False
    assert det.update(_features(left=8.0, right=2.0)) is False
    assert det.update(_features(left=2.0, right=3.0)) is True
    assert det.message == EYES_CLOSED_MESSAGE


def test_angle_and_proximity_keep_independent_counters():
    angle_det, proximity_det, _ = build_feature_detectors(dwell_threshold=2)
    turned = _features(angle=40.0)
    far = _features(distance=80.0)
    angle_det.update(turned)
    proximity_det.update(turned)
    angle_det.update(far)
    proximity_det.update(far)
    assert angle_det.count == 0
    assert proximity_det.count == 1


def test_default_detectors_use_configured_thresholds():
    angle_det, proximity_det, eyes_det = build_feature_detectors()
    assert angle_det.dwell_threshold == 2
    assert [d.name for d in (angle_det, proximity_det, eyes_det)] == [
        "gaze_angle", "gaze_proximity", "eyes_closed",
    ]
