"""
Behavior Detection Module
Debounced edge-triggered detectors for suspicious behaviors

Every detector is the same state machine with a different predicate:
the condition must hold for more than `dwell_threshold` consecutive ticks,
then one violation is reported and the counter starts over.
"""

from .config import (
    DWELL_THRESHOLD_TICKS,
    HEAD_ANGLE_THRESHOLD_DEGREES,
    EYE_DISTANCE_MIN_PX,
    EYE_CLOSED_THRESHOLD_PX,
    MULTIPLE_FACES_MESSAGE,
    LOOKING_AWAY_MESSAGE,
    EYES_CLOSED_MESSAGE,
)


class DwellDetector:
    """
    Counts consecutive positive ticks and fires once per dwell episode.

    States:
    - IDLE: count == 0
    - ACCUMULATING: 0 < count <= dwell_threshold
    Fires when count exceeds dwell_threshold, then returns to IDLE.
    """

    def __init__(self, name, predicate, message, dwell_threshold=DWELL_THRESHOLD_TICKS, aggregator=None):
        """
        Initialize detector.

        Args:
            name: Short identifier used in console output
            predicate: Callable(signal) -> bool, True when the behavior is present
            message: Warning text reported when the detector fires
            dwell_threshold: Ticks the condition must hold before firing
            aggregator: Optional WarningAggregator receiving violations
        """
        if dwell_threshold < 0:
            raise ValueError("dwell_threshold must be >= 0")
        self.name = name
        self.predicate = predicate
        self.message = message
        self.dwell_threshold = dwell_threshold
        self.aggregator = aggregator
        self.count = 0
        self.fire_count = 0

    def update(self, signal):
        """
        Evaluate one tick.

        Args:
            signal: Value the predicate is evaluated on (FeatureVector or face count)

        Returns:
            True if a violation fired on this tick
        """
        if not self.predicate(signal):
            self.count = 0
            return False

        self.count += 1
        if self.count <= self.dwell_threshold:
            return False

        self.count = 0
        self.fire_count += 1
        print(f"[VIOLATION] {self.name}: {self.message}")
        if self.aggregator is not None:
            self.aggregator.report_violation(self.message)
        return True

    def hold(self):
        """No signal this tick: keep the counter as it is."""
        return False

    def reset(self):
        self.count = 0

    def __repr__(self):
        return f"DwellDetector({self.name!r}, count={self.count}, threshold={self.dwell_threshold})"


def multiple_faces_detector(aggregator=None, dwell_threshold=DWELL_THRESHOLD_TICKS):
    """More than one face in the batch. Signal is the face count."""
    return DwellDetector(
        "multiple_faces",
        lambda face_count: face_count > 1,
        MULTIPLE_FACES_MESSAGE,
        dwell_threshold,
        aggregator,
    )


def gaze_angle_detector(aggregator=None, dwell_threshold=DWELL_THRESHOLD_TICKS,
                        angle_threshold=HEAD_ANGLE_THRESHOLD_DEGREES):
    """Head turned more than angle_threshold degrees."""
    return DwellDetector(
        "gaze_angle",
        lambda features: abs(features.head_angle_degrees) > angle_threshold,
        LOOKING_AWAY_MESSAGE,
        dwell_threshold,
        aggregator,
    )


def gaze_proximity_detector(aggregator=None, dwell_threshold=DWELL_THRESHOLD_TICKS,
                            min_eye_distance=EYE_DISTANCE_MIN_PX):
    """Outer eye corners closer than min_eye_distance pixels (turned away or too far)."""
    return DwellDetector(
        "gaze_proximity",
        lambda features: features.inter_eye_distance < min_eye_distance,
        LOOKING_AWAY_MESSAGE,
        dwell_threshold,
        aggregator,
    )


def eyes_closed_detector(aggregator=None, dwell_threshold=DWELL_THRESHOLD_TICKS,
                         closed_threshold=EYE_CLOSED_THRESHOLD_PX):
    """Both eyes closed at the same time."""
    return DwellDetector(
        "eyes_closed",
        lambda features: (features.left_eye_openness < closed_threshold
                          and features.right_eye_openness < closed_threshold),
        EYES_CLOSED_MESSAGE,
        dwell_threshold,
        aggregator,
    )


def build_feature_detectors(aggregator=None, dwell_threshold=DWELL_THRESHOLD_TICKS):
    """The three detectors that need a FeatureVector."""
    return [
        gaze_angle_detector(aggregator, dwell_threshold),
        gaze_proximity_detector(aggregator, dwell_threshold),
        eyes_closed_detector(aggregator, dwell_threshold),
    ]
