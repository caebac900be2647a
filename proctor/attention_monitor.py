"""
Attention Monitoring Pipeline
Wires landmark batches -> features -> detectors on a fixed tick cadence
"""

import time

from .config import TICK_INTERVAL_SECONDS, DWELL_THRESHOLD_TICKS
from .feature_extractor import extract_batch_features, format_stats
from .behavior_detector import multiple_faces_detector, build_feature_detectors


class TickClock:
    """
    Fixed-rate ticker driven by the caller's clock.

    The render loop asks `due(now)` every frame; it answers True at most
    once per interval, so detection runs at its own cadence regardless of
    the frame rate.
    """

    def __init__(self, interval=TICK_INTERVAL_SECONDS):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.interval = interval
        self.next_tick = None
        self.tick_count = 0

    def due(self, now=None):
        if now is None:
            now = time.monotonic()
        if self.next_tick is None:
            self.next_tick = now + self.interval
            return False
        if now < self.next_tick:
            return False

        self.next_tick += self.interval
        # After a stall, re-arm from now instead of firing a burst of ticks
        if self.next_tick <= now:
            self.next_tick = now + self.interval
        self.tick_count += 1
        return True

    def reset(self):
        self.next_tick = None
        self.tick_count = 0


class AttentionMonitor:
    """
    Runs all behavior detectors once per tick.

    - Multiple faces uses only the batch length
    - Looking away (angle, proximity) and eyes closed use the first face's
      features; without usable landmarks they hold their counters
    """

    def __init__(self, aggregator, multiple_faces=None, feature_detectors=None,
                 dwell_threshold=DWELL_THRESHOLD_TICKS):
        """
        Initialize monitor.

        Args:
            aggregator: WarningAggregator receiving violations
            multiple_faces: Detector fed with the face count (default built from config)
            feature_detectors: Detectors fed with the FeatureVector (default built from config)
            dwell_threshold: Dwell threshold for the default detectors
        """
        self.aggregator = aggregator
        self.multiple_faces = multiple_faces or multiple_faces_detector(aggregator, dwell_threshold)
        if feature_detectors is None:
            feature_detectors = build_feature_detectors(aggregator, dwell_threshold)
        self.feature_detectors = list(feature_detectors)

        self.latest_batch = None
        self.latest_features = None
        self._fresh_batch = False
        self.tick_count = 0

    @property
    def detectors(self):
        return [self.multiple_faces] + self.feature_detectors

    def submit_batch(self, batch):
        """Store the newest face detection batch from the landmark source."""
        self.latest_batch = list(batch) if batch is not None else []
        self._fresh_batch = True

    def tick(self, batch=None):
        """
        Run one detection tick.

        Args:
            batch: Optional batch to submit before evaluating

        Returns:
            List of warning messages fired on this tick
        """
        if batch is not None:
            self.submit_batch(batch)

        current = self.latest_batch or []
        fired = []

        if self.multiple_faces.update(len(current)):
            fired.append(self.multiple_faces.message)

        features = extract_batch_features(current) if self._fresh_batch else None
        self.latest_features = features
        self._fresh_batch = False

        for detector in self.feature_detectors:
            if features is None:
                detector.hold()
            elif detector.update(features):
                fired.append(detector.message)

        self.tick_count += 1
        return fired

    def face_count(self):
        return len(self.latest_batch) if self.latest_batch else 0

    def stats_text(self):
        """Diagnostics readout for the latest batch."""
        features = extract_batch_features(self.latest_batch)
        return format_stats(self.face_count(), features)

    def reset(self):
        """New session: zero every detector and the warning channel."""
        for detector in self.detectors:
            detector.reset()
        self.latest_batch = None
        self.latest_features = None
        self._fresh_batch = False
        self.tick_count = 0
        self.aggregator.reset()
