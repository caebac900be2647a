"""
Geometric Feature Extraction Module
Computes eye distance, eye openness and head angle from face landmarks
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

# MediaPipe Face Mesh landmark indices
LEFT_EYE_OUTER = 33
RIGHT_EYE_OUTER = 263
LEFT_EYE_UPPER = 159
LEFT_EYE_LOWER = 145
RIGHT_EYE_UPPER = 386
RIGHT_EYE_LOWER = 374
NOSE_TIP = 4

REQUIRED_INDICES = (
    LEFT_EYE_OUTER,
    RIGHT_EYE_OUTER,
    LEFT_EYE_UPPER,
    LEFT_EYE_LOWER,
    RIGHT_EYE_UPPER,
    RIGHT_EYE_LOWER,
    NOSE_TIP,
)

# Contours used only for drawing
LEFT_EYE_CONTOUR = [33, 160, 159, 158, 133, 153, 145, 144]
RIGHT_EYE_CONTOUR = [263, 387, 386, 385, 362, 380, 374, 373]
NOSE_POINTS = [4, 6, 168, 197]


@dataclass(frozen=True)
class FeatureVector:
    """Per-tick geometric features of the primary face."""
    inter_eye_distance: float
    left_eye_openness: float
    right_eye_openness: float
    head_angle_degrees: float
    face_count: int = 1

    @property
    def avg_eye_openness(self) -> float:
        return (self.left_eye_openness + self.right_eye_openness) / 2.0


def distance(p, q) -> float:
    """Euclidean distance between two (x, y) points."""
    return float(np.linalg.norm(np.asarray(p, dtype=np.float64) - np.asarray(q, dtype=np.float64)))


def calculate_eye_openness(upper_lid, lower_lid) -> float:
    """Vertical openness of one eye: distance between upper and lower lid."""
    return distance(upper_lid, lower_lid)


def calculate_face_angle(left_outer, right_outer, nose_tip) -> float:
    """
    Calculate head angle from the eye-midpoint-to-nose vector.

    A frontal face gives roughly 0 degrees; the vector rotates as the head
    turns or tilts away from the camera.

    Args:
        left_outer: (x, y) of the left eye outer corner
        right_outer: (x, y) of the right eye outer corner
        nose_tip: (x, y) of the nose tip

    Returns:
        Angle in degrees, normalized to (-90, 90]
    """
    eye_mid_x = (left_outer[0] + right_outer[0]) / 2.0
    eye_mid_y = (left_outer[1] + right_outer[1]) / 2.0

    vec_x = nose_tip[0] - eye_mid_x
    vec_y = nose_tip[1] - eye_mid_y

    angle = math.degrees(math.atan2(vec_y, vec_x)) - 90.0
    if angle < -90.0:
        angle += 180.0
    if angle > 90.0:
        angle -= 180.0
    return angle


def _point(landmarks, idx):
    """Fetch one landmark as an (x, y) float tuple, or None if unusable."""
    try:
        pt = landmarks[idx]
    except (IndexError, KeyError, TypeError):
        return None
    if pt is None:
        return None
    try:
        x, y = float(pt[0]), float(pt[1])
    except (IndexError, TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def extract_features(landmarks, face_count: int = 1) -> Optional[FeatureVector]:
    """
    Compute the feature vector for one landmark set.

    Args:
        landmarks: Indexable collection of (x, y) pixel points (list or dict)
        face_count: Number of faces in the batch this set came from

    Returns:
        FeatureVector, or None if any required landmark is missing/malformed
    """
    if landmarks is None:
        return None

    points = {}
    for idx in REQUIRED_INDICES:
        pt = _point(landmarks, idx)
        if pt is None:
            return None
        points[idx] = pt

    return FeatureVector(
        inter_eye_distance=distance(points[LEFT_EYE_OUTER], points[RIGHT_EYE_OUTER]),
        left_eye_openness=calculate_eye_openness(points[LEFT_EYE_UPPER], points[LEFT_EYE_LOWER]),
        right_eye_openness=calculate_eye_openness(points[RIGHT_EYE_UPPER], points[RIGHT_EYE_LOWER]),
        head_angle_degrees=calculate_face_angle(
            points[LEFT_EYE_OUTER], points[RIGHT_EYE_OUTER], points[NOSE_TIP]
        ),
        face_count=face_count,
    )


def extract_batch_features(batch: Optional[Sequence]) -> Optional[FeatureVector]:
    """Features of the first face in a detection batch (single-subject assumption)."""
    if not batch:
        return None
    return extract_features(batch[0], face_count=len(batch))


def format_stats(face_count: int, features: Optional[FeatureVector]) -> str:
    """Diagnostics readout, one metric per line."""
    lines = [f"Faces Detected: {face_count}"]
    if features is not None:
        lines.append(f"Eye Distance: {features.inter_eye_distance:.1f}px")
        lines.append(f"Face Angle: {features.head_angle_degrees:.1f}°")
        lines.append(f"Eye Openness: {features.avg_eye_openness:.1f}px")
    return "\n".join(lines)
