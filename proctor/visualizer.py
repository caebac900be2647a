"""
Visualization Module
Draws landmark guides, the warning banner and the diagnostics readout
"""

import cv2
import numpy as np

from .config import FINAL_WARNING_MESSAGE
from .feature_extractor import (
    LEFT_EYE_CONTOUR,
    RIGHT_EYE_CONTOUR,
    LEFT_EYE_OUTER,
    RIGHT_EYE_OUTER,
    LEFT_EYE_UPPER,
    LEFT_EYE_LOWER,
    RIGHT_EYE_UPPER,
    RIGHT_EYE_LOWER,
    NOSE_TIP,
)


def draw_eye_contours(frame, landmarks, color=(255, 255, 0), thickness=1):
    """Draw closed outlines around both eyes."""
    for indices in (LEFT_EYE_CONTOUR, RIGHT_EYE_CONTOUR):
        pts = np.array([landmarks[i] for i in indices], dtype=np.int32).reshape((-1, 1, 2))
        cv2.polylines(frame, [pts], isClosed=True, color=color, thickness=thickness)


def draw_guides(frame, landmarks):
    """
    Draw the measurement lines used by the detectors.

    - Green: outer eye corners and eye-midpoint-to-nose
    - Red: eye openness (upper to lower lid)
    """
    def pt(i):
        x, y = landmarks[i]
        return int(x), int(y)

    lx, ly = pt(LEFT_EYE_OUTER)
    rx, ry = pt(RIGHT_EYE_OUTER)
    mid = ((lx + rx) // 2, (ly + ry) // 2)

    cv2.line(frame, (lx, ly), (rx, ry), (0, 255, 0), 1)
    cv2.line(frame, mid, pt(NOSE_TIP), (0, 255, 0), 1)
    cv2.line(frame, pt(LEFT_EYE_UPPER), pt(LEFT_EYE_LOWER), (0, 0, 255), 1)
    cv2.line(frame, pt(RIGHT_EYE_UPPER), pt(RIGHT_EYE_LOWER), (0, 0, 255), 1)


def draw_landmarks(frame, batch, eye_contours=True):
    """Draw measurement guides (and eye contours) for the first face of a batch."""
    if not batch:
        return
    landmarks = batch[0]
    try:
        if eye_contours:
            draw_eye_contours(frame, landmarks)
        draw_guides(frame, landmarks)
    except (IndexError, KeyError, TypeError, ValueError):
        # Incomplete landmark set: nothing to draw this frame
        return


def draw_overlay(frame, warning_message, stats_text, violation_tally=0, final_threshold=3):
    """
    Draw warning banner, tally and stats on the frame.

    Args:
        frame: BGR image frame
        warning_message: Current warning text ("" when nothing to show)
        stats_text: Multi-line diagnostics readout
        violation_tally: Violations since the last final warning
        final_threshold: Tally that triggers the final warning
    """
    # Stats in the top-left, black for readability on light backgrounds
    y = 25
    for line in stats_text.splitlines():
        # Hershey fonts have no degree sign
        cv2.putText(frame, line.replace("°", " deg"), (10, y),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 0, 0), 1)
        y += 20

    tally_color = (0, 0, 255) if violation_tally > 0 else (0, 160, 0)
    cv2.putText(frame, f"Warnings: {violation_tally}/{final_threshold}", (10, y + 5),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, tally_color, 1)

    if not warning_message:
        return

    if warning_message == FINAL_WARNING_MESSAGE:
        text_color = (0, 0, 255)   # Red
        thickness = 3
    else:
        text_color = (0, 165, 255) # Orange
        thickness = 2

    banner_y = frame.shape[0] - 30
    text_size = cv2.getTextSize(warning_message, cv2.FONT_HERSHEY_SIMPLEX, 0.7, thickness)[0]
    cv2.rectangle(
        frame,
        (10, banner_y - text_size[1] - 5),
        (10 + text_size[0] + 10, banner_y + 5),
        (0, 0, 0),
        -1,
    )
    cv2.putText(frame, warning_message, (15, banner_y),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, text_color, thickness)
