"""
Configuration file for all attentiveness monitoring thresholds and settings

Every value can be overridden from the environment (or a .env file),
e.g. PROCTOR_HEAD_ANGLE_THRESHOLD_DEGREES=25
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env(name, default, cast=float):
    raw = os.getenv(f"PROCTOR_{name}")
    if raw is None or raw == "":
        return default
    if cast is bool:
        value = raw.strip().lower()
        if value in ("1", "true", "yes", "on"):
            return True
        if value in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"PROCTOR_{name} must be a boolean, got {raw!r}")
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"PROCTOR_{name} must be {cast.__name__}, got {raw!r}")


# Detection cadence
TICK_INTERVAL_SECONDS = _env("TICK_INTERVAL_SECONDS", 1.0)   # Detectors run once per tick
DWELL_THRESHOLD_TICKS = _env("DWELL_THRESHOLD_TICKS", 2, int) # Fires when count > threshold (3rd consecutive tick)

# Looking away (head angle from nose vs. eye midpoint)
HEAD_ANGLE_THRESHOLD_DEGREES = _env("HEAD_ANGLE_THRESHOLD_DEGREES", 30.0)

# Looking away (outer eye corner distance, also a rough distance-to-camera proxy)
EYE_DISTANCE_MIN_PX = _env("EYE_DISTANCE_MIN_PX", 100.0)

# Eyes closed (lid-to-lid distance, both eyes)
EYE_CLOSED_THRESHOLD_PX = _env("EYE_CLOSED_THRESHOLD_PX", 5.0)

# Warning escalation
FINAL_WARNING_TALLY = _env("FINAL_WARNING_TALLY", 3, int)            # Violations before the final warning
WARNING_DISPLAY_SECONDS = _env("WARNING_DISPLAY_SECONDS", 3.0)       # Auto-clear delay for a warning
REFRESH_CLEAR_ON_VIOLATION = _env("REFRESH_CLEAR_ON_VIOLATION", True, bool)
STARTUP_MESSAGE_SECONDS = _env("STARTUP_MESSAGE_SECONDS", 2.0)

# Warning texts
MULTIPLE_FACES_MESSAGE = "WARNING: Multiple faces detected!"
LOOKING_AWAY_MESSAGE = "WARNING: Looking away from screen!"
EYES_CLOSED_MESSAGE = "WARNING: Eyes closed for too long!"
TAB_SWITCH_MESSAGE = "WARNING: Tab switching detected!"
FINAL_WARNING_MESSAGE = "FINAL WARNING: Exam may be terminated!"
STARTUP_MESSAGE = "Camera monitoring started"

# Face mesh settings
MAX_NUM_FACES = _env("MAX_NUM_FACES", 4, int)  # Must be > 1 so extra faces can be counted
MIN_DETECTION_CONFIDENCE = 0.5
MIN_TRACKING_CONFIDENCE = 0.5

# Camera settings
CAMERA_INDEX = _env("CAMERA_INDEX", 0, int)
FRAME_WIDTH = 640
FRAME_HEIGHT = 480
TARGET_FPS = 30

# Camera backend (mainly for Windows reliability)
# Options: "AUTO", "DSHOW", "MSMF"
CAMERA_BACKEND = _env("CAMERA_BACKEND", "AUTO", str)

# How many camera indices to scan if CAMERA_INDEX fails (0..N-1)
CAMERA_SCAN_COUNT = 4

# Visualization settings
WINDOW_NAME = "Exam Proctor"
DRAW_EYE_CONTOURS = _env("DRAW_EYE_CONTOURS", True, bool)

# Audio cue on final warning (pygame, best-effort)
AUDIO_ALERTS_ENABLED = _env("AUDIO_ALERTS_ENABLED", True, bool)
