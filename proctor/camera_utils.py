"""
Camera Utilities Module
Opens the webcam and reads frames with retry / re-open handling
"""

import itertools
import time

import cv2

from .config import (
    CAMERA_INDEX,
    CAMERA_BACKEND,
    CAMERA_SCAN_COUNT,
    FRAME_WIDTH,
    FRAME_HEIGHT,
    TARGET_FPS,
)

# Backend names accepted in PROCTOR_CAMERA_BACKEND, in AUTO scan order
_NAMED_BACKENDS = {"DSHOW": "CAP_DSHOW", "MSMF": "CAP_MSMF"}


def backend_candidates(backend=CAMERA_BACKEND):
    """
    Capture backends to try; None stands for OpenCV's default.

    An explicit DSHOW/MSMF choice is used alone when this OpenCV build has it,
    AUTO tries every available named backend and then the default.
    """
    attr = _NAMED_BACKENDS.get(str(backend).upper())
    if attr and hasattr(cv2, attr):
        return [getattr(cv2, attr)]
    available = [getattr(cv2, a) for a in _NAMED_BACKENDS.values() if hasattr(cv2, a)]
    return available + [None]


def scan_order(index, scan_count):
    """Preferred index first, then the remaining 0..scan_count-1."""
    return [index] + [i for i in range(scan_count) if i != index]


def _try_open(idx, backend, warmup_reads=10):
    """Open one device and wait for a first frame; None if it stays dark."""
    cap = cv2.VideoCapture(idx) if backend is None else cv2.VideoCapture(idx, backend)
    if not cap.isOpened():
        cap.release()
        return None

    for prop, value in ((cv2.CAP_PROP_FRAME_WIDTH, FRAME_WIDTH),
                        (cv2.CAP_PROP_FRAME_HEIGHT, FRAME_HEIGHT),
                        (cv2.CAP_PROP_FPS, TARGET_FPS)):
        cap.set(prop, value)

    for _ in range(warmup_reads):
        if cap.read()[0]:
            return cap
        time.sleep(0.05)
    cap.release()
    return None


def open_camera(index=CAMERA_INDEX, scan_count=CAMERA_SCAN_COUNT):
    """
    Open the first camera that delivers frames.

    Raises:
        RuntimeError: If no (backend, index) pair yields a frame
    """
    indices = scan_order(index, scan_count)
    backends = backend_candidates()

    failures = []
    for backend, idx in itertools.product(backends, indices):
        try:
            cap = _try_open(idx, backend)
        except cv2.error as e:
            failures.append(f"index {idx}: {e}")
            continue
        if cap is not None:
            print(f"Camera opened: index={idx}, backend={'DEFAULT' if backend is None else backend}")
            return cap

    lines = [
        "Error: No camera delivered frames.",
        f"Tried indices {indices} on backends {['DEFAULT' if b is None else b for b in backends]}.",
        "Check that no other application holds the camera, then try",
        "PROCTOR_CAMERA_INDEX=<n> or, on Windows, PROCTOR_CAMERA_BACKEND=DSHOW|MSMF.",
    ]
    lines.extend(failures[-1:])
    raise RuntimeError("\n".join(lines))


class FrameReader:
    """
    Reads frames and rides out camera glitches.

    - First few failures: silent retry
    - Moderate failures: throttled warning
    - Many failures: re-open the camera
    """

    SILENT_RETRIES = 5
    WARN_RETRIES = 20
    WARN_INTERVAL_SECONDS = 5.0

    def __init__(self, cap, reopen=open_camera):
        self.cap = cap
        self._reopen = reopen
        self.consecutive_failures = 0
        self.last_warning_time = 0.0

    def read(self):
        """
        Read one frame.

        Returns:
            BGR frame, or None if this attempt failed (caller should try again)

        Raises:
            RuntimeError: If the camera cannot be re-opened
        """
        ret, frame = self.cap.read()
        if ret and frame is not None and frame.size > 0:
            self.consecutive_failures = 0
            self.last_warning_time = 0.0
            return frame

        self.consecutive_failures += 1

        if self.consecutive_failures <= self.SILENT_RETRIES:
            time.sleep(0.01)
            return None

        if self.consecutive_failures <= self.WARN_RETRIES:
            now = time.time()
            if now - self.last_warning_time > self.WARN_INTERVAL_SECONDS:
                print(f"Warning: Camera glitch detected ({self.consecutive_failures} failures), retrying...")
                self.last_warning_time = now
            time.sleep(0.05)
            return None

        print("Error: Camera appears stuck, attempting to re-open...")
        self.cap.release()
        time.sleep(0.5)
        self.cap = self._reopen()
        self.consecutive_failures = 0
        self.last_warning_time = 0.0
        print("Camera successfully re-opened, resuming...")
        return None

    def release(self):
        self.cap.release()
