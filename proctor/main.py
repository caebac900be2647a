"""
Main Entry Point for the Modular Exam Proctor

Each concern lives in its own module:
- face_detector.py: MediaPipe face landmarks (multi-face)
- feature_extractor.py: eye distance, eye openness, head angle
- behavior_detector.py: debounced looking-away / eyes-closed / multiple-faces detectors
- warning_aggregator.py: shared warning tally, messages and final warning
- visibility_monitor.py: window hidden (tab switch) detection
- attention_monitor.py: 1 Hz detection tick wiring
- visualizer.py: overlay drawing
- camera_utils.py: camera handling
- config.py: all configuration constants

Run with: python -m proctor.main
"""

import time

import cv2

from .config import (
    WINDOW_NAME,
    DRAW_EYE_CONTOURS,
    TICK_INTERVAL_SECONDS,
    STARTUP_MESSAGE,
    STARTUP_MESSAGE_SECONDS,
)
from .camera_utils import open_camera, FrameReader
from .face_detector import FaceDetector
from .warning_aggregator import WarningAggregator
from .attention_monitor import AttentionMonitor, TickClock
from .visibility_monitor import VisibilityMonitor
from .visualizer import draw_landmarks, draw_overlay


def window_hidden(window_name):
    """True if the display window is closed, minimized or otherwise not visible."""
    try:
        return cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE) < 1
    except cv2.error:
        return True


def main():
    """Main capture / detection loop."""
    print("Starting Exam Proctor (attentiveness monitor)...")
    print("=" * 70)
    print("Checks (once per second, warning after 3 consecutive seconds):")
    print("  - Multiple faces")
    print("  - Looking away (head angle / eye distance)")
    print("  - Eyes closed")
    print("  - Window hidden (tab switching), reported immediately")
    print("Keys: q = quit, r = reset warnings")
    print("=" * 70)

    reader = FrameReader(open_camera())
    face_detector = FaceDetector()
    aggregator = WarningAggregator()
    monitor = AttentionMonitor(aggregator)
    visibility = VisibilityMonitor(aggregator)
    clock = TickClock(TICK_INTERVAL_SECONDS)

    aggregator.announce(STARTUP_MESSAGE, STARTUP_MESSAGE_SECONDS)

    frame_count = 0
    start_time = time.time()
    window_shown = False

    try:
        while True:
            frame = reader.read()
            if frame is None:
                continue

            batch = face_detector.detect(frame)
            monitor.submit_batch(batch)

            if clock.due(time.monotonic()):
                monitor.tick()

            draw_landmarks(frame, batch, eye_contours=DRAW_EYE_CONTOURS)
            state = aggregator.current_state()
            draw_overlay(
                frame,
                state.current_message,
                monitor.stats_text(),
                state.violation_tally,
                aggregator.final_threshold,
            )

            cv2.imshow(WINDOW_NAME, frame)
            if window_shown:
                visibility.on_visibility_change(window_hidden(WINDOW_NAME))
            window_shown = True

            frame_count += 1
            if frame_count % 30 == 0:
                elapsed = time.time() - start_time
                fps = frame_count / elapsed if elapsed > 0 else 0
                print(
                    f"FPS: {fps:.1f} | Faces: {len(batch)} | "
                    f"Warnings: {state.violation_tally}/{aggregator.final_threshold} | "
                    f"Final warnings: {state.final_warning_count}"
                )

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            elif key == ord('r'):
                monitor.reset()
                visibility.reset()
                clock.reset()
                print("Warnings manually reset")

    finally:
        aggregator.close()
        face_detector.close()
        reader.release()
        cv2.destroyAllWindows()
        print("Shutdown complete.")


if __name__ == "__main__":
    main()
