"""
Warning Escalation Module
Collects violations from every detector into one shared warning channel

- Each violation increments a tally and shows its message
- Messages clear automatically after a display duration
- Reaching the tally threshold shows the final warning and restarts the tally
"""

import sys
import threading
from array import array
from dataclasses import dataclass

try:
    import pygame
    pygame_available = True
except ImportError:
    pygame_available = False

from .config import (
    FINAL_WARNING_TALLY,
    WARNING_DISPLAY_SECONDS,
    REFRESH_CLEAR_ON_VIOLATION,
    FINAL_WARNING_MESSAGE,
    AUDIO_ALERTS_ENABLED,
)


def _beep(frequency_hz: int, duration_s: float):
    """
    Cross-platform beep:
    - Windows: winsound.Beep (blocking, so callers run it on a worker thread)
    - Else: pygame mixer tone
    """
    if sys.platform.startswith("win"):
        try:
            import winsound
            winsound.Beep(int(frequency_hz), int(duration_s * 1000))
            return
        except RuntimeError as e:
            print(f"Audio alert error: {e}")

    mixer_format = pygame.mixer.get_init() if pygame_available else None
    if not mixer_format:
        return

    sample_rate, _size, channels = mixer_format
    n_samples = int(duration_s * sample_rate)
    period = max(1, int(sample_rate / max(1, frequency_hz)))
    amp = 12000
    # Interleaved frames: one sample per mixer channel
    buf = array("h")
    for i in range(n_samples):
        buf.extend([amp if (i % period) < (period // 2) else -amp] * channels)
    try:
        pygame.mixer.Sound(buffer=buf.tobytes()).play()
    except pygame.error as e:
        print(f"Audio alert error: {e}")


@dataclass(frozen=True)
class WarningState:
    """Snapshot of the shared warning channel."""
    violation_tally: int
    current_message: str
    auto_clear_scheduled: bool
    final_warning_count: int


class WarningAggregator:
    """
    Shared counter and alert-message holder for all detectors.

    All state changes go through one lock, so detectors, the visibility
    monitor and the auto-clear timer thread can report concurrently.
    """

    def __init__(
        self,
        final_threshold=FINAL_WARNING_TALLY,
        display_seconds=WARNING_DISPLAY_SECONDS,
        refresh_on_violation=REFRESH_CLEAR_ON_VIOLATION,
        timer_factory=threading.Timer,
        audio=AUDIO_ALERTS_ENABLED,
    ):
        """
        Initialize aggregator.

        Args:
            final_threshold: Violations that trigger the final warning
            display_seconds: Seconds before a message is cleared
            refresh_on_violation: Restart a pending auto-clear on each new violation
            timer_factory: Callable(interval, function) returning a startable, cancelable timer
            audio: Play a tone on the final warning
        """
        if final_threshold < 1:
            raise ValueError("final_threshold must be >= 1")
        self.final_threshold = final_threshold
        self.display_seconds = display_seconds
        self.refresh_on_violation = refresh_on_violation
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._tally = 0
        self._message = ""
        self._clear_timer = None
        self._final_warning_count = 0
        self._listeners = []
        self.alert_thread = None

        self.audio_enabled = False
        if audio and pygame_available:
            try:
                pygame.mixer.init()
                self.audio_enabled = True
            except pygame.error:
                print("Warning: Audio alerts disabled (pygame mixer not available)")
        elif audio:
            print("Warning: pygame not available, audio alerts disabled")

    # -- presentation targets -------------------------------------------------

    def add_listener(self, callback):
        """Register callback(message) called on every message change."""
        with self._lock:
            self._listeners.append(callback)

    def remove_listener(self, callback):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify(self, listeners, message):
        """Call presentation targets outside the lock; a failing target never breaks detection."""
        for callback in listeners:
            try:
                callback(message)
            except Exception as e:
                print(f"Warning display error: {e}")

    # -- violations -----------------------------------------------------------

    def report_violation(self, message):
        """
        Record one violation and show its message.

        Args:
            message: Warning text for the violation

        Returns:
            True if this violation produced the final warning
        """
        with self._lock:
            self._tally += 1
            self._message = message
            self._schedule_clear(self.display_seconds, refresh=self.refresh_on_violation)
            print(f"[WARNING {self._tally}/{self.final_threshold}] {message}")

            final = self._tally >= self.final_threshold
            if final:
                self._tally = 0
                self._final_warning_count += 1
                self._message = FINAL_WARNING_MESSAGE
                print(f"[FINAL WARNING] {FINAL_WARNING_MESSAGE} (#{self._final_warning_count})")

            shown = self._message
            listeners = list(self._listeners)

        if final and self.audio_enabled:
            self.start_alert_sound()
        self._notify(listeners, shown)
        return final

    def announce(self, message, duration):
        """Show a status message that does not count as a violation."""
        with self._lock:
            self._message = message
            self._schedule_clear(duration, refresh=True)
            listeners = list(self._listeners)
        self._notify(listeners, message)

    def start_alert_sound(self):
        """Play the final-warning tone on a daemon thread so the caller never blocks."""
        self.alert_thread = threading.Thread(target=_beep, args=(1000, 0.3), daemon=True)
        self.alert_thread.start()

    # -- auto-clear -----------------------------------------------------------

    def _schedule_clear(self, delay, refresh):
        if self._clear_timer is not None:
            if not refresh:
                return
            self._clear_timer.cancel()

        timer = None

        def _clear():
            with self._lock:
                # A cancelled or replaced timer must not clear a newer message
                if self._clear_timer is not timer:
                    return
                self._clear_timer = None
                self._message = ""
                listeners = list(self._listeners)
            self._notify(listeners, "")

        timer = self._timer_factory(delay, _clear)
        timer.daemon = True
        self._clear_timer = timer
        timer.start()

    def _cancel_clear(self):
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._clear_timer = None

    # -- state ----------------------------------------------------------------

    @property
    def violation_tally(self):
        with self._lock:
            return self._tally

    @property
    def current_message(self):
        with self._lock:
            return self._message

    def current_state(self):
        with self._lock:
            return WarningState(
                violation_tally=self._tally,
                current_message=self._message,
                auto_clear_scheduled=self._clear_timer is not None,
                final_warning_count=self._final_warning_count,
            )

    def reset(self):
        """Start a new session: cancel the pending clear and drop tally and message."""
        with self._lock:
            self._cancel_clear()
            self._tally = 0
            self._final_warning_count = 0
            self._message = ""
            listeners = list(self._listeners)
        self._notify(listeners, "")
        print("[RESET] Warning tally cleared")

    def close(self):
        with self._lock:
            self._cancel_clear()
