"""
Visibility Monitoring Module
Reports a violation when the monitored window stops being visible
"""

from .config import TAB_SWITCH_MESSAGE


class VisibilityMonitor:
    """
    Edge-triggered tab/window switch detector.

    One violation per visible -> hidden transition, reported immediately
    (no dwell time). Staying hidden does not report again.
    """

    def __init__(self, aggregator, message=TAB_SWITCH_MESSAGE):
        self.aggregator = aggregator
        self.message = message
        self._hidden = False
        self.switch_count = 0

    @property
    def hidden(self):
        return self._hidden

    def on_visibility_change(self, hidden):
        """
        Feed the host visibility state (event or polled value).

        Args:
            hidden: True if the window is currently not visible

        Returns:
            True if a violation was reported
        """
        hidden = bool(hidden)
        was_hidden = self._hidden
        self._hidden = hidden
        if not hidden or was_hidden:
            return False

        self.switch_count += 1
        print(f"[TAB SWITCH] Window hidden (#{self.switch_count})")
        self.aggregator.report_violation(self.message)
        return True

    def reset(self):
        self._hidden = False
        self.switch_count = 0
