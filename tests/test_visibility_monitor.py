"""
Visibility Monitor Tests
========================
One violation per visible -> hidden transition, no debouncing.
"""

from __future__ import annotations

from proctor.config import TAB_SWITCH_MESSAGE
from proctor.visibility_monitor import VisibilityMonitor


def test_hide_transition_reports_immediately(aggregator):
    monitor = VisibilityMonitor(aggregator)
    assert monitor.on_visibility_change(True) is True
    assert aggregator.violation_tally == 1
    assert aggregator.current_message == TAB_SWITCH_MESSAGE


def test_staying_hidden_reports_once(aggregator):
    monitor = VisibilityMonitor(aggregator)
    results = [monitor.on_visibility_change(True) for _ in range(5)]
    assert results == [True, False, False, False, False]
    assert aggregator.violation_tally == 1
    assert monitor.hidden is True


def test_visible_signal_never_reports(aggregator):
    monitor = VisibilityMonitor(aggregator)
    assert monitor.on_visibility_change(False) is False
    assert aggregator.violation_tally == 0


def test_each_new_transition_reports_again(aggregator):
    monitor = VisibilityMonitor(aggregator)
    for hidden in (True, False, True, True, False, True):
        monitor.on_visibility_change(hidden)
    assert monitor.switch_count == 3


def test_third_switch_escalates_to_final_warning(aggregator):
    from proctor.config import FINAL_WARNING_MESSAGE

    monitor = VisibilityMonitor(aggregator)
    for hidden in (True, False, True, False, True):
        monitor.on_visibility_change(hidden)
    assert aggregator.current_message == FINAL_WARNING_MESSAGE
    assert aggregator.violation_tally == 0


def test_reset_forgets_hidden_state(aggregator):
    monitor = VisibilityMonitor(aggregator)
    monitor.on_visibility_change(True)
    monitor.reset()
    assert monitor.on_visibility_change(True) is True
