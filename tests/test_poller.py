"""Tests for poller module"""

from http_inspector.poller import RefreshSchedule


def test_idle_schedule_never_refreshes():
    """Test that ticks before start are ignored"""
    assert RefreshSchedule().should_refresh(0, refresh_in_flight=False) is False


def test_started_schedule_refreshes_current_generation():
    """Test a tick from the active subscription"""
    schedule = RefreshSchedule().started()
    assert schedule.running is True
    assert schedule.should_refresh(schedule.generation, refresh_in_flight=False) is True


def test_tick_skipped_while_refresh_in_flight():
    """Test that ticks do not pile up behind a slow backend"""
    schedule = RefreshSchedule().started()
    assert schedule.should_refresh(schedule.generation, refresh_in_flight=True) is False


def test_stopped_schedule_ignores_late_ticks():
    """Test that a tick arriving after teardown issues nothing"""
    started = RefreshSchedule().started()
    stopped = started.stopped()
    assert stopped.running is False
    assert stopped.should_refresh(started.generation, refresh_in_flight=False) is False
    assert stopped.should_refresh(stopped.generation, refresh_in_flight=False) is False


def test_restart_invalidates_previous_generation():
    """Test that a remount replaces the earlier subscription"""
    first = RefreshSchedule().started()
    second = first.stopped().started()
    assert second.generation > first.generation
    assert second.should_refresh(first.generation, refresh_in_flight=False) is False
    assert second.should_refresh(second.generation, refresh_in_flight=False) is True
