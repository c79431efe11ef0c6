"""Tests for stackctl data models."""

from stackctl.models import DiffResult, StackStatus, is_failure_status
from tests.conftest import make_event


def test_stack_status_values():
    """Test StackStatus enum has correct AWS API values."""
    assert StackStatus.CREATE_COMPLETE.value == "CREATE_COMPLETE"
    assert StackStatus.UPDATE_ROLLBACK_COMPLETE.value == "UPDATE_ROLLBACK_COMPLETE"
    assert StackStatus("DELETE_FAILED") == "DELETE_FAILED"


def test_stack_level_complete_and_failed_events_are_terminal():
    for status in ("CREATE_COMPLETE", "UPDATE_COMPLETE", "DELETE_COMPLETE", "CREATE_FAILED",
                   "UPDATE_ROLLBACK_COMPLETE", "DELETE_FAILED"):
        assert make_event("e", "demo", status).is_terminal, status


def test_in_progress_events_are_not_terminal():
    for status in ("CREATE_IN_PROGRESS", "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS",
                   "UPDATE_ROLLBACK_COMPLETE_CLEANUP_IN_PROGRESS"):
        assert not make_event("e", "demo", status).is_terminal, status


def test_resource_events_are_never_terminal():
    event = make_event("e", "MyQueue", "CREATE_COMPLETE")

    assert not event.is_stack_event
    assert not event.is_terminal


def test_failure_statuses():
    assert is_failure_status("CREATE_FAILED")
    assert is_failure_status("ROLLBACK_COMPLETE")
    assert is_failure_status("UPDATE_ROLLBACK_COMPLETE")
    assert not is_failure_status("CREATE_COMPLETE")
    assert not is_failure_status("DELETE_COMPLETE")


def test_diff_result_identical():
    assert DiffResult(subject="template").identical
    assert not DiffResult(subject="template", lines=["-a", "+b"]).identical
    assert not DiffResult(subject="parameters", skipped=True).identical
