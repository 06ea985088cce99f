from datetime import datetime

from taskqueue_tui.models import (
    TIME_LAYOUT,
    Action,
    ActionStatus,
    Key,
    Project,
    Task,
    TaskStatus,
    format_local,
)


def test_status_enums_format_as_their_value():
    assert str(ActionStatus.DISPATCHED) == "dispatched"
    assert f"{TaskStatus.ARCHIVED}" == "archived"
    assert ActionStatus.DONE == "done"
    assert TaskStatus("open") is TaskStatus.OPEN


def test_task_matches_date_on_created_or_updated():
    task = Task(1, 1, "t", created_at="2025-01-01 10:00:00", updated_at="2025-01-03 08:00:00")
    assert task.matches_date("2025-01-01")
    assert task.matches_date("2025-01-03")
    assert not task.matches_date("2025-01-02")


def test_task_without_timestamps_matches_nothing():
    assert not Task(1, 1, "t").matches_date("2025-01-01")


def test_action_has_result():
    assert Action(1, 1, "a", result="ok").has_result()
    assert not Action(1, 1, "a", result="").has_result()
    assert not Action(1, 1, "a").has_result()


def test_defaults():
    project = Project(1, "immedio")
    assert project.dispatch_enabled is True
    assert Task(1, 1, "t").status == TaskStatus.OPEN
    assert Action(1, 1, "a").status == ActionStatus.PENDING


def test_key_equality_and_hashing():
    assert Key("q") == Key("q")
    assert {Key("j"), Key("j"), Key("k")} == {Key("j"), Key("k")}


def test_format_local_invalid_is_unchanged():
    assert format_local("not a time") == "not a time"
    assert format_local("") == ""


def test_format_local_keeps_layout_and_spacing():
    first = format_local("2025-01-10 00:00:00")
    second = format_local("2025-01-10 01:30:00")
    a = datetime.strptime(first, TIME_LAYOUT)
    b = datetime.strptime(second, TIME_LAYOUT)
    assert (b - a).total_seconds() == 5400
    assert len(first) == len("2025-01-10 00:00:00")