"""Records shown by the TUI: projects, tasks, actions, schedules and key presses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

TIME_LAYOUT = "%Y-%m-%d %H:%M:%S"


class ActionStatus(str, Enum):
    """Lifecycle states of an action."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    DISPATCHED = "dispatched"

    def __str__(self) -> str:
        return self.value


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""

    OPEN = "open"
    DONE = "done"
    ARCHIVED = "archived"

    def __str__(self) -> str:
        return self.value


@dataclass
class Project:
    """A project that groups tasks."""

    id: int
    name: str
    work_dir: str = ""
    dispatch_enabled: bool = True
    created_at: str = ""


@dataclass
class Task:
    """A unit of work inside a project."""

    id: int
    project_id: int
    title: str
    status: str = TaskStatus.OPEN
    metadata: str = "{}"
    created_at: str = ""
    updated_at: str = ""

    def matches_date(self, date: str) -> bool:
        """Whether the task was created or last updated on the given YYYY-MM-DD date."""
        return any(
            stamp.startswith(date)
            for stamp in (self.created_at, self.updated_at)
            if stamp
        )


@dataclass
class Action:
    """A single step run for a task."""

    id: int
    task_id: int
    title: str
    status: str = ActionStatus.PENDING
    metadata: str = "{}"
    result: str | None = None
    session_id: str | None = None
    tmux_pane: str | None = None
    created_at: str = ""
    completed_at: str | None = None

    def has_result(self) -> bool:
        """Whether the action carries a non-empty result."""
        return bool(self.result)


@dataclass
class Schedule:
    """A cron-driven schedule."""

    id: int
    title: str
    cron_expr: str
    enabled: bool = True
    created_at: str = ""
    last_run_at: str | None = None


@dataclass(frozen=True)
class Key:
    """A key press, named like "q", "ctrl+c", "tab", "enter", "esc", "up"."""

    name: str


def format_local(timestamp: str) -> str:
    """Convert a stored UTC timestamp to local time; unparsable input is returned as is."""
    try:
        parsed = datetime.strptime(timestamp, TIME_LAYOUT)
    except (TypeError, ValueError):
        return timestamp
    return parsed.replace(tzinfo=timezone.utc).astimezone().strftime(TIME_LAYOUT)