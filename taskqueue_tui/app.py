"""Top-level TUI model: tabs, activity pane, background jobs and help line."""

from __future__ import annotations

import asyncio
import concurrent.futures
import queue
import threading
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable

from .help import HelpKey, format_help
from .log import LogEntry, wait_for_log
from .models import Key
from .schedules import SchedulesLoaded, SchedulesModel
from .styles import (
    STYLE_HELP,
    STYLE_MUTED,
    STYLE_TAB_ACTIVE,
    STYLE_TAB_INACTIVE,
    STYLE_WARNING,
)
from .tasks import ActionAttached, TasksLoaded, TasksMode, TasksModel

Command = Callable[[], Any]
BackgroundFunc = Callable[[threading.Event], None]

TICK_INTERVAL = 5.0
MAX_LOGS = 100
ACTIVITY_ROWS = 9
CHROME_ROWS = 14

_CANCELLED = (concurrent.futures.CancelledError, asyncio.CancelledError)


class Tab(Enum):
    """The tabs of the application."""

    TASKS = 0
    SCHEDULES = 1


@dataclass(frozen=True)
class WindowSize:
    """The terminal was resized."""

    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Periodic reload signal."""

    time: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class BackgroundStatus:
    """A background job finished, possibly with an error."""

    error: BaseException | None = None


@dataclass(frozen=True)
class Quit:
    """Request to stop the program."""


def _quit() -> Quit:
    return Quit()


def _tick() -> Tick:
    time.sleep(TICK_INTERVAL)
    return Tick()


def _commands(cmd: Command | None) -> list[Command]:
    return [] if cmd is None else [cmd]


class App:
    """Root model holding the tasks and schedules tabs.

    update() and init() return the list of commands to run; each command
    yields the next message to feed back into update().
    """

    def __init__(
        self,
        store: Any,
        log_queue: queue.Queue | None = None,
        *backgrounds: BackgroundFunc,
        cron_parser: Any = None,
    ) -> None:
        today = date.today().isoformat()
        self.active_tab = Tab.TASKS
        self.tasks = TasksModel(store, today)
        self.schedules = SchedulesModel(store, cron_parser)
        self.width = 0
        self.height = 0
        self.quitting = False
        self.stop_event = threading.Event()
        self.backgrounds = list(backgrounds)
        self.status_line = ""
        self.log_queue = log_queue
        self.logs: list[LogEntry] = []

    def _background_command(self, job: BackgroundFunc) -> Command:
        stop_event = self.stop_event

        def command() -> BackgroundStatus:
            try:
                job(stop_event)
            except (Exception, asyncio.CancelledError) as err:
                return BackgroundStatus(err)
            return BackgroundStatus()

        return command

    def init(self) -> list[Command]:
        """Initial commands: load both tabs, start ticking, logs and background jobs."""
        cmds = [self.tasks.init(), self.schedules.init(), _tick]
        if self.log_queue is not None:
            cmds.append(wait_for_log(self.log_queue))
        cmds.extend(self._background_command(job) for job in self.backgrounds)
        return cmds

    def update(self, msg: Any) -> list[Command]:
        """Apply a message and return the commands to run next."""
        if isinstance(msg, WindowSize):
            self.width = msg.width
            self.height = msg.height
            content_height = msg.height - CHROME_ROWS
            self.tasks.set_size(msg.width, content_height)
            self.schedules.set_size(msg.width, content_height)
            return []

        if isinstance(msg, Tick):
            return [self.tasks.load_tasks(), self.schedules.load_schedules(), _tick]

        if isinstance(msg, LogEntry):
            self.logs.append(msg)
            if len(self.logs) > MAX_LOGS:
                self.logs = self.logs[-MAX_LOGS:]
            if self.log_queue is None:
                return []
            return [wait_for_log(self.log_queue)]

        if isinstance(msg, BackgroundStatus):
            if msg.error is not None and not isinstance(msg.error, _CANCELLED):
                self.status_line = f"background error: {msg.error}"
            return []

        if isinstance(msg, Key):
            if self.active_tab is Tab.TASKS and self.tasks.mode is not TasksMode.NORMAL:
                return _commands(self.tasks.update(msg))
            name = msg.name
            if name in ("q", "ctrl+c"):
                self.quitting = True
                self.stop_event.set()
                return [_quit]
            if name == "tab":
                self.active_tab = Tab.SCHEDULES if self.active_tab is Tab.TASKS else Tab.TASKS
                return []
            if name == "1":
                self.active_tab = Tab.TASKS
                return []
            if name == "2":
                self.active_tab = Tab.SCHEDULES
                return []

        if isinstance(msg, (TasksLoaded, ActionAttached)):
            return _commands(self.tasks.update(msg))
        if isinstance(msg, SchedulesLoaded):
            return _commands(self.schedules.update(msg))

        if self.active_tab is Tab.TASKS:
            return _commands(self.tasks.update(msg))
        return _commands(self.schedules.update(msg))

    def view(self) -> str:
        """Render the whole screen; empty once quitting."""
        if self.quitting:
            return ""
        body = self.tasks.view() if self.active_tab is Tab.TASKS else self.schedules.view()
        parts = [self.render_tabs(), "\n\n", body, "\n", self.render_activity()]
        if self.status_line:
            parts.append(STYLE_WARNING.render(self.status_line) + "\n")
        parts.append(self.render_help())
        return "".join(parts)

    def render_tabs(self) -> str:
        """Tab bar with the active tab highlighted."""
        tabs = (("Tasks", "1", Tab.TASKS), ("Schedules", "2", Tab.SCHEDULES))
        parts = []
        for label, key, tab in tabs:
            text = f"[{key}] {label}"
            style = STYLE_TAB_ACTIVE if tab is self.active_tab else STYLE_TAB_INACTIVE
            parts.append(style.render(text))
        return "  ".join(parts)

    def render_help(self) -> str:
        """Help line for the active tab."""
        keys: list[HelpKey]
        if self.active_tab is Tab.TASKS:
            keys = self.tasks.help_keys()
        else:
            keys = self.schedules.help_keys()
        return STYLE_HELP.render(format_help(keys))

    def render_activity(self) -> str:
        """The last log entries, padded to a fixed number of rows."""
        parts = [STYLE_MUTED.render("── Activity ──────────────────────") + "\n"]
        shown = self.logs[-ACTIVITY_ROWS:]
        for entry in shown:
            stamp = entry.time.strftime("%H:%M")
            parts.append(STYLE_MUTED.render(f"  {stamp} ") + entry.message + "\n")
        parts.extend("\n" for _ in range(ACTIVITY_ROWS - len(shown)))
        return "".join(parts)