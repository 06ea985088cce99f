"""Schedules tab: list, toggle and delete cron schedules."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from .help import HelpKey, VisibleRange, calc_visible_range, common_help_keys
from .models import TIME_LAYOUT, Key, Schedule, format_local
from .styles import STYLE_DONE, STYLE_MUTED, STYLE_TITLE

Command = Callable[[], Any]


@dataclass
class SchedulesLoaded:
    """Result of reading schedules from the store."""

    schedules: list[Schedule] = field(default_factory=list)


class SchedulesModel:
    """State of the schedules tab.

    cron_parser turns an expression into an object with next(base),
    raising ValueError when the expression is invalid.
    """

    def __init__(self, store: Any, cron_parser: Callable[[str], Any] | None = None) -> None:
        self.store = store
        self.cron_parser = cron_parser
        self.schedules: list[Schedule] = []
        self.cursor = 0
        self.width = 0
        self.height = 0
        self.message = ""

    def load_schedules(self) -> Command:
        """Command that reads all schedules; errors yield an empty list."""
        store = self.store

        def command() -> SchedulesLoaded:
            try:
                return SchedulesLoaded(list(store.list_schedules(0)))
            except Exception:
                return SchedulesLoaded()

        return command

    def init(self) -> Command:
        return self.load_schedules()

    def update(self, msg: Any) -> Command | None:
        """Apply a message and return a follow-up command, if any."""
        if isinstance(msg, SchedulesLoaded):
            self.schedules = msg.schedules
            if self.cursor >= len(self.schedules):
                self.cursor = max(0, len(self.schedules) - 1)
            return None
        if not isinstance(msg, Key):
            return None

        self.message = ""
        name = msg.name
        schedule = self.selected_schedule()
        if name in ("j", "down"):
            if self.cursor < len(self.schedules) - 1:
                self.cursor += 1
        elif name in ("k", "up"):
            if self.cursor > 0:
                self.cursor -= 1
        elif name == "e" and schedule is not None:
            enabled = not schedule.enabled
            with contextlib.suppress(Exception):
                self.store.update_schedule_enabled(schedule.id, enabled)
                self.message = f"schedule #{schedule.id} {'enabled' if enabled else 'disabled'}"
            return self.load_schedules()
        elif name == "d" and schedule is not None:
            with contextlib.suppress(Exception):
                self.store.delete_schedule(schedule.id)
                self.message = f"schedule #{schedule.id} deleted"
            return self.load_schedules()
        return None

    def selected_schedule(self) -> Schedule | None:
        if 0 <= self.cursor < len(self.schedules):
            return self.schedules[self.cursor]
        return None

    def view(self) -> str:
        if not self.schedules:
            return STYLE_MUTED.render("  No schedules")

        header = (
            f"  {'ID':<4} {'Enabled':<8} {'Title':<20} {'Cron':<16} {'Next Run':<20} Last Run"
        )
        out = [
            STYLE_MUTED.render(header) + "\n",
            STYLE_MUTED.render("─" * min(self.width, 100)) + "\n",
        ]
        visible = self.visible_range()
        for i, s in enumerate(self.schedules[visible.start:visible.end], start=visible.start):
            prefix = "> " if i == self.cursor else "  "
            enabled = STYLE_DONE.render("yes") if s.enabled else STYLE_MUTED.render("no ")
            next_run = self._compute_next_run(s) if s.enabled else "-"
            last_run = format_local(s.last_run_at)[:16] if s.last_run_at is not None else "-"
            line = (
                f"{prefix}{s.id:<4} {enabled}  {s.title:<20} "
                f"{s.cron_expr:<16} {next_run:<20} {last_run}"
            )
            if i == self.cursor:
                line = STYLE_TITLE.render(line)
            out.append(line + "\n")

        if self.message:
            out.append("\n  " + STYLE_DONE.render(self.message) + "\n")
        return "".join(out)

    def _compute_next_run(self, schedule: Schedule) -> str:
        if self.cron_parser is None:
            return "?"
        try:
            cron = self.cron_parser(schedule.cron_expr)
        except ValueError:
            return "invalid"
        base_text = schedule.last_run_at if schedule.last_run_at is not None else schedule.created_at
        try:
            base = datetime.strptime(base_text, TIME_LAYOUT).replace(tzinfo=timezone.utc)
        except (TypeError, ValueError):
            return "?"
        return cron.next(base).astimezone().strftime("%Y-%m-%d %H:%M")

    def visible_range(self) -> VisibleRange:
        return calc_visible_range(self.cursor, len(self.schedules), self.height, 4)

    def help_keys(self) -> list[HelpKey]:
        keys = common_help_keys()
        if self.selected_schedule() is not None:
            keys += [HelpKey("e", "enable/disable"), HelpKey("d", "delete")]
        return keys

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height