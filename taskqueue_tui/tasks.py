"""Tasks tab: a collapsible tree of projects, tasks and actions."""

from __future__ import annotations

import contextlib
import subprocess
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .help import HelpKey, VisibleRange, calc_visible_range, common_help_keys, detail_help_keys
from .models import Action, ActionStatus, Key, Project, Task, TaskStatus
from .styles import (
    STYLE_DONE,
    STYLE_FAILED,
    STYLE_MUTED,
    STYLE_PENDING,
    STYLE_PROJECT,
    STYLE_RUNNING,
    render_detail_view,
    status_icon,
    status_style,
    truncate_result,
    visible_width,
)

Command = Callable[[], Any]

_CLOSED_TASK = (TaskStatus.DONE, TaskStatus.ARCHIVED)


class TasksMode(Enum):
    NORMAL = 0
    VIEW_DETAIL = 1


@dataclass
class TaskNode:
    task: Task
    actions: list[Action] = field(default_factory=list)


@dataclass
class ProjectTree:
    project: Project
    tasks: list[TaskNode] = field(default_factory=list)


@dataclass
class TasksLoaded:
    trees: list[ProjectTree] = field(default_factory=list)


@dataclass
class ActionAttached:
    id: int
    message: str = ""


@dataclass
class _TreeLine:
    text: str
    key: str
    expand_key: str = ""
    task_id: int = 0
    project_id: int = 0
    action: Action | None = None
    right_label: str = ""


def _on_date(action: Action, date: str) -> bool:
    return any(stamp and stamp.startswith(date) for stamp in (action.created_at, action.completed_at))


def task_status_order(status: str) -> int:
    """Sort rank of a task status: done first, then open, then archived."""
    return {TaskStatus.DONE: 1, TaskStatus.ARCHIVED: 3}.get(status, 2)


class TasksModel:
    """State of the tasks tab."""

    def __init__(self, store: Any, date_filter: str = "") -> None:
        self.store = store
        self.date_filter = date_filter
        self.trees: list[ProjectTree] = []
        self.cursor = 0
        self.expanded: dict[str, bool] = {}
        self.lines: list[_TreeLine] = []
        self.width = 0
        self.height = 0
        self.message = ""
        self.mode = TasksMode.NORMAL
        self.detail_action: Action | None = None
        self.detail_scroll = 0

    def load_tasks(self) -> Command:
        """Command that reads the project tree, applying the date filter."""
        store, date = self.store, self.date_filter

        def command() -> TasksLoaded:
            try:
                projects = sorted(store.list_projects(0), key=lambda p: p.id)
            except Exception:
                return TasksLoaded()
            trees = []
            for project in projects:
                try:
                    tasks = store.list_tasks_by_project(project.id)
                except Exception:
                    continue
                nodes = []
                for task in tasks:
                    try:
                        actions = list(store.list_actions("", task.id, 0))
                    except Exception:
                        continue
                    if date and task.status in _CLOSED_TASK:
                        actions = [a for a in actions if _on_date(a, date)]
                        if not actions and not task.matches_date(date):
                            continue
                    elif date:
                        actions = [
                            a
                            for a in actions
                            if a.status not in (ActionStatus.DONE, ActionStatus.FAILED)
                            or _on_date(a, date)
                        ]
                    nodes.append(TaskNode(task, actions))
                nodes.sort(key=lambda n: task_status_order(n.task.status))
                trees.append(ProjectTree(project, nodes))
            return TasksLoaded(trees)

        return command

    def init(self) -> Command:
        return self.load_tasks()

    def update(self, msg: Any) -> Command | None:
        """Apply a message and return a follow-up command, if any."""
        if isinstance(msg, ActionAttached):
            if msg.message:
                self.message = msg.message
        elif isinstance(msg, TasksLoaded):
            self.trees = msg.trees
            for tree in self.trees:
                self.expanded.setdefault(f"p:{tree.project.id}", tree.project.dispatch_enabled)
                for node in tree.tasks:
                    self.expanded.setdefault(f"t:{node.task.id}", node.task.status not in _CLOSED_TASK)
            self._build_lines()
            if self.cursor >= len(self.lines):
                self.cursor = max(0, len(self.lines) - 1)
        elif isinstance(msg, Key):
            if self.mode is TasksMode.VIEW_DETAIL:
                self._update_view_detail(msg)
            else:
                return self._update_normal(msg)
        return None

    def _current_line(self) -> _TreeLine | None:
        if 0 <= self.cursor < len(self.lines):
            return self.lines[self.cursor]
        return None

    def _update_normal(self, key: Key) -> Command | None:
        self.message = ""
        name = key.name
        line = self._current_line()
        action = line.action if line is not None else None
        if name in ("j", "down"):
            if self.cursor < len(self.lines) - 1:
                self.cursor += 1
        elif name in ("k", "up"):
            if self.cursor > 0:
                self.cursor -= 1
        elif name in ("enter", " "):
            if line is not None and line.expand_key:
                self.expanded[line.expand_key] = not self.expanded.get(line.expand_key, False)
                self._build_lines()
        elif name == "v":
            if action is not None and action.has_result():
                self.detail_action = action
                self.detail_scroll = 0
                self.mode = TasksMode.VIEW_DETAIL
        elif name == "o":
            if action is not None and action.session_id is not None:
                return self.attach_action(action)
        elif name == "f" and line is not None and line.project_id > 0 and line.task_id == 0:
            for tree in self.trees:
                if tree.project.id == line.project_id:
                    with contextlib.suppress(Exception):
                        self.store.set_dispatch_enabled(line.project_id, not tree.project.dispatch_enabled)
                    return self.load_tasks()
        return None

    def _update_view_detail(self, key: Key) -> None:
        name = key.name
        if name in ("q", "esc"):
            self.detail_action = None
            self.detail_scroll = 0
            self.mode = TasksMode.NORMAL
        elif name in ("j", "down"):
            self.detail_scroll += 1
        elif name in ("k", "up") and self.detail_scroll > 0:
            self.detail_scroll -= 1

    def _build_lines(self) -> None:
        lines = []
        for tree in self.trees:
            project = tree.project
            proj_key = f"p:{project.id}"
            arrow = "▾" if self.expanded.get(proj_key) else "▸"
            if project.dispatch_enabled:
                label = STYLE_PROJECT.render(project.name)
            else:
                label = STYLE_MUTED.render("⊘ " + project.name)
            lines.append(
                _TreeLine(
                    text=f"{arrow} {label}",
                    key=proj_key,
                    expand_key=proj_key,
                    project_id=project.id,
                    right_label=project.work_dir,
                )
            )
            if not self.expanded.get(proj_key):
                continue

            for node in tree.tasks:
                task = node.task
                task_key = f"t:{task.id}"
                t_arrow = "  ▾" if self.expanded.get(task_key) else "  ▸"
                status = status_style(task.status).render(str(task.status))
                lines.append(
                    _TreeLine(
                        text=f"{t_arrow} #{task.id} {status} {task.title}",
                        key=task_key,
                        expand_key=task_key,
                        task_id=task.id,
                    )
                )
                if not self.expanded.get(task_key):
                    continue

                for action in node.actions:
                    ast = status_style(action.status)
                    text = (
                        f"      {ast.render(status_icon(action.status))} {action.id:<4} "
                        f"{ast.render(f'{str(action.status):<14}')} {action.title}"
                    )
                    lines.append(
                        _TreeLine(text=text, key=f"a:{action.id}", task_id=task.id, action=action)
                    )
        self.lines = lines

    def visible_range(self) -> VisibleRange:
        return calc_visible_range(self.cursor, len(self.lines), self.height, 3)

    def view(self) -> str:
        """Render the tree, or the detail view when one is open."""
        if self.mode is TasksMode.VIEW_DETAIL and self.detail_action is not None:
            return render_detail_view(self.detail_action, self.detail_scroll, self.width, self.height)
        if not self.lines:
            return STYLE_MUTED.render("  No tasks found")

        out = [self.summary_line() + "\n"]
        visible = self.visible_range()
        for i, line in enumerate(self.lines[visible.start:visible.end], start=visible.start):
            rendered = ("> " if i == self.cursor else "  ") + line.text
            action = line.action
            if i == self.cursor and action is not None and action.has_result():
                remaining = self.width - visible_width(rendered) - 2 - len("result: ")
                if remaining > 10:
                    rendered += "  " + status_style(action.status).render(
                        "result: " + truncate_result(action.result, remaining)
                    )
            elif line.right_label:
                pad = self.width - visible_width(rendered) - visible_width(line.right_label) - 2
                if pad > 0:
                    rendered += " " * pad + STYLE_MUTED.render(line.right_label)
            out.append(rendered + "\n")

        if self.message:
            out.append("\n  " + STYLE_DONE.render(self.message) + "\n")
        return "".join(out)

    def attach_action(self, action: Action) -> Command:
        """Command that switches tmux to the action's window."""

        def command() -> ActionAttached:
            target = f"{action.session_id or ''}:{action.tmux_pane or ''}"
            try:
                subprocess.run(
                    ["tmux", "select-window", "-t", target],
                    check=True,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except (OSError, subprocess.CalledProcessError) as err:
                return ActionAttached(action.id, f"attach failed: {err}")
            return ActionAttached(action.id)

        return command

    def summary_line(self) -> str:
        """Counts of running, pending, done and failed actions."""
        counts = Counter(
            str(action.status)
            for tree in self.trees
            for node in tree.tasks
            for action in node.actions
        )
        return (
            STYLE_RUNNING.render("●") + f" {counts[str(ActionStatus.RUNNING)]} running  "
            + STYLE_PENDING.render("○") + f" {counts[str(ActionStatus.PENDING)]} pending  "
            + STYLE_DONE.render("✓") + f" {counts[str(ActionStatus.DONE)]} done  "
            + STYLE_FAILED.render("✗") + f" {counts[str(ActionStatus.FAILED)]} failed"
        )

    def help_keys(self) -> list[HelpKey]:
        if self.mode is TasksMode.VIEW_DETAIL:
            return detail_help_keys()
        keys = common_help_keys()
        line = self._current_line()
        if line is not None:
            if line.expand_key:
                keys.append(HelpKey("enter", "expand"))
            if line.action is not None:
                if line.action.session_id is not None:
                    keys.append(HelpKey("o", "attach"))
                if line.action.has_result():
                    keys.append(HelpKey("v", "view result"))
            if line.project_id > 0 and line.task_id == 0:
                keys.append(HelpKey("f", "toggle focus"))
        return keys

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height