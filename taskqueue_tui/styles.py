"""Terminal styles and the action detail view."""

from __future__ import annotations

import re
from dataclasses import dataclass

from wcwidth import wcswidth, wcwidth

from .help import detail_help_keys, format_help
from .models import Action, ActionStatus, format_local

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class Style:
    """Foreground colour (ANSI 0-15), bold and underline."""

    foreground: str | None = None
    bold: bool = False
    underline: bool = False

    def _codes(self) -> list[str]:
        codes = []
        if self.bold:
            codes.append("1")
        if self.underline:
            codes.append("4")
        if self.foreground is not None:
            n = int(self.foreground)
            codes.append(str(30 + n) if n < 8 else str(90 + n - 8))
        return codes

    def render(self, text: str) -> str:
        """Wrap each line of text in the style's escape sequences."""
        codes = self._codes()
        if not codes:
            return text
        prefix = f"\x1b[{';'.join(codes)}m"
        return "\n".join(f"{prefix}{line}\x1b[0m" for line in text.split("\n"))


COLOR_PENDING = "3"
COLOR_RUNNING = "4"
COLOR_DONE = "2"
COLOR_FAILED = "1"
COLOR_WARNING = "5"
COLOR_MUTED = "8"
COLOR_ACCENT = "14"

STYLE_PENDING = Style(foreground=COLOR_PENDING)
STYLE_RUNNING = Style(foreground=COLOR_RUNNING)
STYLE_DISPATCHED = Style(foreground=COLOR_ACCENT)
STYLE_DONE = Style(foreground=COLOR_DONE)
STYLE_FAILED = Style(foreground=COLOR_FAILED)
STYLE_WARNING = Style(foreground=COLOR_WARNING)
STYLE_MUTED = Style(foreground=COLOR_MUTED)
STYLE_TAB_ACTIVE = Style(foreground=COLOR_ACCENT, bold=True, underline=True)
STYLE_TAB_INACTIVE = Style(foreground=COLOR_MUTED)
STYLE_TITLE = Style(bold=True)
STYLE_HELP = Style(foreground=COLOR_MUTED)
STYLE_PROJECT = Style(foreground=COLOR_ACCENT, bold=True)

_STATUS_STYLES = {
    ActionStatus.PENDING: STYLE_PENDING,
    ActionStatus.RUNNING: STYLE_RUNNING,
    ActionStatus.DONE: STYLE_DONE,
    ActionStatus.FAILED: STYLE_FAILED,
    ActionStatus.DISPATCHED: STYLE_DISPATCHED,
}

_STATUS_ICONS = {
    ActionStatus.PENDING: "○",
    ActionStatus.RUNNING: "●",
    ActionStatus.DONE: "✓",
    ActionStatus.FAILED: "✗",
    ActionStatus.DISPATCHED: "⇢",
}


def _line_width(line: str) -> int:
    width = wcswidth(line)
    if width >= 0:
        return width
    return sum(max(wcwidth(ch), 0) for ch in line)


def visible_width(text: str) -> int:
    """Display width of the widest line, ignoring escape sequences."""
    plain = _ANSI.sub("", text)
    return max(_line_width(line) for line in plain.split("\n"))


def status_style(status: str) -> Style:
    """Style for a status; muted for unknown ones."""
    return _STATUS_STYLES.get(status, STYLE_MUTED)


def status_icon(status: str) -> str:
    """Single-character icon for a status."""
    return _STATUS_ICONS.get(status, "?")


def truncate_result(text: str, max_len: int) -> str:
    """Flatten newlines and cut to max_len characters, adding an ellipsis."""
    text = text.replace("\n", " ")
    if len(text) > max_len:
        return text[:max_len] + "..."
    return text


def render_detail_view(action: Action, scroll: int, width: int, height: int) -> str:
    """Full-screen view of one action and its scrollable result."""
    rule = STYLE_MUTED.render("─" * min(width, 80)) + "\n"
    style = status_style(action.status)
    parts = [
        STYLE_TITLE.render("  Action Detail") + "\n",
        rule,
        f"  ID:        {action.id}\n",
        f"  Status:    {style.render(str(action.status))}\n",
        f"  Title:     {action.title}\n",
        f"  Task:      #{action.task_id}\n",
    ]
    if action.completed_at is not None:
        parts.append(f"  Completed: {format_local(action.completed_at)}\n")
    parts.append(rule)

    lines = (action.result or "").split("\n")
    body_height = height - 9
    if body_height < 1:
        body_height = 10
    if scroll > len(lines) - body_height:
        scroll = max(0, len(lines) - body_height)
    end = min(scroll + body_height, len(lines))
    parts.extend(f"  {line}\n" for line in lines[scroll:end])

    parts.append("\n")
    parts.append(STYLE_HELP.render("  " + format_help(detail_help_keys())))
    return "".join(parts)