"""Help-line keys and list scrolling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class HelpKey:
    """A key and what it does."""

    key: str
    desc: str


@dataclass(frozen=True)
class VisibleRange:
    """Half-open range [start, end) of rows to draw."""

    start: int
    end: int


def detail_help_keys() -> list[HelpKey]:
    """Keys available in the detail view."""
    return [HelpKey("j/k", "scroll"), HelpKey("esc/q", "back")]


def common_help_keys() -> list[HelpKey]:
    """Keys available in every list view."""
    return [HelpKey("j/k", "navigate"), HelpKey("tab", "switch"), HelpKey("q", "quit")]


def format_help(keys: Iterable[HelpKey]) -> str:
    """Join keys as "key: desc" separated by two spaces."""
    return "  ".join(f"{k.key}: {k.desc}" for k in keys)


def calc_visible_range(cursor: int, total: int, height: int, header_rows: int) -> VisibleRange:
    """Window of rows that keeps the cursor roughly centred."""
    max_visible = height - header_rows
    if max_visible <= 0:
        max_visible = 20
    if total <= max_visible:
        return VisibleRange(0, total)
    start = max(cursor - max_visible // 2, 0)
    end = start + max_visible
    if end > total:
        end = total
        start = end - max_visible
    return VisibleRange(start, end)