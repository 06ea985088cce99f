import pytest

from taskqueue_tui.models import Action, ActionStatus
from taskqueue_tui.styles import (
    STYLE_DONE,
    STYLE_FAILED,
    STYLE_MUTED,
    Style,
    render_detail_view,
    status_icon,
    status_style,
    truncate_result,
    visible_width,
)


@pytest.mark.parametrize(
    "text, max_len, want",
    [
        ("hello", 10, "hello"),
        ("line1\nline2\nline3", 100, "line1 line2 line3"),
        ("abcdefghij", 5, "abcde..."),
        ("12345", 5, "12345"),
    ],
    ids=[
        "short string unchanged",
        "newlines replaced with spaces",
        "long string truncated with ellipsis",
        "exact length unchanged",
    ],
)
def test_truncate_result(text, max_len, want):
    assert truncate_result(text, max_len) == want


@pytest.mark.parametrize(
    "status, icon",
    [
        (ActionStatus.PENDING, "○"),
        (ActionStatus.RUNNING, "●"),
        (ActionStatus.DONE, "✓"),
        (ActionStatus.FAILED, "✗"),
        (ActionStatus.DISPATCHED, "⇢"),
        ("weird", "?"),
    ],
)
def test_status_icon(status, icon):
    assert status_icon(status) == icon


def test_status_style():
    assert status_style("done") == STYLE_DONE
    assert status_style(ActionStatus.FAILED) == STYLE_FAILED
    assert status_style("unknown") == STYLE_MUTED


def test_plain_style_renders_text_unchanged():
    assert Style().render("plain") == "plain"


def test_styled_text_keeps_visible_width():
    rendered = Style(foreground="14", bold=True).render("hello")
    assert rendered.startswith("\x1b[")
    assert "hello" in rendered
    assert visible_width(rendered) == len("hello")


def test_multiline_render_styles_each_line():
    rendered = STYLE_DONE.render("a\nbb")
    lines = rendered.split("\n")
    assert len(lines) == 2
    assert visible_width(rendered) == 2


def test_visible_width_wide_characters():
    assert visible_width("日本") == 4


def _action(result, completed_at=None):
    return Action(
        id=5,
        task_id=2,
        title="check",
        status=ActionStatus.DONE,
        result=result,
        completed_at=completed_at,
    )


def test_detail_view_contents():
    view = render_detail_view(_action("detailed output\nline 2"), 0, 120, 40)
    assert "Action Detail" in view
    assert "  ID:        5\n" in view
    assert "  Task:      #2\n" in view
    assert "  Title:     check\n" in view
    assert "  detailed output\n" in view
    assert "  line 2\n" in view
    assert "esc/q: back" in view
    assert "Completed" not in view


def test_detail_view_completed_line():
    view = render_detail_view(_action("ok", completed_at="garbage"), 0, 80, 40)
    assert "  Completed: garbage\n" in view


def test_detail_view_scroll_clamped_to_end():
    result = "\n".join(f"row{i}" for i in range(30))
    view = render_detail_view(_action(result), 100, 80, 12)
    assert "  row27\n" in view and "  row29\n" in view
    assert "  row26\n" not in view


def test_detail_view_scroll_from_top():
    result = "\n".join(f"row{i}" for i in range(30))
    view = render_detail_view(_action(result), 0, 80, 12)
    assert "  row0\n" in view and "  row2\n" in view
    assert "  row3\n" not in view


def test_detail_view_small_height_uses_default_body():
    result = "\n".join(f"row{i}" for i in range(30))
    view = render_detail_view(_action(result), 0, 80, 0)
    assert "  row9\n" in view
    assert "  row10\n" not in view