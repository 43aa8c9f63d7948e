"""Rich styles used by every screen (``[primary]...[/primary]`` markup)."""

from __future__ import annotations

from rich.theme import Theme

from crafters.tui.state import ToastVariant

theme = Theme(
    {
        "primary": "bold #fab283",
        "secondary": "#5c9cf5",
        "text": "#eeeeee",
        "title": "bold #eeeeee",
        "muted": "#808080",
        "selected": "on #1e1e1e",
        "success": "#7fd88f",
        "warning": "#f5a742",
        "error": "#e06c75",
        "danger": "bold #e06c75",
        "border": "#484848",
    }
)

TOAST_STYLES = {
    ToastVariant.INFO: "secondary",
    ToastVariant.SUCCESS: "success",
    ToastVariant.WARNING: "warning",
    ToastVariant.ERROR: "error",
}
