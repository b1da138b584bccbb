"""Panel navigation sidebar."""

from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from ..dashboard.state import DashboardState, LoadState
from ..models import PANEL_ORDER

_MARKERS = {
    LoadState.IDLE: ("·", "dim"),
    LoadState.LOADING: ("…", "#f59e0b"),
    LoadState.LOADED: ("●", "#10b981"),
    LoadState.ERRORED: ("✗", "#f43f5e"),
}


class PanelSidebar(Widget):
    DEFAULT_CSS = """
    PanelSidebar {
        width: 22;
        height: 1fr;
        padding: 1 1;
        border-right: solid #475569;
    }
    """

    def __init__(self, state: DashboardState, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state = state

    def render(self) -> Text:
        t = Text()
        t.append("Navigate\n\n", style="dim")
        for panel in PANEL_ORDER:
            active = panel is self._state.active
            marker, marker_style = _MARKERS[self._state.panels[panel].load_state]
            t.append(" ▸ " if active else "   ", style="#6366f1")
            t.append(panel.title, style="bold #6366f1" if active else "#94a3b8")
            t.append(f" {marker}\n", style=marker_style)
        return t
