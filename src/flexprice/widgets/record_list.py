"""Record list widget — the rows of the active panel, with the selection marked."""

from __future__ import annotations

import time

from rich.text import Text
from textual.widget import Widget

from ..dashboard.state import DashboardState, LoadState

PRIMARY = "#6366f1"
WARNING = "#f59e0b"
ERROR = "#f43f5e"


def _age(ts: float | None) -> str:
    if ts is None:
        return "never"
    secs = max(0, int(time.time() - ts))
    if secs < 60:
        return f"{secs}s ago"
    return f"{secs // 60}m ago"


class RecordList(Widget):
    """Renders the active panel's cache: loading, error banner, or rows."""

    DEFAULT_CSS = """
    RecordList {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
        border-right: solid #475569;
    }
    """

    def __init__(self, state: DashboardState, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state = state

    def _visible_window(self, total: int, selected: int) -> tuple[int, int]:
        if not self.size.height:
            return 0, total
        # Two lines go to the title and the blank line under it.
        rows = max(1, self.size.height - 2)
        start = max(0, min(selected - rows + 1, total - rows))
        start = min(start, selected)
        return start, min(total, start + rows)

    def render(self) -> Text:
        panel = self._state.active
        cache = self._state.current

        t = Text()
        t.append(f"{panel.title}", style=f"bold {PRIMARY}")
        if cache.load_state is LoadState.LOADED:
            t.append(f" ({len(cache.records)})", style=f"bold {PRIMARY}")
        t.append(f"  · refreshed {_age(cache.last_refreshed)}\n\n", style="dim")

        if cache.loading:
            t.append("⏳ Loading...\n", style=WARNING)
        if cache.error is not None:
            t.append(f"✗ {cache.error}\n", style=ERROR)
            t.append("Press r to retry.\n", style="dim")
            return t
        if cache.load_state is LoadState.IDLE:
            t.append("Not loaded yet. Press r to refresh.", style="dim")
            return t
        if not cache.records:
            if not cache.loading:
                t.append("No results found.", style="dim")
            return t

        start, end = self._visible_window(len(cache.records), cache.selected_index)
        for idx in range(start, end):
            record = cache.records[idx]
            if idx == cache.selected_index:
                t.append(f"▸ {record.label}\n", style=f"bold {PRIMARY} on #334155")
            else:
                t.append(f"  {record.label}\n")
        return t
