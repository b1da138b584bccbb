"""Detail pane — pretty JSON of the selected record."""

from __future__ import annotations

import json

from rich.console import RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text
from textual.widget import Widget

from ..dashboard.state import DashboardState


class DetailPane(Widget):
    DEFAULT_CSS = """
    DetailPane {
        width: 2fr;
        height: 1fr;
    }
    """

    def __init__(self, state: DashboardState, **kwargs) -> None:
        super().__init__(**kwargs)
        self._state = state

    def render(self) -> RenderableType:
        record = self._state.current.selected
        if record is None:
            body: RenderableType = Text("Nothing selected.", style="dim")
        else:
            body = Syntax(
                json.dumps(record.raw, indent=2, default=str),
                "json",
                theme="ansi_dark",
                word_wrap=True,
                background_color="default",
            )
        return Panel(body, title="[b #10b981]Detail[/]", border_style="#475569")
