"""Textual front end for the dashboard controller.

Textual owns the terminal: it reads keys and schedules our timer on the
same asyncio loop the fetch tasks run on.  The app itself holds no dashboard
state; key bindings dispatch controller actions and a fixed-rate timer
drains fetch results and redraws.
"""

from __future__ import annotations

from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Static

from ..client import ApiClient
from ..config import ResolvedConfig
from ..widgets import DetailPane, PanelSidebar, RecordList
from .controller import KEYMAP, TICK_SECONDS, Action, DashboardController
from .scheduler import Fetcher, RefreshScheduler

_BINDING_LABELS = {
    Action.NEXT_PANEL: "Panel →",
    Action.PREV_PANEL: "Panel ←",
    Action.CURSOR_UP: "Up",
    Action.CURSOR_DOWN: "Down",
    Action.REFRESH: "Refresh",
    Action.QUIT: "Quit",
}


def _footer_text() -> Text:
    t = Text()
    items = [
        ("Tab/Shift+Tab h/l", "Panel", "#6366f1"),
        ("↑/↓ j/k", "Navigate", "#94a3b8"),
        ("r", "Refresh", "#10b981"),
        ("q/Esc", "Quit", "#f43f5e"),
    ]
    for i, (key, label, style) in enumerate(items):
        if i:
            t.append("  │  ", style="#475569")
        t.append(f"{key} ", style=f"bold {style}")
        t.append(label, style=style)
    return t


class DashboardApp(App):
    """FlexPrice dashboard."""

    TITLE = "FlexPrice Dashboard"

    CSS = """
    Screen {
        background: #0f172a;
        color: #e2e8f0;
    }
    #header {
        height: 3;
        padding: 0 2;
        border-bottom: solid #475569;
    }
    #body {
        height: 1fr;
    }
    #footer {
        height: 1;
        padding: 0 2;
    }
    """

    BINDINGS = [
        Binding(key, f"dispatch('{action.value}')", _BINDING_LABELS[action], show=False, priority=True)
        for key, action in KEYMAP.items()
    ]

    def __init__(
        self,
        config: ResolvedConfig,
        *,
        fetch: Optional[Fetcher] = None,
        client: Optional[ApiClient] = None,
    ) -> None:
        super().__init__()
        self.config = config
        if fetch is None:
            client = client or ApiClient(config.credentials)
            fetch = client.get
        self._client = client
        self.controller = DashboardController(RefreshScheduler(fetch))

    @property
    def state(self):
        return self.controller.state

    def _header_text(self) -> Text:
        creds = self.config.credentials
        source = self.config.active_source
        auth = creds.auth_kind + (f" ({source.value})" if source else "")
        t = Text()
        t.append("⚡ ", style="#f59e0b")
        t.append("FlexPrice", style="bold #6366f1")
        t.append(" Dashboard", style="#94a3b8")
        t.append("    API: ", style="#94a3b8")
        t.append(creds.api_url, style="#10b981")
        t.append("    Auth: ", style="#94a3b8")
        t.append(auth, style="#38bdf8")
        return t

    def compose(self) -> ComposeResult:
        yield Static(self._header_text(), id="header")
        with Horizontal(id="body"):
            yield PanelSidebar(self.state, id="sidebar")
            yield RecordList(self.state, id="records")
            yield DetailPane(self.state, id="detail")
        yield Static(_footer_text(), id="footer")

    def on_mount(self) -> None:
        self.controller.start()
        self.set_interval(TICK_SECONDS, self._tick)

    async def on_unmount(self) -> None:
        await self.controller.scheduler.shutdown()
        if self._client is not None:
            await self._client.close()

    def _tick(self) -> None:
        self.controller.drain()
        self._redraw()

    def _redraw(self) -> None:
        for widget_id in ("sidebar", "records", "detail"):
            self.query_one(f"#{widget_id}").refresh()

    def action_dispatch(self, name: str) -> None:
        self.controller.dispatch(Action(name))
        if self.controller.terminated:
            self.exit()
            return
        self._redraw()


def run_dashboard(config: ResolvedConfig) -> None:
    DashboardApp(config).run()
