"""Dashboard controller — the cooperative input/refresh/render loop.

Each tick drains completed fetches, handles at most one key, and renders.
Input is awaited with a bounded timeout so the screen keeps redrawing at a
steady cadence regardless of network latency.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Awaitable, Callable, Optional

from ..models import Panel
from .scheduler import FetchResult, RefreshScheduler
from .state import DashboardState

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1


class Action(enum.Enum):
    NEXT_PANEL = "next_panel"
    PREV_PANEL = "prev_panel"
    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    REFRESH = "refresh"
    QUIT = "quit"


# Key names follow Textual's spelling.
KEYMAP: dict[str, Action] = {
    "tab":       Action.NEXT_PANEL,
    "shift+tab": Action.PREV_PANEL,
    "l":         Action.NEXT_PANEL,
    "h":         Action.PREV_PANEL,
    "up":        Action.CURSOR_UP,
    "down":      Action.CURSOR_DOWN,
    "k":         Action.CURSOR_UP,
    "j":         Action.CURSOR_DOWN,
    "r":         Action.REFRESH,
    "q":         Action.QUIT,
    "escape":    Action.QUIT,
}

KeyReader = Callable[[float], Awaitable[Optional[str]]]
Renderer = Callable[[DashboardState], None]


class DashboardController:
    def __init__(
        self,
        scheduler: RefreshScheduler,
        state: Optional[DashboardState] = None,
    ) -> None:
        self.scheduler = scheduler
        self.state = state or DashboardState()
        self._started = False

    @property
    def active_panel(self) -> Panel:
        return self.state.active

    @property
    def terminated(self) -> bool:
        return self.state.terminate

    def start(self) -> None:
        """Refresh the initially active panel, once."""
        if self._started:
            return
        self._started = True
        self.start_refresh(self.state.active)

    def start_refresh(self, panel: Panel) -> asyncio.Task:
        return self.scheduler.start_refresh(self.state, panel)

    def drain(self) -> int:
        """Apply every queued fetch result; returns how many were applied."""
        applied = 0
        while True:
            try:
                result: FetchResult = self.scheduler.queue.get_nowait()
            except asyncio.QueueEmpty:
                return applied
            records = list(result.records) if result.records is not None else None
            if self.state.apply(
                result.panel, result.generation, records, result.error, result.fetched_at
            ):
                applied += 1
            else:
                logger.debug(
                    "discarded stale result %s gen=%d", result.panel.value, result.generation
                )

    def dispatch(self, action: Action) -> None:
        state = self.state
        if action is Action.NEXT_PANEL:
            state.cycle_panel(1)
        elif action is Action.PREV_PANEL:
            state.cycle_panel(-1)
        elif action is Action.CURSOR_UP:
            state.move_selection(-1)
        elif action is Action.CURSOR_DOWN:
            state.move_selection(1)
        elif action is Action.REFRESH:
            self.start_refresh(state.active)
        elif action is Action.QUIT:
            state.terminate = True

    def handle_key(self, key: str) -> Optional[Action]:
        action = KEYMAP.get(key)
        if action is not None:
            self.dispatch(action)
        return action

    def tick(self, key: Optional[str] = None) -> bool:
        """One loop iteration minus rendering. Returns False once terminated."""
        self.drain()
        if key is not None:
            self.handle_key(key)
        return not self.state.terminate

    async def run(
        self,
        read_key: KeyReader,
        render: Renderer,
        tick_seconds: float = TICK_SECONDS,
    ) -> DashboardState:
        """Drive the loop until quit; *read_key* must return within its timeout.

        This is the terminal-independent driver for headless callers.
        ``DashboardApp`` does not use it: Textual delivers keys through its
        bindings and calls ``drain`` from its own interval timer.
        """
        self.start()
        try:
            while True:
                self.drain()
                key = await read_key(tick_seconds)
                if key is not None:
                    self.handle_key(key)
                if self.state.terminate:
                    break
                render(self.state)
        finally:
            await self.scheduler.shutdown()
        return self.state
