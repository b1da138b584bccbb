"""Dashboard data model.

Owned exclusively by the event loop.  Background fetches never touch it;
they post ``FetchResult`` messages that the loop applies via ``apply``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from ..models import PANEL_ORDER, Panel, Record


class LoadState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass
class PanelCache:
    records: list[Record] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    last_refreshed: Optional[float] = None
    selected_index: int = 0
    generation: int = 0

    @property
    def load_state(self) -> LoadState:
        if self.loading:
            return LoadState.LOADING
        if self.error is not None:
            return LoadState.ERRORED
        if self.last_refreshed is not None:
            return LoadState.LOADED
        return LoadState.IDLE

    @property
    def selected(self) -> Optional[Record]:
        if not self.records:
            return None
        return self.records[self.selected_index]

    def clamp_selection(self) -> None:
        if not self.records:
            self.selected_index = 0
        else:
            self.selected_index = max(0, min(self.selected_index, len(self.records) - 1))


@dataclass
class DashboardState:
    active: Panel = PANEL_ORDER[0]
    panels: dict[Panel, PanelCache] = field(
        default_factory=lambda: {p: PanelCache() for p in PANEL_ORDER}
    )
    terminate: bool = False

    @property
    def current(self) -> PanelCache:
        return self.panels[self.active]

    # ── Navigation ─────────────────────────────────────────

    def cycle_panel(self, step: int) -> Panel:
        """Move the active panel by *step*, wrapping at either end.

        A fetch still in flight for the panel being left is superseded: its
        result will arrive with a stale generation and be dropped.
        """
        self.abandon_refresh(self.active)
        idx = PANEL_ORDER.index(self.active)
        self.active = PANEL_ORDER[(idx + step) % len(PANEL_ORDER)]
        return self.active

    def move_selection(self, delta: int) -> int:
        cache = self.current
        cache.selected_index += delta
        cache.clamp_selection()
        return cache.selected_index

    # ── Refresh lifecycle ──────────────────────────────────

    def begin_refresh(self, panel: Panel) -> int:
        """Start a new generation for *panel* and mark it loading."""
        cache = self.panels[panel]
        cache.generation += 1
        cache.loading = True
        cache.error = None
        return cache.generation

    def abandon_refresh(self, panel: Panel) -> bool:
        """Invalidate an in-flight fetch for *panel*; False if none was running."""
        cache = self.panels[panel]
        if not cache.loading:
            return False
        cache.generation += 1
        cache.loading = False
        return True

    def apply(
        self,
        panel: Panel,
        generation: int,
        records: Optional[list[Record]],
        error: Optional[str],
        fetched_at: float,
    ) -> bool:
        """Apply a finished fetch. Returns False (and changes nothing) if stale."""
        cache = self.panels[panel]
        if generation != cache.generation:
            return False
        cache.loading = False
        cache.last_refreshed = fetched_at
        if error is not None:
            cache.error = error
        else:
            cache.error = None
            cache.records = list(records or [])
        cache.clamp_selection()
        return True
