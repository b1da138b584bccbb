"""Background fetches for dashboard panels.

``start_refresh`` bumps a panel's generation and launches one asyncio task
bound to it.  Every task posts exactly one ``FetchResult`` to the queue; the
event loop applies it only if the generation is still current.  Superseded
tasks are left to finish and their results are dropped on arrival, so no
task ever needs to be aborted mid-flight.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..errors import ApiError
from ..models import Panel, Record, parse_list_response
from .state import DashboardState

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class FetchTask:
    panel: Panel
    generation: int


@dataclass(frozen=True)
class FetchResult:
    panel: Panel
    generation: int
    records: Optional[tuple[Record, ...]] = None
    error: Optional[str] = None
    fetched_at: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class RefreshScheduler:
    """Launches per-panel fetches and reports completions on a queue."""

    def __init__(self, fetch: Fetcher, queue: Optional[asyncio.Queue] = None) -> None:
        self._fetch = fetch
        self.queue: asyncio.Queue[FetchResult] = queue or asyncio.Queue()
        self._pending: dict[FetchTask, asyncio.Task] = {}

    @property
    def pending(self) -> tuple[FetchTask, ...]:
        return tuple(self._pending)

    def start_refresh(self, state: DashboardState, panel: Panel) -> asyncio.Task:
        """Begin a new generation for *panel* and fetch it in the background.

        Must be called from the event loop that owns *state*.
        """
        task = FetchTask(panel, state.begin_refresh(panel))
        handle = asyncio.get_running_loop().create_task(
            self._run(task), name=f"fetch-{panel.value}-{task.generation}"
        )
        self._pending[task] = handle
        handle.add_done_callback(lambda _: self._pending.pop(task, None))
        logger.debug("refresh %s gen=%d", panel.value, task.generation)
        return handle

    async def _run(self, task: FetchTask) -> None:
        try:
            payload = await self._fetch(task.panel.endpoint)
            result = FetchResult(
                task.panel,
                task.generation,
                records=tuple(parse_list_response(payload)),
                fetched_at=time.time(),
            )
        except ApiError as e:
            result = FetchResult(task.panel, task.generation, error=str(e), fetched_at=time.time())
        except Exception as e:
            logger.exception("fetch %s failed", task.panel.value)
            result = FetchResult(
                task.panel,
                task.generation,
                error=str(e) or type(e).__name__,
                fetched_at=time.time(),
            )
        self.queue.put_nowait(result)

    async def shutdown(self) -> None:
        """Cancel whatever is still in flight; used when the dashboard exits."""
        handles = list(self._pending.values())
        for handle in handles:
            handle.cancel()
        if handles:
            await asyncio.gather(*handles, return_exceptions=True)
        self._pending.clear()
