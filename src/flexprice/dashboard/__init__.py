"""Interactive terminal dashboard."""

from .controller import KEYMAP, Action, DashboardController
from .scheduler import FetchResult, FetchTask, RefreshScheduler
from .state import DashboardState, LoadState, PanelCache

__all__ = [
    "KEYMAP",
    "Action",
    "DashboardController",
    "DashboardState",
    "FetchResult",
    "FetchTask",
    "LoadState",
    "PanelCache",
    "RefreshScheduler",
]
