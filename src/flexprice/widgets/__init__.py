"""Textual widgets for the FlexPrice dashboard."""

from .detail_pane import DetailPane
from .record_list import RecordList
from .sidebar import PanelSidebar

__all__ = ["DetailPane", "PanelSidebar", "RecordList"]
