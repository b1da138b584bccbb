"""Dashboard panels and the typed records they list."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Panel(enum.Enum):
    """Dashboard views, in Tab order."""

    CUSTOMERS = "customers"
    PLANS = "plans"
    SUBSCRIPTIONS = "subscriptions"
    INVOICES = "invoices"
    METERS = "meters"
    WALLETS = "wallets"
    FEATURES = "features"

    @property
    def title(self) -> str:
        return PANELS[self].title

    @property
    def endpoint(self) -> str:
        return PANELS[self].endpoint


@dataclass(frozen=True)
class PanelInfo:
    title: str
    endpoint: str


PANELS: dict[Panel, PanelInfo] = {
    Panel.CUSTOMERS:     PanelInfo("Customers",     "/v1/customers"),
    Panel.PLANS:         PanelInfo("Plans",         "/v1/plans"),
    Panel.SUBSCRIPTIONS: PanelInfo("Subscriptions", "/v1/subscriptions"),
    Panel.INVOICES:      PanelInfo("Invoices",      "/v1/invoices"),
    Panel.METERS:        PanelInfo("Meters",        "/v1/meters"),
    Panel.WALLETS:       PanelInfo("Wallets",       "/v1/wallets"),
    Panel.FEATURES:      PanelInfo("Features",      "/v1/features"),
}

PANEL_ORDER: tuple[Panel, ...] = tuple(Panel)

_NAME_KEYS = ("name", "email", "event_name")
_STATUS_KEYS = ("status", "subscription_status", "invoice_status", "wallet_status")


def _first_str(item: dict, keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return None


@dataclass(frozen=True)
class Record:
    """One row of a panel: a billing object reduced to id / name / status."""

    id: str
    name: str = "-"
    status: str = ""
    raw: Any = field(default=None, compare=False)

    @classmethod
    def from_item(cls, item: Any) -> "Record":
        if not isinstance(item, dict):
            return cls(id="?", raw=item)
        ident = item.get("id")
        return cls(
            id=str(ident) if ident else "?",
            name=_first_str(item, _NAME_KEYS) or "-",
            status=_first_str(item, _STATUS_KEYS) or "",
            raw=item,
        )

    @property
    def label(self) -> str:
        parts = [self.id]
        if self.name:
            parts.append(self.name)
        if self.status:
            parts.append(f"[{self.status}]")
        return "  ".join(parts)


def parse_list_response(payload: Any) -> list[Record]:
    """Turn a ``{"items": [...]}`` list response into records.

    A payload without an ``items`` array becomes a single placeholder record
    carrying the whole payload, so the detail pane can still show it.
    """
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return [Record.from_item(item) for item in payload["items"]]
    return [Record(id="(no items)", name="", raw=payload)]
