"""`flexprice config` — show the effective configuration and where it came from."""

from __future__ import annotations

import argparse

from .. import auth, output
from ..config import load_config

_ROWS = (
    ("API URL", "api_url"),
    ("API Key", "api_key"),
    ("Auth Token", "token"),
    ("Tenant ID", "tenant_id"),
    ("User ID", "user_id"),
    ("Env ID", "environment_id"),
)


def _display(name: str, value: str | None) -> str:
    if name == "api_key":
        return auth.mask_secret(value)
    if name == "token":
        return "(set)" if value else "(not set)"
    return value or "(not set)"


def show_config(args: argparse.Namespace) -> None:
    config = load_config(args.api_url, args.api_key)
    print()
    for label, name in _ROWS:
        resolved = config[name]
        origin = f"  [{resolved.source.value}]" if resolved.value is not None else ""
        output.info(f"{label + ':':<12} {_display(name, resolved.value)}{origin}")
    output.info(f"{'Config path:':<12} {auth.credentials_path()}")
    print()
