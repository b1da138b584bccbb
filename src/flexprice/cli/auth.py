"""`flexprice auth ...` commands.

``login`` exchanges email/password for a session token; ``set-api-key``
stores a long-lived key (for CI or pre-provisioned keys).  Both rewrite
~/.flexprice/credentials.json from scratch, so the file never carries a
token and an api key at the same time.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
from typing import Any, Awaitable, Callable

from .. import auth, output
from ..auth import Credentials
from ..client import ApiClient
from ..config import ResolvedConfig, Source, load_config, normalize_api_url
from ..errors import ApiError, CorruptCredentialsError, FlexpriceError, NotAuthenticatedError, UnauthorizedError


# ── Helpers ────────────────────────────────────────────────


def require_auth(config: ResolvedConfig) -> Credentials:
    """Return resolved credentials or raise NotAuthenticatedError."""
    creds = config.credentials
    if not creds.is_authenticated:
        raise NotAuthenticatedError()
    return creds


def _config_for_overwrite(args: argparse.Namespace) -> ResolvedConfig:
    """Resolve config for commands that replace the credentials file.

    A corrupt file is reported but does not block replacing it.
    """
    try:
        return load_config(args.api_url, args.api_key)
    except CorruptCredentialsError as e:
        output.warning(str(e))
        return load_config(args.api_url, args.api_key, use_stored=False)


def _prompt(label: str, default: str | None = None) -> str:
    suffix = f" [{default}]" if default else ""
    try:
        value = input(f"  {label}{suffix}: ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        raise FlexpriceError("Login cancelled.")
    return value or (default or "")


async def _with_client(creds: Credentials, call: Callable[[ApiClient], Awaitable[Any]]) -> Any:
    async with ApiClient(creds) as client:
        return await call(client)


def _opt_str(value: object) -> str | None:
    return str(value) if value else None


def _source_label(config: ResolvedConfig, name: str) -> str:
    resolved = config[name]
    if resolved.value is None:
        return ""
    return f"  ({resolved.source.value})"


# ── Handlers ───────────────────────────────────────────────


def _login(args: argparse.Namespace) -> None:
    output.banner()
    config = _config_for_overwrite(args)

    if config.source("api_url") is Source.CLI_FLAG:
        api_url = config.api_url
    else:
        api_url = normalize_api_url(_prompt("API Endpoint", config.api_url))
    email = args.email or _prompt("Email")
    if not email:
        raise FlexpriceError("No email entered — aborted.")
    try:
        password = getpass.getpass("  Password: ")
    except (EOFError, KeyboardInterrupt):
        print()
        raise FlexpriceError("Login cancelled.")

    try:
        with output.spinner("Authenticating..."):
            data = asyncio.run(
                _with_client(
                    Credentials(api_url=api_url),
                    lambda c: c.login(email, password),
                )
            )
    except UnauthorizedError as e:
        raise FlexpriceError("Invalid email or password.") from e

    creds = Credentials(
        api_url=api_url,
        token=data["token"],
        tenant_id=_opt_str(data.get("tenant_id")),
        user_id=_opt_str(data.get("user_id")),
    )
    path = auth.save_credentials(creds)

    print()
    output.success("Authenticated successfully!")
    if creds.tenant_id:
        output.success(f"Tenant: {creds.tenant_id}")
    output.success(f"User: {email}" + (f" ({creds.user_id})" if creds.user_id else ""))
    output.success(f"Credentials saved to {path}")


def _set_api_key(args: argparse.Namespace) -> None:
    key = args.key.strip()
    if not key:
        raise FlexpriceError("No key entered — aborted.")
    config = _config_for_overwrite(args)

    stored_env = config["environment_id"]
    creds = Credentials(
        api_url=config.api_url,
        api_key=key,
        environment_id=stored_env.value if stored_env.source is Source.CREDENTIALS_FILE else None,
    )

    if not args.skip_verify:
        with output.spinner("Validating API key..."):
            asyncio.run(_with_client(creds, lambda c: c.health_check()))

    path = auth.save_credentials(creds)
    output.success("API key validated and saved!" if not args.skip_verify else "API key saved.")
    output.success(f"API URL: {creds.api_url}")
    output.success(f"Credentials saved to {path}")


def _status(args: argparse.Namespace) -> None:
    config = load_config(args.api_url, args.api_key)
    creds = config.credentials

    if not creds.is_authenticated:
        output.warning("Not authenticated.")
        output.info("Run `flexprice auth login` or `flexprice auth set-api-key <KEY>` to get started.")
        return

    active = config.active_source
    output.success("Credentials found")
    output.info(f"API URL:    {creds.api_url}{_source_label(config, 'api_url')}")
    output.info(f"API Key:    {auth.mask_secret(creds.api_key)}{_source_label(config, 'api_key')}")
    output.info(f"Token:      {'(set)' if creds.token else '(not set)'}")
    output.info(f"Auth:       {creds.auth_kind}" + (f"  ({active.value})" if active else ""))
    if creds.tenant_id:
        output.info(f"Tenant ID:  {creds.tenant_id}")
    if creds.environment_id:
        output.info(f"Env ID:     {creds.environment_id}{_source_label(config, 'environment_id')}")

    try:
        with output.spinner("Testing connection..."):
            asyncio.run(_with_client(creds, lambda c: c.health_check()))
    except ApiError as e:
        output.warning(f"API unreachable: {e}")
    else:
        output.success("API connection OK")


def _whoami(args: argparse.Namespace) -> None:
    config = load_config(args.api_url, args.api_key)
    creds = require_auth(config)

    with output.spinner("Fetching user info..."):
        user_info = asyncio.run(_with_client(creds, lambda c: c.get("/v1/users/me")))

    print()
    output.info(f"API URL:    {creds.api_url}")
    if creds.tenant_id:
        output.info(f"Tenant ID:  {creds.tenant_id}")
    if creds.user_id:
        output.info(f"User ID:    {creds.user_id}")
    if creds.environment_id:
        output.info(f"Env ID:     {creds.environment_id}")
    output.info(f"Auth:       {creds.auth_kind}")
    print()
    output.detail(user_info)


def _logout(args: argparse.Namespace) -> None:
    if auth.clear_credentials():
        output.success("Credentials removed. You are now logged out.")
    else:
        output.info("No credentials stored.")


# ── Dispatch table ─────────────────────────────────────────

AUTH_HANDLERS: dict[str, Callable[[argparse.Namespace], None]] = {
    "login":       _login,
    "set-api-key": _set_api_key,
    "status":      _status,
    "whoami":      _whoami,
    "logout":      _logout,
}


def run_auth_command(args: argparse.Namespace) -> None:
    """Dispatch ``flexprice auth <command>``."""
    AUTH_HANDLERS[args.auth_command](args)
