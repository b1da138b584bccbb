"""Entry point for flexprice — run with `python -m flexprice` or `flexprice`."""

from __future__ import annotations

import argparse
import sys

from . import __version__


def _add_global_flags(parser: argparse.ArgumentParser, default) -> None:
    parser.add_argument(
        "--api-url",
        default=default,
        metavar="URL",
        help="Override the API base URL for this invocation.",
    )
    parser.add_argument(
        "--api-key",
        default=default,
        metavar="KEY",
        help="Override the API key for this invocation.",
    )


def _dashboard(args: argparse.Namespace) -> None:
    from .cli.auth import require_auth
    from .config import load_config

    config = load_config(args.api_url, args.api_key)
    require_auth(config)

    from .dashboard.app import run_dashboard
    run_dashboard(config)


def _config(args: argparse.Namespace) -> None:
    from .cli.config import show_config
    show_config(args)


def _auth(args: argparse.Namespace) -> None:
    from .cli.auth import run_auth_command
    run_auth_command(args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flexprice",
        description="⚡ FlexPrice CLI — Usage-based billing, from your terminal.",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"flexprice {__version__}",
    )
    _add_global_flags(parser, None)

    # Subparsers accept the global flags too, without clobbering values
    # given before the subcommand.
    common = argparse.ArgumentParser(add_help=False)
    _add_global_flags(common, argparse.SUPPRESS)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    auth_parser = commands.add_parser(
        "auth", parents=[common],
        help="Authenticate with FlexPrice (login, API key, status).",
    )
    auth_commands = auth_parser.add_subparsers(dest="auth_command", metavar="COMMAND", required=True)

    login = auth_commands.add_parser(
        "login", parents=[common], help="Interactive login with email and password.",
    )
    login.add_argument("--email", help="Account email (prompted if omitted).")

    set_key = auth_commands.add_parser(
        "set-api-key", parents=[common],
        help="Store an API key directly (for CI/CD or pre-provisioned keys).",
    )
    set_key.add_argument("key", help="The API key to store.")
    set_key.add_argument(
        "--skip-verify",
        action="store_true",
        help="Save without checking that the API is reachable.",
    )

    auth_commands.add_parser("status", parents=[common], help="Show authentication status.")
    auth_commands.add_parser("whoami", parents=[common], help="Show the authenticated user and tenant.")
    auth_commands.add_parser("logout", parents=[common], help="Remove stored credentials.")
    auth_parser.set_defaults(handler=_auth)

    config_parser = commands.add_parser(
        "config", parents=[common], help="Show the effective configuration.",
    )
    config_parser.set_defaults(handler=_config)

    dashboard_parser = commands.add_parser(
        "dashboard", parents=[common], help="Launch the interactive TUI dashboard.",
    )
    dashboard_parser.set_defaults(handler=_dashboard)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "handler", None):
        parser.print_help(sys.stderr)
        sys.exit(2)

    from . import output
    from .errors import FlexpriceError
    from .helpers import configure_logging

    configure_logging()
    try:
        args.handler(args)
    except (FlexpriceError, KeyboardInterrupt) as e:
        output.error(str(e) or "Interrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
