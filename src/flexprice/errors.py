"""Exception taxonomy shared by the CLI and the dashboard."""

from __future__ import annotations

LOGIN_HINT = "Run `flexprice auth login` or `flexprice auth set-api-key <KEY>`."


class FlexpriceError(RuntimeError):
    """Base class for every error the CLI reports to the user."""


# ── Configuration / credentials ────────────────────────────


class ConfigError(FlexpriceError):
    pass


class NoApiUrlError(ConfigError):
    def __init__(self) -> None:
        super().__init__("No API URL configured. Pass --api-url or set FLEXPRICE_API_URL.")


class CredentialsError(FlexpriceError):
    pass


class CorruptCredentialsError(CredentialsError):
    def __init__(self, path, reason: str) -> None:
        super().__init__(
            f"Credentials file {path} is unreadable ({reason}). "
            "Re-run `flexprice auth login` to recreate it."
        )
        self.path = path
        self.reason = reason


class NotAuthenticatedError(CredentialsError):
    def __init__(self) -> None:
        super().__init__(f"Not authenticated. {LOGIN_HINT}")


# ── HTTP ───────────────────────────────────────────────────


class ApiError(FlexpriceError):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class UnauthorizedError(ApiError):
    def __init__(self, message: str = "") -> None:
        super().__init__(
            401,
            message or f"Authentication failed. {LOGIN_HINT}",
        )


class NetworkError(ApiError):
    """Transport-level failure: connection refused, DNS, timeout."""

    def __init__(self, cause: BaseException) -> None:
        detail = str(cause) or type(cause).__name__
        super().__init__(0, f"Cannot reach FlexPrice API: {detail}")
        self.cause = cause
