from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class AppError(Exception):
    code: str
    message: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        return self.message


class ConfigError(AppError):
    def __init__(self, message: str, data: Dict[str, Any] = None):
        super().__init__("config_error", message, data or {})


class TransportError(AppError):
    """Connection refused, DNS failure, timeout. Safe to retry."""

    def __init__(self, message: str, data: Dict[str, Any] = None):
        super().__init__("transport_error", message, data or {})


class UpstreamFormatError(AppError):
    """The upstream answered, but the body is not JSON."""

    def __init__(self, message: str, data: Dict[str, Any] = None):
        super().__init__("upstream_format", message, data or {})


class FetchExhaustedError(AppError):
    def __init__(self, message: str, data: Dict[str, Any] = None):
        super().__init__("fetch_exhausted", message, data or {})


class NormalizeError(AppError):
    """A single connector or task document could not be turned into a record."""

    def __init__(self, code: str, field: str, message: str):
        super().__init__(code, message, {"field": field})

    @property
    def field(self) -> str:
        return self.data["field"]


class MissingFieldError(NormalizeError):
    def __init__(self, field: str):
        super().__init__("missing_field", field, f"Missing {field}")


class InvalidFieldError(NormalizeError):
    def __init__(self, field: str, detail: str = ""):
        msg = f"Invalid {field}" + (f": {detail}" if detail else "")
        super().__init__("invalid_field", field, msg)


class ListUnavailableError(AppError):
    def __init__(self, message: str = "Could not list connectors", data: Dict[str, Any] = None):
        super().__init__("list_unavailable", message, data or {})


def classify_exception(e: Exception) -> AppError:
    """
    Map transport / parsing issues into stable error codes.
    """
    if isinstance(e, AppError):
        return e

    err_str = str(e).lower()

    if "timeout" in err_str or "timed out" in err_str:
        return AppError("timeout", str(e), {})
    if "network" in err_str or "connection" in err_str or "refused" in err_str:
        return AppError("network_error", str(e), {})

    return AppError("unknown_error", str(e), {})
