import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from common.errors import ConfigError
from connect.retry import BackoffPolicy
from observability.logging import build_log_context, log_event

load_dotenv()

CONFIG_CTX = build_log_context(tool="config")

DEFAULT_PORT = 8080
DEFAULT_TIMEOUT_SEC = 3


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    try:
        return float((os.getenv(name) or "").strip() or default)
    except Exception:
        return default


def parse_port(raw: Any) -> int:
    try:
        port = int(str(raw).strip())
    except (TypeError, ValueError):
        port = -1
    if not 0 < port < 65536:
        log_event("config_invalid_port", ctx=CONFIG_CTX, data={"value": raw, "default": DEFAULT_PORT}, level="error")
        return DEFAULT_PORT
    return port


def parse_timeout(raw: Any) -> int:
    try:
        timeout = int(str(raw).strip())
    except (TypeError, ValueError):
        timeout = -1
    if not 0 < timeout < 65536:
        log_event(
            "config_invalid_timeout",
            ctx=CONFIG_CTX,
            data={"value": raw, "default": DEFAULT_TIMEOUT_SEC},
            level="error",
        )
        return DEFAULT_TIMEOUT_SEC
    return timeout


@dataclass(frozen=True)
class Settings:
    PROJECT_NAME = "kafka-connect-exporter"
    VERSION = "0.1.0"

    connect_uri: str
    listen_host: str = "0.0.0.0"
    listen_port: int = DEFAULT_PORT
    timeout_sec: int = DEFAULT_TIMEOUT_SEC
    verify_tls: bool = True
    strict_paths: bool = False
    backoff: BackoffPolicy = BackoffPolicy()


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build Settings from the environment (and .env), then apply non-None overrides.

    Overrides come from command-line flags and win over the environment.
    """
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    uri = (overrides.pop("connect_uri", None) or os.getenv("CONNECT_URI") or "").strip()
    if not uri:
        raise ConfigError("CONNECT_URI (or --uri) is required")

    settings = Settings(
        connect_uri=uri,
        listen_host=os.getenv("LISTEN_HOST", "0.0.0.0"),
        listen_port=parse_port(os.getenv("LISTEN_PORT", str(DEFAULT_PORT))),
        timeout_sec=parse_timeout(os.getenv("HTTP_TIMEOUT", str(DEFAULT_TIMEOUT_SEC))),
        verify_tls=_env_bool("CONNECT_TLS_VERIFY", True),
        strict_paths=_env_bool("CONNECT_EXPORTER_STRICT_PATHS", False),
        backoff=BackoffPolicy(
            initial_interval_sec=_env_float("CONNECT_RETRY_INITIAL_SEC", 0.5),
            multiplier=max(1.0, _env_float("CONNECT_RETRY_MULTIPLIER", 1.5)),
            max_interval_sec=_env_float("CONNECT_RETRY_MAX_INTERVAL_SEC", 2.0),
            max_elapsed_sec=_env_float("CONNECT_RETRY_MAX_ELAPSED_SEC", 10.0),
        ),
    )

    if "listen_port" in overrides:
        overrides["listen_port"] = parse_port(overrides["listen_port"])
    if "timeout_sec" in overrides:
        overrides["timeout_sec"] = parse_timeout(overrides["timeout_sec"])
    return replace(settings, **overrides)
