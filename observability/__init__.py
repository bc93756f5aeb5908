from .logging import build_log_context, log_event, redact
from .prometheus import render_prometheus

__all__ = ["build_log_context", "log_event", "redact", "render_prometheus"]
