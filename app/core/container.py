from dataclasses import dataclass
from typing import Any, Dict, Optional

from app.core.config import Settings
from connect import ConnectClient, ConnectFetcher, MetricsSnapshot, collect
from observability import build_log_context


@dataclass(frozen=True)
class Container:
    """
    Process-wide, read-only wiring: settings plus the HTTP client built from them.

    Every scrape gets its own fetcher and snapshot; nothing here changes after startup.
    """

    settings: Settings
    client: ConnectClient

    def fetcher(self, ctx: Optional[Dict[str, Any]] = None) -> ConnectFetcher:
        return ConnectFetcher(self.client, self.settings.backoff, ctx=ctx)

    def scrape(self) -> MetricsSnapshot:
        ctx = build_log_context(tool="scrape")
        return collect(self.fetcher(ctx), ctx=ctx)


def build_container(settings: Settings) -> Container:
    client = ConnectClient(
        base_uri=settings.connect_uri,
        timeout_sec=float(settings.timeout_sec),
        verify_tls=settings.verify_tls,
    )
    return Container(settings=settings, client=client)
