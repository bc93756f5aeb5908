from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import requests

from common.errors import TransportError

USER_AGENT = "kafka-connect-exporter/0.1.0"


def default_headers() -> Dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: bytes


@dataclass(frozen=True)
class ConnectClient:
    """
    Thin wrapper around `requests` for a single Kafka Connect cluster.

    Immutable, so one instance is shared by every concurrent scrape.
    No retry happens here; see `connect.fetcher`.
    """

    base_uri: str
    timeout_sec: float = 3.0
    verify_tls: bool = True
    headers: Dict[str, str] = field(default_factory=default_headers)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_uri", self.base_uri.rstrip("/"))

    def url(self, path: str) -> str:
        return f"{self.base_uri}/{path.lstrip('/')}"

    def fetch_raw(self, path: str) -> RawResponse:
        url = self.url(path)
        try:
            response = requests.get(
                url,
                headers=dict(self.headers),
                timeout=self.timeout_sec,
                verify=self.verify_tls,
            )
        except requests.RequestException as e:
            raise TransportError(f"Error getting {url}: {e}", {"url": url}) from e
        return RawResponse(status_code=response.status_code, body=response.content)
