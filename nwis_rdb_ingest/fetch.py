"""
Document retrieval for nwis-rdb-ingest.

The parser never performs I/O itself. Remote documents come from a
``Fetcher``: any object with ``fetch(url) -> FetchResult``. Tests and
callers with their own HTTP stack pass their own; ``WebServiceFetcher``
is the default, built on ``requests``.

Warning vs. error:
- The service answering "no data" (HTTP 404), answering with an HTML page
  instead of RDB text, or sending a ``Warning`` header is a *warning*:
  ``header_info["warn"]`` is set and the caller returns an empty result.
- Transport failures and any other HTTP error status raise ``FetchError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import requests

from nwis_rdb_ingest.exceptions import FetchError

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 60


@dataclass
class FetchResult:
    """A retrieved document plus the service's response headers.

    Attributes:
        url: The URL that was requested.
        text: The decoded response body.
        header_info: Lower-cased response headers; a ``warn`` key marks a
            service-level warning.
    """

    url: str
    text: str
    header_info: dict[str, str] = field(default_factory=dict)

    @property
    def warned(self) -> bool:
        return "warn" in self.header_info


class Fetcher(Protocol):
    """Anything that can turn a URL into a ``FetchResult``."""

    def fetch(self, url: str) -> FetchResult: ...


class WebServiceFetcher:
    """Blocking HTTP fetcher for the NWIS web services.

    Args:
        timeout: Seconds before the request is abandoned.
        session: Optional ``requests.Session`` (connection reuse, proxies).
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> FetchResult:
        logger.info("Fetching %s", url)
        try:
            response = self.session.get(
                url,
                headers={"Accept-Encoding": "gzip"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise FetchError(f"Error fetching data from {url}: {exc}") from exc

        header_info = {k.lower(): v for k, v in response.headers.items()}
        content_type = header_info.get("content-type", "")

        if response.status_code == 404:
            header_info["warn"] = f"No data found (HTTP 404): {response.reason}"
        elif response.status_code >= 400:
            raise FetchError(
                f"HTTP {response.status_code} from {url}: {response.reason}"
            )
        elif content_type.startswith("text/html"):
            header_info["warn"] = "Service returned an HTML page instead of RDB data"
        elif "warning" in header_info:
            header_info["warn"] = header_info["warning"]

        if "warn" in header_info:
            logger.warning("Service warning for %s: %s", url, header_info["warn"])

        return FetchResult(url=url, text=response.text, header_info=header_info)
