"""Solr connector — Synchronous HTTP client for one Solr core.

Uses ``httpx.Client`` against the core's standard request handlers
(``/select``, ``/get``, ``/admin/ping``). The connector owns two kinds of
configured parameters:

  - *query defaults*, sent unless a request sets the same parameter;
  - *query appends*, added to every request (hidden filters, highlighting).

Usage::

    connector = SolrConnector("http://localhost:8983/solr/biblio", timeout=10)
    connector.set_query_defaults({"wt": "json"})
    connector.add_query_append("fq", 'format:"Book"')
    data = connector.search({"q": "title:(solar)"})
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from libdiscover.search.exceptions import IndexConnectionError, QueryError

_default_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ConnectorConfig(BaseModel):
    """Snapshot of a connector's configuration."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Full core URL")
    timeout: float = Field(description="Request timeout in seconds")
    query_defaults: dict[str, str] = Field(default_factory=dict, description="Params sent unless overridden")
    query_appends: tuple[tuple[str, str], ...] = Field(default=(), description="Params added to every request")
    proxy: str | None = Field(default=None, description="HTTP proxy URL")


class SolrConnector:
    """HTTP connector for a single Solr core.

    Args:
        url: Full core URL, e.g. ``"http://localhost:8983/solr/biblio"``.
        timeout: HTTP request timeout in seconds.
        transport: Optional ``httpx`` transport (tests inject a
            ``httpx.MockTransport`` here).
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._timeout = float(timeout)
        self._transport = transport
        self._query_defaults: dict[str, str] = {}
        self._query_appends: list[tuple[str, str]] = []
        self._proxy: str | None = None
        self._logger: logging.Logger | None = None
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    # ── Configuration ────────────────────────────────────────────────────

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    def set_query_defaults(self, defaults: Mapping[str, str]) -> None:
        self._query_defaults = dict(defaults)

    def add_query_append(self, name: str, value: str) -> None:
        self._query_appends.append((name, value))

    def set_proxy(self, proxy: str) -> None:
        self._proxy = proxy

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def logger(self) -> logging.Logger | None:
        return self._logger

    @property
    def config(self) -> ConnectorConfig:
        return ConnectorConfig(
            url=self._url,
            timeout=self._timeout,
            query_defaults=dict(self._query_defaults),
            query_appends=tuple(self._query_appends),
            proxy=self._proxy,
        )

    # ── Requests ─────────────────────────────────────────────────────────

    def build_params(self, params: Mapping[str, Any] | None = None) -> list[tuple[str, str]]:
        """Merge request params with the configured defaults and appends.

        Values may be scalars or lists; lists become repeated parameters.
        """
        merged: list[tuple[str, str]] = []
        request_params = dict(params or {})
        for name, value in self._query_defaults.items():
            if name not in request_params:
                merged.append((name, value))
        for name, value in request_params.items():
            if isinstance(value, (list, tuple)):
                merged.extend((name, str(v)) for v in value)
            elif value is not None:
                merged.append((name, str(value)))
        merged.extend(self._query_appends)
        return merged

    def search(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run a ``/select`` request and return the decoded JSON response."""
        return self._get("/select", self.build_params(params))

    def retrieve(self, record_id: str) -> dict[str, Any]:
        """Fetch one record through the real-time ``/get`` handler."""
        return self._get("/get", self.build_params({"id": record_id, "fl": "*"}))

    def ping(self) -> dict[str, Any]:
        """Call ``/admin/ping``; raises like any other request on failure."""
        return self._get("/admin/ping", [("wt", "json")])

    def close(self) -> None:
        """Close the underlying HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _http(self) -> httpx.Client:
        # Created on first use so proxy/transport set after construction apply
        with self._client_lock:
            if self._client is None:
                kwargs: dict[str, Any] = {"timeout": httpx.Timeout(self._timeout)}
                if self._transport is not None:
                    kwargs["transport"] = self._transport
                elif self._proxy:
                    kwargs["proxy"] = self._proxy
                self._client = httpx.Client(base_url=self._url, **kwargs)
            return self._client

    def _get(self, path: str, params: list[tuple[str, str]]) -> dict[str, Any]:
        log = self._logger or _default_logger
        start = time.monotonic()
        try:
            resp = self._http().get(path, params=params)
            resp.raise_for_status()
        except httpx.TransportError as e:
            log.warning("Solr request to %s%s failed: %s", self._url, path, e)
            raise IndexConnectionError(f"Cannot reach Solr at {self._url}: {e}") from e
        except httpx.HTTPStatusError as e:
            log.warning("Solr request to %s%s returned HTTP %d", self._url, path, e.response.status_code)
            raise QueryError(f"Solr request failed: {e}") from e

        took_ms = int((time.monotonic() - start) * 1000)
        log.debug("GET %s%s (%d params) took %d ms", self._url, path, len(params), took_ms)
        try:
            return resp.json()
        except ValueError as e:
            raise QueryError(f"Solr returned invalid JSON from {path}: {e}") from e
