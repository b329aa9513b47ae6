"""Solr backend — Executes backend-agnostic queries against one Solr core.

The backend combines:
  1. A ``SolrConnector`` (transport, defaults, hidden filters)
  2. A ``QueryBuilder`` (handler specs → Lucene syntax)
  3. A record factory (raw documents → ``SolrRecord`` subclasses)
  4. Search listeners hooked in before and after every search

Backends are assembled once at startup and hold no per-request state, so
one instance can serve concurrent requests.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel, Field

from libdiscover.search.exceptions import RecordNotFoundError, SearchError
from libdiscover.search.query import AnyQuery
from libdiscover.search.solr.connector import SolrConnector
from libdiscover.search.solr.query_builder import QueryBuilder
from libdiscover.search.solr.records import RecordCollection, RecordFactory, SolrRecord

_default_logger = logging.getLogger(__name__)


class IndexHealth(BaseModel):
    """Health status of a Solr core."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the ping in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchListener(Protocol):
    """Hooks run around every ``SolrBackend.search`` call."""

    def pre_search(self, backend: SolrBackend, query: AnyQuery, params: dict[str, Any]) -> None:
        """Inspect the query and add request parameters."""

    def post_search(self, backend: SolrBackend, collection: RecordCollection, data: dict[str, Any]) -> None:
        """Enrich ``collection`` from the raw response ``data``."""


class SolrBackend:
    """Search backend for a single Solr core.

    Args:
        identifier: Name of the core this backend searches (``biblio``, ``authority``).
        connector: Configured connector for that core.
        record_factory: Builds a record from a raw document and its highlights.
    """

    def __init__(
        self,
        identifier: str,
        connector: SolrConnector,
        record_factory: RecordFactory = SolrRecord.from_solr,
    ) -> None:
        self._identifier = identifier
        self._connector = connector
        self._record_factory = record_factory
        self._query_builder = QueryBuilder()
        self._listeners: list[SearchListener] = []
        self._logger: logging.Logger | None = None

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def connector(self) -> SolrConnector:
        return self._connector

    @property
    def query_builder(self) -> QueryBuilder:
        return self._query_builder

    def set_query_builder(self, builder: QueryBuilder) -> None:
        self._query_builder = builder

    @property
    def logger(self) -> logging.Logger | None:
        return self._logger

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def listeners(self) -> tuple[SearchListener, ...]:
        return tuple(self._listeners)

    def attach_listener(self, listener: SearchListener) -> None:
        self._listeners.append(listener)

    # ── Search ───────────────────────────────────────────────────────────

    def search(
        self,
        query: AnyQuery,
        offset: int = 0,
        limit: int = 20,
        params: dict[str, Any] | None = None,
    ) -> RecordCollection:
        """Run ``query`` and return one page of records.

        ``params`` are extra Solr parameters for this request only (for
        example ``{"fq": [...]}``); they never change the backend itself.

        Raises:
            SearchError: Propagated from the connector on transport failure.
        """
        request_params: dict[str, Any] = dict(params or {})
        request_params.update(self._query_builder.build(query))
        request_params["start"] = offset
        request_params["rows"] = limit

        for listener in self._listeners:
            listener.pre_search(self, query, request_params)

        self._log().debug("Searching %s: q=%s", self._identifier, request_params["q"])
        data = self._connector.search(request_params)
        collection = RecordCollection.from_response(data, self._record_factory)

        for listener in self._listeners:
            listener.post_search(self, collection, data)
        return collection

    def retrieve(self, record_id: str) -> SolrRecord:
        """Fetch a single record by its unique id.

        Raises:
            RecordNotFoundError: If no record has that id.
        """
        data = self._connector.retrieve(record_id)
        doc = data.get("doc")
        if doc is None:
            raise RecordNotFoundError(f"Record '{record_id}' not found in {self._identifier}.")
        return self._record_factory(doc, None)

    def health_check(self) -> IndexHealth:
        """Ping the core and report its status."""
        start = time.monotonic()
        try:
            data = self._connector.ping()
        except SearchError as e:
            return IndexHealth(
                status="unhealthy",
                last_check=datetime.now(UTC).isoformat(),
                message=str(e),
            )
        latency_ms = int((time.monotonic() - start) * 1000)
        solr_status = data.get("status", "unknown")
        return IndexHealth(
            status="healthy" if solr_status == "OK" else "degraded",
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Core: {self._identifier}, status: {solr_status}",
        )

    def close(self) -> None:
        self._connector.close()

    def _log(self) -> logging.Logger:
        return self._logger or _default_logger
