"""Backend assembly — Builds fully configured Solr backends from settings.

Assembly happens once per process (see the API lifespan) in three steps:

  1. ``create_connector`` — core URL, timeout, default params, highlighting,
     hidden filters, logger and proxy
  2. ``create_backend`` — search specs → query builder, record factory, logger
  3. ``create_listeners`` — profile-specific search listeners

What differs between cores lives in a ``BackendProfile``; there is no
subclass per core.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from pydantic import BaseModel, ConfigDict, Field

from libdiscover.config.settings import Settings
from libdiscover.search.solr.backend import SearchListener, SolrBackend
from libdiscover.search.solr.connector import DEFAULT_TIMEOUT, SolrConnector
from libdiscover.search.solr.listeners import SpellingListener
from libdiscover.search.solr.query_builder import QueryBuilder
from libdiscover.search.solr.records import AuthorityRecord, RecordFactory, SolrRecord
from libdiscover.search.solr.specs import SearchSpecsReader

logger = logging.getLogger(__name__)

QUERY_DEFAULTS: dict[str, str] = {"wt": "json", "json.nl": "arrarr", "fl": "*,score"}

HIGHLIGHT_START = "{{{{START_HILITE}}}}"
HIGHLIGHT_END = "{{{{END_HILITE}}}}"

ListenerFactory = Callable[[SolrBackend, Settings], SearchListener | None]


def spelling_listener(backend: SolrBackend, settings: Settings) -> SearchListener | None:
    """Attach spelling suggestions when ``searches.general.spellcheck`` is on."""
    if not settings.searches.general.spellcheck:
        return None
    return SpellingListener()


class BackendProfile(BaseModel):
    """Everything that distinguishes one core's backend from another's."""

    model_config = ConfigDict(frozen=True)

    core: str = Field(description="Solr core name appended to the index URL")
    specs_file: str = Field(description="YAML search specs file for the core")
    record_factory: RecordFactory = Field(
        default=SolrRecord.from_solr, description="Builds a record from a Solr document"
    )
    listener_factories: tuple[ListenerFactory, ...] = Field(
        default=(), description="Factories for the search listeners attached to the backend"
    )


BIBLIO_PROFILE = BackendProfile(
    core="biblio",
    specs_file="searchspecs.yaml",
    listener_factories=(spelling_listener,),
)

AUTHORITY_PROFILE = BackendProfile(
    core="authority",
    specs_file="authsearchspecs.yaml",
    record_factory=AuthorityRecord.from_solr,
)


class BackendAssembler:
    """Assemble a ``SolrBackend`` for one profile.

    Dependencies are passed in explicitly; any of the optional ones may be
    left out, in which case the corresponding feature is simply not wired.

    Args:
        profile: Core name, specs file, record factory and listeners.
        settings: Application settings (``index`` and ``searches`` sections).
        logger: Logger attached to connector and backend.
        proxy: HTTP proxy URL for index requests; defaults to ``index.proxy``.
        specs_reader: Reader for search specs; defaults to one using
            ``searches.specs_dirs``.
        transport: Optional ``httpx`` transport handed to the connector.
    """

    def __init__(
        self,
        profile: BackendProfile,
        settings: Settings,
        *,
        logger: logging.Logger | None = None,
        proxy: str | None = None,
        specs_reader: SearchSpecsReader | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.profile = profile
        self.settings = settings
        self.logger = logger
        self.proxy = proxy if proxy is not None else settings.index.proxy
        self.specs_reader = specs_reader or SearchSpecsReader(settings.searches.specs_dirs)
        self.transport = transport

    def assemble(self) -> SolrBackend:
        """Create connector, backend and listeners; return the ready backend."""
        connector = self.create_connector()
        backend = self.create_backend(connector)
        self.create_listeners(backend)
        logger.info(
            "Assembled Solr backend '%s' at %s (%d listeners)",
            self.profile.core,
            connector.url,
            len(backend.listeners),
        )
        return backend

    def create_connector(self) -> SolrConnector:
        index = self.settings.index
        searches = self.settings.searches

        timeout = index.timeout if index.timeout is not None else DEFAULT_TIMEOUT
        connector = SolrConnector(f"{index.url}/{self.profile.core}", timeout=timeout, transport=self.transport)
        connector.set_query_defaults(QUERY_DEFAULTS)

        if searches.general.highlighting or searches.general.snippets:
            connector.add_query_append("hl", "true")
            connector.add_query_append("hl.fl", "*")
            connector.add_query_append("hl.simple.pre", HIGHLIGHT_START)
            connector.add_query_append("hl.simple.post", HIGHLIGHT_END)

        for field_name, value in searches.hidden_filters.items():
            connector.add_query_append("fq", f'{field_name}:"{value}"')
        for raw_filter in searches.raw_hidden_filters:
            connector.add_query_append("fq", raw_filter)

        if self.logger:
            connector.set_logger(self.logger)
        if self.proxy:
            connector.set_proxy(self.proxy)
        return connector

    def create_backend(self, connector: SolrConnector) -> SolrBackend:
        backend = SolrBackend(self.profile.core, connector, record_factory=self.profile.record_factory)
        specs = self.specs_reader.get(self.profile.specs_file)
        backend.set_query_builder(QueryBuilder(specs))
        if self.logger:
            backend.set_logger(self.logger)
        return backend

    def create_listeners(self, backend: SolrBackend) -> None:
        for factory in self.profile.listener_factories:
            listener = factory(backend, self.settings)
            if listener is not None:
                backend.attach_listener(listener)


def assemble_backend(
    profile: BackendProfile,
    settings: Settings,
    *,
    logger: logging.Logger | None = None,
    proxy: str | None = None,
    specs_reader: SearchSpecsReader | None = None,
    transport: httpx.BaseTransport | None = None,
) -> SolrBackend:
    """Shortcut for ``BackendAssembler(...).assemble()``."""
    return BackendAssembler(
        profile,
        settings,
        logger=logger,
        proxy=proxy,
        specs_reader=specs_reader,
        transport=transport,
    ).assemble()
