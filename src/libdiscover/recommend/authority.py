"""Authority recommendations — Suggest canonical headings for a search term.

A search for a pseudonym or variant name ("Mark Twain") should point the
user at the authority heading it is filed under ("Clemens, Samuel"). The
module queries the authority core for records where the term matches a
heading variant but *not* the main heading, since a main-heading match is
something the primary search has already found.

Lifecycle, one instance per request::

    recommend = AuthorityRecommend("record_type:Heading")
    recommend.capture(request.query_params, search_type="basic")
    recommend.execute(authority_backend)
    recommend.results()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from libdiscover.models.heading import HeadingResult
from libdiscover.search.query import QueryGroup
from libdiscover.search.solr.backend import SolrBackend

logger = logging.getLogger(__name__)

ADVANCED_SEARCH = "advanced"


class HiddenFilterSpec(BaseModel):
    """A filter applied to the authority search without the user seeing it."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Solr field to restrict")
    expression: str = Field(description="Lucene expression the field must match")

    def __str__(self) -> str:
        return f"{self.field}:({self.expression})"


def parse_filter_settings(settings: str) -> list[HiddenFilterSpec]:
    """Parse ``field:expr:field:expr...`` into filter specs.

    Tokens are consumed in pairs. An unpaired trailing token is dropped with
    a warning rather than rejected.
    """
    if not settings:
        return []
    tokens = settings.split(":")
    if len(tokens) % 2:
        logger.warning(
            "Ignoring unpaired trailing token '%s' in authority filter settings '%s'",
            tokens[-1],
            settings,
        )
    return [HiddenFilterSpec(field=tokens[i], expression=tokens[i + 1]) for i in range(0, len(tokens) - 1, 2)]


def cross_reference_params(lookfor: str) -> dict[str, Any]:
    """Advanced-search parameters for ``(Heading:term) AND NOT (MainHeading:term)``."""
    return {
        "join": "AND",
        "bool0": ["AND"],
        "lookfor0": [lookfor],
        "type0": ["Heading"],
        "bool1": ["NOT"],
        "lookfor1": [lookfor],
        "type1": ["MainHeading"],
    }


def build_cross_reference_query(lookfor: str) -> QueryGroup:
    return QueryGroup.from_request_params(cross_reference_params(lookfor))


class AuthorityRecommend:
    """Per-request authority heading recommender.

    Not safe to share between requests: it keeps the captured term and the
    accumulated results.

    Args:
        settings: Filter settings string or already parsed filter specs.
        limit: Maximum number of authority records to fetch.
    """

    def __init__(self, settings: str | Sequence[HiddenFilterSpec] = "", limit: int = 20) -> None:
        self._filters: list[HiddenFilterSpec] = []
        self._lookfor: str | None = None
        self._search_type: str = "basic"
        self._results: list[HeadingResult] = []
        self._limit = limit
        self.configure(settings)

    @property
    def filters(self) -> list[HiddenFilterSpec]:
        return list(self._filters)

    @property
    def lookfor(self) -> str | None:
        return self._lookfor

    def configure(self, settings: str | Sequence[HiddenFilterSpec]) -> None:
        """Replace the hidden filters from a settings string or typed specs."""
        if isinstance(settings, str):
            self._filters = parse_filter_settings(settings)
        else:
            self._filters = list(settings)

    def capture(self, params: Mapping[str, Any], search_type: str = "basic") -> None:
        """Remember the user's ``lookfor`` term from the request parameters.

        Advanced searches are not captured: they have no single term to
        cross-reference.
        """
        self._search_type = search_type
        if search_type == ADVANCED_SEARCH:
            self._lookfor = None
            return
        lookfor = params.get("lookfor")
        if isinstance(lookfor, (list, tuple)):
            lookfor = lookfor[0] if lookfor else None
        self._lookfor = lookfor.strip() if isinstance(lookfor, str) and lookfor.strip() else None

    def execute(self, backend: SolrBackend) -> None:
        """Query the authority backend and collect unique headings.

        Raises:
            SearchError: Transport and query failures are not handled here.
        """
        if self._search_type == ADVANCED_SEARCH or self._lookfor is None:
            logger.debug("Skipping authority recommendations (search_type=%s)", self._search_type)
            return

        query = build_cross_reference_query(self._lookfor)
        params = {"fq": [str(f) for f in self._filters]} if self._filters else None
        collection = backend.search(query, offset=0, limit=self._limit, params=params)

        seen = {r.heading for r in self._results}
        for record in collection.records:
            heading = record.breadcrumb
            if not heading or heading in seen:
                continue
            seen.add(heading)
            self._results.append(HeadingResult(id=record.unique_id, heading=heading))

        logger.info(
            "Authority recommendations for '%s': %d of %d records kept",
            self._lookfor,
            len(self._results),
            len(collection.records),
        )

    def results(self) -> list[HeadingResult]:
        return list(self._results)
