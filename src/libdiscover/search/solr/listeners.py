"""Search listeners attached to backends at assembly time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from libdiscover.search.query import AnyQuery, Query
from libdiscover.search.solr.records import RecordCollection, named_list_to_dict

if TYPE_CHECKING:
    from libdiscover.search.solr.backend import SolrBackend

logger = logging.getLogger(__name__)


class SpellingListener:
    """Ask Solr for spelling suggestions on single-term searches.

    Advanced (grouped) queries are left alone because they do not map to a
    single term the user could re-run.

    Args:
        dictionaries: Spellcheck dictionaries to consult.
    """

    def __init__(self, dictionaries: tuple[str, ...] = ("default",)) -> None:
        self._dictionaries = dictionaries

    def pre_search(self, backend: SolrBackend, query: AnyQuery, params: dict[str, Any]) -> None:
        if not isinstance(query, Query) or query.is_empty:
            return
        params["spellcheck"] = "true"
        params["spellcheck.q"] = query.lookfor
        params["spellcheck.dictionary"] = list(self._dictionaries)

    def post_search(self, backend: SolrBackend, collection: RecordCollection, data: dict[str, Any]) -> None:
        spellcheck = data.get("spellcheck")
        if not spellcheck:
            return
        suggestions = named_list_to_dict(spellcheck.get("suggestions", []))
        for term, info in suggestions.items():
            info = named_list_to_dict(info)
            words = [
                s.get("word", "") if isinstance(s, dict) else str(s)
                for s in info.get("suggestion", [])
            ]
            if words:
                collection.spelling[term] = words
        if collection.spelling:
            logger.debug("Spelling suggestions from %s: %s", backend.identifier, collection.spelling)
