"""Solr query builder — Translates ``Query``/``QueryGroup`` into Lucene syntax.

Translation is driven by search specs loaded from YAML, keyed by handler
name. A spec looks like::

    Heading:
      QueryFields:
        heading:
          - [onephrase, 500]
          - [and, 100]
        use_for:
          - [and, 50]
      FilterQuery: "record_type:Heading"

Every ``(field, handler, boost)`` triple becomes one clause and the clauses
are OR-ed together. Handlers without a spec fall back to ``handler:(term)``.

User terms are escaped token by token: Lucene syntax characters get a
backslash and bare ``AND``/``OR``/``NOT`` tokens are lowercased, so a term
is always searched as words.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from libdiscover.search.query import AnyQuery, Query, QueryGroup

logger = logging.getLogger(__name__)

MATCH_ALL = "*:*"

_WHITESPACE = re.compile(r"\s+")
_LUCENE_SPECIAL = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/])')
_BOOLEAN_KEYWORDS = frozenset({"AND", "OR", "NOT"})


def escape_token(token: str) -> str:
    """Make one whitespace-free token safe to place inside a Lucene clause."""
    if token in _BOOLEAN_KEYWORDS:
        return token.lower()
    return _LUCENE_SPECIAL.sub(r"\\\1", token)


def _escaped_tokens(term: str) -> list[str]:
    return [escape_token(token) for token in term.split(" ")]


class QueryBuilder:
    """Build Solr request parameters from backend-agnostic queries.

    Args:
        specs: Search specs mapping handler names to their field settings.
            An empty mapping is valid; every handler then searches the
            field of the same name.
    """

    def __init__(self, specs: dict[str, Any] | None = None) -> None:
        self._specs: dict[str, Any] = dict(specs or {})

    @property
    def specs(self) -> dict[str, Any]:
        return self._specs

    def build(self, query: AnyQuery) -> dict[str, str]:
        """Return the Solr params (``q``) for ``query``."""
        if query.is_empty:
            return {"q": MATCH_ALL}
        if isinstance(query, QueryGroup):
            return {"q": self._render_group(query)}
        return {"q": self._render_query(query)}

    # ── Rendering ────────────────────────────────────────────────────────

    def _render_group(self, group: QueryGroup) -> str:
        members = [q for q in group.queries if not q.is_empty]
        if all(isinstance(q, QueryGroup) for q in members):
            return self._join_groups(members, group.join)
        return self._render_clause_group(group.operator, [self._render(q) for q in members])

    def _join_groups(self, groups: list[Any], join: str) -> str:
        # NOT groups render with their own leading NOT, giving "a AND NOT (b)"
        rendered = [self._render_group(group) for group in groups]
        return f" {join} ".join(rendered)

    @staticmethod
    def _render_clause_group(operator: str, clauses: list[str]) -> str:
        if operator == "NOT":
            return "NOT (" + " OR ".join(clauses) + ")"
        return "(" + f" {operator} ".join(clauses) + ")"

    def _render(self, query: AnyQuery) -> str:
        if isinstance(query, QueryGroup):
            return self._render_group(query)
        return self._render_query(query)

    def _render_query(self, query: Query) -> str:
        term = _WHITESPACE.sub(" ", query.lookfor.strip())
        spec = self._specs.get(query.handler)
        if not spec:
            return _fallback_clause(query.handler, term)

        clauses: list[str] = []
        for field, handlers in (spec.get("QueryFields") or {}).items():
            for entry in handlers or []:
                handler, boost = (list(entry) + [None])[:2]
                clause = self._field_clause(field, str(handler), term)
                if clause is None:
                    logger.warning("Unknown query handler '%s' for field '%s'", handler, field)
                    continue
                clauses.append(f"{clause}^{boost}" if boost not in (None, "") else clause)

        if not clauses:
            rendered = _fallback_clause(query.handler, term)
        elif len(clauses) == 1:
            rendered = clauses[0]
        else:
            rendered = "(" + " OR ".join(clauses) + ")"

        filter_query = spec.get("FilterQuery")
        if filter_query:
            rendered = f"({rendered} AND ({filter_query}))"
        return rendered

    @staticmethod
    def _field_clause(field: str, handler: str, term: str) -> str | None:
        if handler == "onephrase":
            phrase = term.replace("\\", "\\\\").replace('"', '\\"')
            return f'{field}:("{phrase}")'
        if handler in ("and", "or"):
            return f"{field}:(" + f" {handler.upper()} ".join(_escaped_tokens(term)) + ")"
        if handler == "exact":
            return f"{field}:(" + " ".join(_escaped_tokens(term)) + ")"
        return None


def _fallback_clause(handler: str, term: str) -> str:
    return f"{handler}:(" + " ".join(_escaped_tokens(term)) + ")"
