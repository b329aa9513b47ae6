"""Backend-agnostic query models.

A ``Query`` is a single search term aimed at a named search handler
(``AllFields``, ``Heading``, ...). A ``QueryGroup`` combines queries with a
boolean operator, and groups of groups are combined with ``join``; this is
the structure an advanced search form submits as ``lookfor0[]``,
``type0[]``, ``bool0[]``, ... parameters.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Operator = Literal["AND", "OR", "NOT"]


class Query(BaseModel):
    """A single term searched with one handler."""

    model_config = ConfigDict(frozen=True)

    lookfor: str = Field(default="", description="Raw user search term")
    handler: str = Field(default="AllFields", description="Search handler / field type name")

    @property
    def is_empty(self) -> bool:
        return not self.lookfor.strip()


class QueryGroup(BaseModel):
    """A boolean combination of queries or of nested groups.

    ``operator`` joins the members of a group; ``join`` is only meaningful
    on a group whose members are themselves groups and names the operator
    placed *between* them. A member group with operator ``NOT`` is rendered
    as a negated clause (``AND NOT (...)``).
    """

    model_config = ConfigDict(frozen=True)

    operator: Operator = Field(default="AND", description="Operator combining the members")
    queries: tuple[Union[Query, QueryGroup], ...] = Field(default=(), description="Members of this group")
    join: Literal["AND", "OR"] = Field(default="AND", description="Operator placed between member groups")

    @field_validator("operator", "join", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def is_empty(self) -> bool:
        return all(q.is_empty for q in self.queries)

    @classmethod
    def from_request_params(cls, params: Mapping[str, Any]) -> QueryGroup:
        """Build an advanced query from ``join``/``lookforN``/``typeN``/``boolN`` parameters.

        Each parameter may be a scalar or a list. Clauses with a blank
        ``lookfor`` are dropped, and a group left without clauses is skipped.
        Numbering stops at the first index with no ``lookforN`` parameter.
        """
        groups: list[QueryGroup] = []
        index = 0
        while f"lookfor{index}" in params:
            terms = _as_list(params[f"lookfor{index}"])
            handlers = _as_list(params.get(f"type{index}", []))
            bools = _as_list(params.get(f"bool{index}", ["AND"]))

            queries = [
                Query(lookfor=term, handler=handlers[i] if i < len(handlers) and handlers[i] else "AllFields")
                for i, term in enumerate(terms)
                if term and str(term).strip()
            ]
            if queries:
                groups.append(cls(operator=bools[0] if bools else "AND", queries=tuple(queries)))
            index += 1

        return cls(join=params.get("join") or "AND", queries=tuple(groups))


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


QueryGroup.model_rebuild()

AnyQuery = Union[Query, QueryGroup]
