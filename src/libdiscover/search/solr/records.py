"""Record models for Solr documents and search responses."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field


def first_value(val: Any) -> Any:
    """Solr may return single-valued fields as lists; unwrap transparently."""
    if isinstance(val, list):
        return val[0] if val else ""
    return val


def named_list_to_dict(value: Any) -> dict[str, Any]:
    """Normalise a Solr named list.

    With ``json.nl=arrarr`` named lists arrive as ``[[name, value], ...]``;
    plain JSON objects are passed through.
    """
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return {str(pair[0]): pair[1] for pair in value if isinstance(pair, (list, tuple)) and len(pair) == 2}
    return {}


class SolrRecord(BaseModel):
    """A bibliographic Solr document."""

    fields: dict[str, Any] = Field(default_factory=dict, description="Stored fields as returned by Solr")
    highlights: dict[str, list[str]] = Field(default_factory=dict, description="Highlighted fragments by field")

    @property
    def unique_id(self) -> str:
        return str(self.fields.get("id", ""))

    @property
    def score(self) -> float:
        return float(self.fields.get("score", 0.0))

    @property
    def breadcrumb(self) -> str:
        """Short display string for navigation and suggestions."""
        return str(first_value(self.fields.get("title_short", self.fields.get("title", ""))))

    @classmethod
    def from_solr(cls, doc: dict[str, Any], highlights: dict[str, Any] | None = None) -> SolrRecord:
        hl = named_list_to_dict(highlights or {})
        return cls(
            fields=dict(doc),
            highlights={name: list(frags) for name, frags in hl.items() if isinstance(frags, list)},
        )


class AuthorityRecord(SolrRecord):
    """An authority (name/subject heading) document."""

    @property
    def breadcrumb(self) -> str:
        heading = first_value(self.fields.get("heading"))
        return str(heading).strip() if heading is not None else ""

    @property
    def use_for(self) -> list[str]:
        value = self.fields.get("use_for", [])
        return [str(v) for v in value] if isinstance(value, list) else [str(value)]


RecordFactory = Callable[..., SolrRecord]


class RecordCollection(BaseModel):
    """One page of search results."""

    total: int = Field(default=0, description="Total number of matching records")
    offset: int = Field(default=0, description="Offset of the first record in this page")
    records: list[SolrRecord] = Field(default_factory=list, description="Records in index order")
    spelling: dict[str, list[str]] = Field(default_factory=dict, description="Term -> spelling suggestions")
    qtime_ms: int = Field(default=0, description="Solr QTime for the request")

    @classmethod
    def from_response(
        cls,
        data: dict[str, Any],
        record_factory: RecordFactory = SolrRecord.from_solr,
    ) -> RecordCollection:
        response = data.get("response", {})
        highlighting = named_list_to_dict(data.get("highlighting", {}))
        records = [
            record_factory(doc, highlighting.get(str(doc.get("id", ""))))
            for doc in response.get("docs", [])
        ]
        return cls(
            total=response.get("numFound", 0),
            offset=response.get("start", 0),
            records=records,
            qtime_ms=data.get("responseHeader", {}).get("QTime", 0),
        )
