"""Record endpoint — Fetch a single record from an assembled core."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from libdiscover.api.deps import get_backends
from libdiscover.search.exceptions import RecordNotFoundError, SearchError
from libdiscover.search.solr.backend import SolrBackend

logger = logging.getLogger(__name__)

router = APIRouter()


class RecordResponse(BaseModel):
    """A single record as stored in the index."""

    core: str = Field(description="Core the record was fetched from")
    id: str = Field(description="Unique record id")
    breadcrumb: str = Field(description="Short display string for the record")
    fields: dict[str, Any] = Field(description="Stored fields")


@router.get(
    "/records/{core}/{record_id}",
    response_model=RecordResponse,
    summary="Fetch Record",
    responses={
        404: {"description": "Unknown core or record"},
        502: {"description": "The index could not be queried"},
    },
)
def get_record(
    core: str,
    record_id: str,
    backends: dict[str, SolrBackend] = Depends(get_backends),
) -> RecordResponse:
    backend = backends.get(core)
    if backend is None:
        raise HTTPException(status_code=404, detail=f"Unknown core '{core}'")

    try:
        record = backend.retrieve(record_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except SearchError as e:
        logger.error("Record lookup failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Index request failed: {e!s}") from e

    return RecordResponse(core=core, id=record.unique_id, breadcrumb=record.breadcrumb, fields=record.fields)
