"""Health check endpoints — Service and per-core index health."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from libdiscover import __version__
from libdiscover.api.deps import get_backends, get_settings
from libdiscover.config.settings import Settings
from libdiscover.search.solr.backend import IndexHealth, SolrBackend

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="libdiscover version")
    service: str = Field(description="Service name (``app_name`` setting)")
    cores: list[str] = Field(description="Cores with an assembled backend")


class IndexHealthResponse(BaseModel):
    """Per-core health check response."""

    cores: dict[str, IndexHealth] = Field(description="Map of core name to its health status")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse, summary="Service Health Check")
def health_check(
    backends: dict[str, SolrBackend] = Depends(get_backends),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service=settings.app_name,
        cores=sorted(backends),
    )


@router.get(
    "/health/index",
    response_model=IndexHealthResponse,
    summary="Index Health Check",
    description="Ping every assembled Solr core and report status and latency.",
)
def index_health(backends: dict[str, SolrBackend] = Depends(get_backends)) -> IndexHealthResponse:
    statuses = {name: backend.health_check() for name, backend in backends.items()}
    unhealthy = [name for name, h in statuses.items() if h.status != "healthy"]
    if unhealthy:
        logger.warning("Unhealthy cores: %s", ", ".join(unhealthy))
    return IndexHealthResponse(cores=statuses)
