"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from libdiscover import __version__
from libdiscover.api.deps import set_backends
from libdiscover.api.v1.router import router as v1_router
from libdiscover.config.settings import Settings
from libdiscover.observability.logging import setup_logging
from libdiscover.search.factory import AUTHORITY_PROFILE, BIBLIO_PROFILE, BackendAssembler, BackendProfile
from libdiscover.search.solr.backend import SolrBackend

logger = logging.getLogger(__name__)

PROFILES: tuple[BackendProfile, ...] = (BIBLIO_PROFILE, AUTHORITY_PROFILE)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment
            (and ``libdiscover-config.yaml`` when present).

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        yaml_path = Path("libdiscover-config.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Assemble the shared backends at startup, close them at shutdown."""
        setup_logging(settings.observability, debug=settings.debug)
        logger.info("Starting %s v%s", settings.app_name, __version__)

        backends = assemble_backends(settings)
        set_backends(backends, settings)
        app.state.settings = settings
        app.state.backends = backends

        yield

        logger.info("Shutting down %s...", settings.app_name)
        for backend in backends.values():
            backend.close()
        set_backends(None)

    app = FastAPI(
        title=settings.app_name,
        description="Solr-backed search services for library discovery, including authority heading suggestions.",
        version=__version__,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")
    return app


def assemble_backends(
    settings: Settings,
    profiles: tuple[BackendProfile, ...] = PROFILES,
) -> dict[str, SolrBackend]:
    """Assemble one backend per profile, keyed by core name."""
    backend_logger = logging.getLogger("libdiscover.search")
    return {
        profile.core: BackendAssembler(profile, settings, logger=backend_logger).assemble()
        for profile in profiles
    }
