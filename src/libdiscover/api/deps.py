"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from libdiscover.config.settings import Settings
from libdiscover.search.solr.backend import SolrBackend

# Backends assembled during the application lifespan, keyed by core name
_backends: dict[str, SolrBackend] = {}
_settings: Settings | None = None


def set_backends(backends: dict[str, SolrBackend] | None, settings: Settings | None = None) -> None:
    """Install (or clear, with ``None``) the shared backends."""
    global _settings
    _backends.clear()
    if backends:
        _backends.update(backends)
    _settings = settings


def get_backends() -> dict[str, SolrBackend]:
    return _backends


def get_settings() -> Settings:
    """Return the active settings, falling back to defaults outside a server."""
    return _settings if _settings is not None else Settings()


def get_authority_backend() -> SolrBackend:
    """Get the shared authority backend.

    Raises:
        RuntimeError: If the backends were not assembled.
    """
    backend = _backends.get("authority")
    if backend is None:
        raise RuntimeError("Authority backend not initialized. Is the server running?")
    return backend
