"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any

import pytest

from libdiscover.config.settings import Settings
from tests.solr_stub import SolrStub


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        index={"url": "http://host:8983/solr"},
    )


@pytest.fixture
def solr() -> SolrStub:
    return SolrStub()


@pytest.fixture
def authority_docs() -> list[dict[str, Any]]:
    """Authority records as returned for a search on 'Twain'."""
    return [
        {"id": "auth001", "heading": ["Twain, Mark"], "use_for": ["Mark Twain"], "score": 9.1},
        {"id": "auth002", "heading": ["Clemens, Samuel"], "use_for": ["Twain, Mark"], "score": 7.4},
        {"id": "auth003", "heading": ["Twain, Mark"], "score": 3.2},
    ]
