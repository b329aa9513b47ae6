"""Tests for the authority recommendation endpoint GET /v1/recommend/authority."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

from libdiscover.api.app import create_app
from libdiscover.api.deps import set_backends
from libdiscover.config.settings import Settings
from libdiscover.search.factory import AUTHORITY_PROFILE, assemble_backend
from tests.solr_stub import SolrStub, solr_select_response


@contextmanager
def _client(settings: Settings, solr: SolrStub) -> Iterator[TestClient]:
    app = create_app(settings)
    backend = assemble_backend(AUTHORITY_PROFILE, settings, transport=solr.transport)
    set_backends({"authority": backend}, settings)
    yield TestClient(app)
    set_backends(None)


@pytest.fixture
def client(settings: Settings, solr: SolrStub) -> Iterator[TestClient]:
    with _client(settings, solr) as c:
        yield c


class TestAuthorityRecommendEndpoint:
    def test_returns_unique_headings(
        self, client: TestClient, solr: SolrStub, authority_docs: list[dict[str, Any]]
    ) -> None:
        solr.respond("/select", solr_select_response(authority_docs))

        resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["lookfor"] == "Twain"
        assert body["search_type"] == "basic"
        assert body["results"] == [
            {"id": "auth001", "heading": "Twain, Mark"},
            {"id": "auth002", "heading": "Clemens, Samuel"},
        ]
        assert solr.last_values("q") == [
            '((heading:("Twain")^500 OR heading:(Twain)^100 OR use_for:("Twain")^250 OR use_for:(Twain)^50))'
            ' AND NOT ((heading:("Twain")^500 OR heading:(Twain)^100))'
        ]

    def test_syntax_characters_in_term_are_escaped(
        self, client: TestClient, solr: SolrStub, authority_docs: list[dict[str, Any]]
    ) -> None:
        solr.respond("/select", solr_select_response(authority_docs))

        resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain: a life (1835"})

        assert resp.status_code == 200
        assert len(resp.json()["results"]) == 2
        (q,) = solr.last_values("q")
        assert "heading:(Twain\\: AND a AND life AND \\(1835)^100" in q
        unquoted = re.sub(r'"[^"]*"', '""', q).replace("\\(", "")
        assert unquoted.count("(") == unquoted.count(")")

    def test_advanced_search_gives_empty_list(self, client: TestClient, solr: SolrStub) -> None:
        resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain", "search_type": "advanced"})
        assert resp.status_code == 200
        assert resp.json()["results"] == []
        assert solr.requests == []

    def test_missing_lookfor(self, client: TestClient, solr: SolrStub) -> None:
        resp = client.get("/v1/recommend/authority")
        assert resp.status_code == 200
        assert resp.json() == {"lookfor": None, "search_type": "basic", "results": []}
        assert solr.requests == []

    def test_index_failure_is_fail_open(self, client: TestClient, solr: SolrStub) -> None:
        solr.respond("/select", {"error": {"msg": "boom"}}, status_code=500)
        resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain"})
        assert resp.status_code == 200
        assert resp.json()["results"] == []

    def test_configured_filters_sent(self, solr: SolrStub) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            index={"url": "http://host:8983/solr"},
            recommend={"authority_filters": "record_type:Heading"},
        )
        solr.respond("/select", solr_select_response([]))
        with _client(settings, solr) as client:
            client.get("/v1/recommend/authority", params={"lookfor": "Twain"})
        assert solr.last_values("fq") == ["record_type:(Heading)"]

    def test_disabled(self, solr: SolrStub) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            index={"url": "http://host:8983/solr"},
            recommend={"authority_enabled": False},
        )
        with _client(settings, solr) as client:
            resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain"})
            assert resp.json()["results"] == []
        assert solr.requests == []

    def test_lookfor_documented_in_openapi(self, client: TestClient) -> None:
        operation = client.get("/openapi.json").json()["paths"]["/v1/recommend/authority"]["get"]
        names = {p["name"]: p["in"] for p in operation["parameters"]}
        assert names["lookfor"] == "query"
        assert names["search_type"] == "query"

    def test_backend_not_initialized(self, settings: Settings) -> None:
        set_backends(None)
        client = TestClient(create_app(settings), raise_server_exceptions=False)
        resp = client.get("/v1/recommend/authority", params={"lookfor": "Twain"})
        assert resp.status_code == 500
