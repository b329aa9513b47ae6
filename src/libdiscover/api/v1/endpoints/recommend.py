"""Recommendation endpoints — Authority heading suggestions for a search.

Recommendations are supplementary to the main result list, so failures of
the authority core are logged and answered with an empty suggestion list
instead of an error.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from libdiscover.api.deps import get_authority_backend, get_settings
from libdiscover.config.settings import Settings
from libdiscover.models.heading import AuthorityRecommendResponse
from libdiscover.observability.logging import bind_search_context
from libdiscover.recommend.authority import AuthorityRecommend
from libdiscover.search.exceptions import SearchError
from libdiscover.search.solr.backend import SolrBackend

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/recommend/authority",
    response_model=AuthorityRecommendResponse,
    summary="Authority Heading Recommendations",
    description=(
        "Suggest authority headings for the search term in `lookfor`: records "
        "where the term is a variant heading but not the main heading.\n\n"
        "Advanced searches (`search_type=advanced`) never produce suggestions. "
        "If the authority index is unavailable the result list is empty."
    ),
)
def authority_recommendations(
    lookfor: str | None = Query(default=None, description="The user's search term"),
    search_type: str = Query(default="basic", description="Type of the originating search"),
    settings: Settings = Depends(get_settings),
    backend: SolrBackend = Depends(get_authority_backend),
) -> AuthorityRecommendResponse:
    """Run ``AuthorityRecommend`` for one incoming search request."""
    bind_search_context(search_type=search_type, core=backend.identifier)

    recommend = AuthorityRecommend(settings.recommend.authority_filters)
    recommend.capture({"lookfor": lookfor}, search_type=search_type)
    response = AuthorityRecommendResponse(lookfor=recommend.lookfor, search_type=search_type)

    if not settings.recommend.authority_enabled:
        return response

    try:
        recommend.execute(backend)
    except SearchError as e:
        logger.warning("Authority recommendations unavailable: %s", e)
        return response

    response.results = recommend.results()
    return response
