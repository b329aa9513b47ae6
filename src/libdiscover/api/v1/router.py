"""API v1 Router — Recommendation, record and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from libdiscover.api.v1.endpoints.health import router as health_router
from libdiscover.api.v1.endpoints.recommend import router as recommend_router
from libdiscover.api.v1.endpoints.records import router as records_router

router = APIRouter(tags=["v1"])
router.include_router(recommend_router)
router.include_router(records_router)
router.include_router(health_router)
