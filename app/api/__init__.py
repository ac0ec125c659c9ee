"""API router for v1 endpoints."""

from fastapi import APIRouter

from app.api import assessment_results, benchmarks

router = APIRouter()

# Assessment results computation and retrieval
router.include_router(assessment_results.router, tags=["assessments"])

# Agency benchmark routes
router.include_router(benchmarks.router, tags=["benchmarks"])
