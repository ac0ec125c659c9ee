"""API endpoints for agency benchmarks."""

from uuid import UUID

from fastapi import APIRouter, HTTPException

from app.core.assessment_scoring import TemplateNotFoundError, compute_benchmarks
from app.core.logging import get_logger
from app.db.assessment_benchmarks import get_benchmark

logger = get_logger(__name__)

router = APIRouter()


@router.post("/agencies/{agency_id}/benchmarks/{template_id}")
async def recompute_benchmarks(agency_id: UUID, template_id: UUID) -> dict:
    """
    Compute (or recompute) benchmarks for a template.

    Raises:
        HTTPException 404: If the template is not found
        HTTPException 500: If computation fails
    """
    try:
        benchmarks = compute_benchmarks(agency_id, template_id)

        return {
            "template_id": str(template_id),
            "benchmark_data": {cid: b.model_dump() for cid, b in benchmarks.items()},
        }

    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail="Assessment template not found") from e
    except Exception as e:
        logger.exception(f"Failed to compute benchmarks for template {template_id}")
        raise HTTPException(status_code=500, detail="Failed to compute benchmarks") from e


@router.get("/agencies/{agency_id}/benchmarks/{template_id}")
async def get_template_benchmarks(agency_id: UUID, template_id: UUID) -> dict:
    """
    Get the stored benchmark for a template.

    Raises:
        HTTPException 404: If benchmarks were never computed
        HTTPException 500: If database error
    """
    try:
        benchmark = get_benchmark(agency_id, template_id)

        if not benchmark:
            raise HTTPException(
                status_code=404,
                detail="No benchmarks found for this template. Compute them first.",
            )

        return benchmark

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to get benchmarks for template {template_id}")
        raise HTTPException(status_code=500, detail="Failed to retrieve benchmarks") from e
