"""API endpoints for assessment results."""

from uuid import UUID

from fastapi import APIRouter, HTTPException

from app.core.assessment_scoring import (
    AssessmentScoringError,
    ComputedAssessmentResults,
    compute_assessment_results,
)
from app.core.logging import get_logger
from app.db.assessments import get_assessment

logger = get_logger(__name__)

router = APIRouter()


@router.post("/assessments/{assessment_id}/results", response_model=ComputedAssessmentResults)
async def recompute_assessment_results(assessment_id: UUID) -> ComputedAssessmentResults:
    """
    Recompute and store results for an assessment.

    Callers must not trigger concurrent recomputes for the same assessment;
    the last write wins.

    Args:
        assessment_id: Assessment UUID

    Returns:
        Freshly computed ComputedAssessmentResults

    Raises:
        HTTPException 404: If the assessment or its template is not found
        HTTPException 500: If computation fails
    """
    try:
        return compute_assessment_results(assessment_id)

    except AssessmentScoringError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.exception(
            f"Failed to compute results for assessment {assessment_id}",
            extra={"assessment_id": str(assessment_id)},
        )
        raise HTTPException(
            status_code=500, detail="Failed to compute assessment results"
        ) from e


@router.get("/assessments/{assessment_id}/results", response_model=ComputedAssessmentResults)
async def get_assessment_results(assessment_id: UUID) -> ComputedAssessmentResults:
    """
    Get the stored results snapshot for an assessment.

    Args:
        assessment_id: Assessment UUID

    Returns:
        Stored ComputedAssessmentResults

    Raises:
        HTTPException 404: If the assessment is missing or has no computed results
        HTTPException 500: If database error
    """
    try:
        assessment = get_assessment(assessment_id)

        if not assessment:
            raise HTTPException(status_code=404, detail="Assessment not found")

        if not assessment.get("computed_results"):
            raise HTTPException(status_code=404, detail="Results have not been computed yet")

        return ComputedAssessmentResults.model_validate(assessment["computed_results"])

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to get results for assessment {assessment_id}")
        raise HTTPException(
            status_code=500, detail="Failed to retrieve assessment results"
        ) from e
