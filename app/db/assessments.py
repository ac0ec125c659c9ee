"""Assessment, invitation and response database operations."""

from datetime import datetime, timezone  # noqa: UP035
from typing import Any
from uuid import UUID

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def get_assessment(assessment_id: UUID) -> dict[str, Any] | None:
    """
    Get an assessment by ID.

    Args:
        assessment_id: Assessment UUID

    Returns:
        Assessment dict or None if not found

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .select("*")
            .eq("id", str(assessment_id))
            .limit(1)
            .execute()
        )

        if response.data:
            return response.data[0]

        logger.warning(f"Assessment {assessment_id} not found")
        return None

    except Exception as e:
        logger.error(f"Failed to get assessment {assessment_id}: {e}")
        raise


def list_invitations(assessment_id: UUID) -> list[dict[str, Any]]:
    """
    List every rater invitation for an assessment, whatever its status.

    Args:
        assessment_id: Assessment UUID

    Returns:
        List of invitation dicts (id, rater_type, status)

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_invitations")
            .select("id, rater_type, status")
            .eq("assessment_id", str(assessment_id))
            .order("id")
            .execute()
        )
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list invitations for assessment {assessment_id}: {e}")
        raise


def list_completed_responses(invitation_ids: list[str]) -> list[dict[str, Any]]:
    """
    List complete response sets for the given invitations.

    Args:
        invitation_ids: Invitation IDs (already filtered to completed invitations)

    Returns:
        List of response dicts (invitation_id, responses, overall_comments)

    Raises:
        Exception: If database operation fails
    """
    if not invitation_ids:
        return []

    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_responses")
            .select("invitation_id, responses, overall_comments")
            .in_("invitation_id", invitation_ids)
            .eq("is_complete", True)
            .order("id")
            .execute()
        )
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list responses for {len(invitation_ids)} invitations: {e}")
        raise


def get_previous_completed_assessment(
    subject_id: str,
    template_id: str,
    exclude_assessment_id: UUID,
) -> dict[str, Any] | None:
    """
    Get the most recently updated other completed assessment for a subject + template.

    Args:
        subject_id: Person being assessed
        template_id: Template the assessments share
        exclude_assessment_id: The current assessment

    Returns:
        Dict with id, computed_results, updated_at; or None if there is none

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .select("id, computed_results, updated_at")
            .eq("subject_id", str(subject_id))
            .eq("template_id", str(template_id))
            .eq("status", "completed")
            .neq("id", str(exclude_assessment_id))
            .order("updated_at", desc=True)
            .limit(1)
            .execute()
        )

        if response.data:
            return response.data[0]
        return None

    except Exception as e:
        logger.error(
            f"Failed to look up previous assessment for subject {subject_id}: {e}",
            extra={"assessment_id": str(exclude_assessment_id)},
        )
        raise


def list_completed_assessment_results(template_id: UUID) -> list[dict[str, Any]]:
    """
    List computed results of every completed assessment that used a template.

    Args:
        template_id: Template UUID

    Returns:
        List of dicts (id, computed_results); rows never computed are excluded

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .select("id, computed_results")
            .eq("template_id", str(template_id))
            .eq("status", "completed")
            .execute()
        )
        return [row for row in (response.data or []) if row.get("computed_results")]

    except Exception as e:
        logger.error(f"Failed to list completed assessments for template {template_id}: {e}")
        raise


def save_computed_results(assessment_id: UUID, results: dict[str, Any]) -> None:
    """
    Overwrite the computed results snapshot of an assessment.

    Args:
        assessment_id: Assessment UUID
        results: JSON-serializable ComputedAssessmentResults

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .update({"computed_results": results, "updated_at": _utc_now_iso()})
            .eq("id", str(assessment_id))
            .execute()
        )

        if not response.data:
            raise ValueError(f"Assessment not found: {assessment_id}")

        logger.info(
            f"Saved computed results for assessment {assessment_id}",
            extra={"assessment_id": str(assessment_id)},
        )

    except Exception as e:
        logger.error(
            f"Failed to save computed results for assessment {assessment_id}: {e}",
            extra={"assessment_id": str(assessment_id)},
        )
        raise
