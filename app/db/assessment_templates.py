"""Assessment template database operations."""

from typing import Any
from uuid import UUID

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_template(template_id: UUID) -> dict[str, Any] | None:
    """
    Get an assessment template by ID.

    Args:
        template_id: Template UUID

    Returns:
        Template dict (id, agency_id, name, config) or None if not found

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_templates")
            .select("id, agency_id, name, config")
            .eq("id", str(template_id))
            .limit(1)
            .execute()
        )

        if response.data:
            return response.data[0]

        logger.warning(f"Assessment template {template_id} not found")
        return None

    except Exception as e:
        logger.error(f"Failed to get assessment template {template_id}: {e}")
        raise
