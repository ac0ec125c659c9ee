"""Assessment benchmark database operations."""

from datetime import datetime, timezone  # noqa: UP035
from typing import Any
from uuid import UUID

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def _utc_now_iso() -> str:
    """Get current UTC time as ISO string."""
    return datetime.now(timezone.utc).isoformat()  # noqa: UP017


def upsert_benchmark(
    agency_id: UUID,
    template_id: UUID,
    sample_size: int,
    benchmark_data: dict[str, Any],
) -> dict[str, Any]:
    """
    Insert or replace the benchmark for an agency + template.

    Args:
        agency_id: Agency UUID
        template_id: Template UUID
        sample_size: Number of completed assessments that contributed
        benchmark_data: Per-competency statistics keyed by competency_id

    Returns:
        Upserted benchmark row

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        now = _utc_now_iso()
        response = (
            supabase.table("assessment_benchmarks")
            .upsert(
                {
                    "agency_id": str(agency_id),
                    "template_id": str(template_id),
                    "sample_size": sample_size,
                    "benchmark_data": benchmark_data,
                    "computed_at": now,
                    "updated_at": now,
                },
                on_conflict="agency_id,template_id",
            )
            .execute()
        )

        if not response.data:
            raise ValueError("No data returned from upsert_benchmark")

        logger.info(
            f"Upserted benchmark for template {template_id} (sample_size={sample_size})",
            extra={"agency_id": str(agency_id)},
        )
        return response.data[0]

    except Exception as e:
        logger.error(f"Failed to upsert benchmark for template {template_id}: {e}")
        raise


def get_benchmark(agency_id: UUID, template_id: UUID) -> dict[str, Any] | None:
    """
    Get the stored benchmark for an agency + template.

    Args:
        agency_id: Agency UUID
        template_id: Template UUID

    Returns:
        Benchmark row or None if never computed

    Raises:
        Exception: If database operation fails
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_benchmarks")
            .select("*")
            .eq("agency_id", str(agency_id))
            .eq("template_id", str(template_id))
            .limit(1)
            .execute()
        )

        if response.data:
            return response.data[0]
        return None

    except Exception as e:
        logger.error(f"Failed to get benchmark for template {template_id}: {e}")
        raise
