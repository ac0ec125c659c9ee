"""Period-over-period trend comparison.

Compares the current scores against the most recent other completed assessment
with the same subject and template. A first-time assessment has no trend; that
is an expected outcome, reported as None rather than a zero-delta trend.
"""

from typing import Any
from uuid import UUID

from app.core.assessment_scoring.stats import round2, round_int
from app.core.assessment_scoring.types import (
    TREND_THRESHOLD,
    CompetencyChange,
    ComputedCompetencyScore,
    TrendComparison,
    TrendDirection,
)
from app.core.logging import get_logger
from app.db.assessments import get_previous_completed_assessment

logger = get_logger(__name__)


def classify_change(change: float) -> TrendDirection:
    if change > TREND_THRESHOLD:
        return "improved"
    if change < -TREND_THRESHOLD:
        return "declined"
    return "stable"


def compare_results(
    previous: dict[str, Any],
    overall_score: float,
    competency_scores: list[ComputedCompetencyScore],
) -> TrendComparison:
    """
    Build a trend comparison from a stored previous assessment row.

    A competency absent from the previous results (the template evolved) uses
    its current score as the previous one, so it reports no change rather than
    a decline. A missing previous overall score is treated the same way.

    Args:
        previous: Row with id, computed_results, updated_at
        overall_score: Current overall score
        competency_scores: Current competency scores

    Returns:
        TrendComparison
    """
    previous_results = previous["computed_results"]
    previous_by_id = {
        cs["competency_id"]: cs for cs in previous_results.get("competency_scores", [])
    }

    changes: list[CompetencyChange] = []
    for cs in competency_scores:
        prior = previous_by_id.get(cs.competency_id)
        previous_score = prior["overall_average"] if prior else cs.overall_average
        change = cs.overall_average - previous_score
        change_percent = round_int(change / previous_score * 100) if previous_score > 0 else 0

        changes.append(
            CompetencyChange(
                competency_id=cs.competency_id,
                competency_name=cs.competency_name,
                previous_score=round2(previous_score),
                current_score=round2(cs.overall_average),
                change=round2(change),
                change_percent=change_percent,
                direction=classify_change(change),
            )
        )

    previous_overall = previous_results.get("overall_score")
    if previous_overall is None:
        previous_overall = overall_score
    overall_change = overall_score - previous_overall

    return TrendComparison(
        previous_assessment_id=str(previous["id"]),
        previous_completed_at=previous.get("updated_at"),
        competency_changes=changes,
        overall_change=round2(overall_change),
        overall_direction=classify_change(overall_change),
    )


def compute_trend(
    assessment_id: UUID,
    subject_id: str,
    template_id: str,
    overall_score: float,
    competency_scores: list[ComputedCompetencyScore],
) -> TrendComparison | None:
    """
    Compare against the previous completed assessment, if there is one.

    Returns:
        TrendComparison, or None when no previous assessment has stored results
    """
    previous = get_previous_completed_assessment(subject_id, template_id, assessment_id)
    if not previous or not previous.get("computed_results"):
        logger.info(
            f"No previous results for subject {subject_id}, skipping trend",
            extra={"assessment_id": str(assessment_id)},
        )
        return None

    trend = compare_results(previous, overall_score, competency_scores)
    logger.info(
        f"Trend vs {trend.previous_assessment_id}: "
        f"{trend.overall_change:+} ({trend.overall_direction})",
        extra={"assessment_id": str(assessment_id)},
    )
    return trend
