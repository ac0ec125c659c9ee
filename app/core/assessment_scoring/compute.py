"""Main assessment results computation.

This module orchestrates assessment scoring by:
1. Fetching the assessment, its template, invitations and completed responses
2. Building the score matrix
3. Scoring items, competencies and the whole assessment
4. Ranking and classifying (strengths, gaps, Johari window)
5. Computing derived indices (CCI, current ceiling)
6. Comparing against the previous assessment (best effort)
7. Persisting one snapshot to assessments.computed_results
"""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError

from app.core.assessment_scoring.indices import compute_cci, find_current_ceiling
from app.core.assessment_scoring.matrix import build_score_matrix
from app.core.assessment_scoring.ranking import (
    analyze_gaps,
    build_johari_window,
    rank_competencies,
    rank_items,
)
from app.core.assessment_scoring.scorers import (
    compute_overall_score,
    compute_response_rates,
    score_competencies,
    score_items,
)
from app.core.assessment_scoring.trend import compute_trend
from app.core.assessment_scoring.types import (
    ComputedAssessmentResults,
    Invitation,
    InvitationStatus,
    RaterResponse,
    RaterType,
    TemplateConfig,
)
from app.core.logging import get_logger
from app.db.assessment_templates import get_template
from app.db.assessments import (
    get_assessment,
    list_completed_responses,
    list_invitations,
    save_computed_results,
)

logger = get_logger(__name__)


class AssessmentScoringError(Exception):
    """Base class for fatal scoring failures."""


class AssessmentNotFoundError(AssessmentScoringError):
    """Raised when the assessment to score does not exist."""


class TemplateNotFoundError(AssessmentScoringError):
    """Raised when an assessment's template does not exist."""


def compute_assessment_results(assessment_id: UUID) -> ComputedAssessmentResults:
    """
    Compute and store aggregated results for an assessment.

    This is the main entry point for assessment scoring. Always computed fresh
    from raw responses; the stored snapshot is fully replaced.

    Args:
        assessment_id: Assessment UUID

    Returns:
        ComputedAssessmentResults as persisted

    Raises:
        AssessmentNotFoundError: If the assessment does not exist
        TemplateNotFoundError: If the assessment's template does not exist
    """
    logger.info(
        f"Computing results for assessment {assessment_id}",
        extra={"assessment_id": str(assessment_id)},
    )

    # ==========================================================================
    # 1. Fetch assessment + template (fatal if missing)
    # ==========================================================================
    assessment = get_assessment(assessment_id)
    if not assessment:
        raise AssessmentNotFoundError(f"Assessment {assessment_id} not found")

    template_row = get_template(assessment["template_id"])
    if not template_row:
        raise TemplateNotFoundError(f"Template {assessment['template_id']} not found")

    template = TemplateConfig.model_validate(template_row.get("config") or {})

    # ==========================================================================
    # 2. Fetch invitations and completed responses
    # ==========================================================================
    invitations = _load_invitations(assessment_id)
    rater_responses = _load_rater_responses(invitations)

    # ==========================================================================
    # 3-5. Score, rank and derive indices
    # ==========================================================================
    results = score_assessment(template, invitations, rater_responses)

    # ==========================================================================
    # 6. Trend comparison (non-critical)
    # ==========================================================================
    try:
        trend = compute_trend(
            assessment_id,
            assessment["subject_id"],
            assessment["template_id"],
            results.overall_score,
            results.competency_scores,
        )
    except Exception:
        logger.warning(
            f"Trend comparison failed for assessment {assessment_id}, continuing without it",
            exc_info=True,
            extra={"assessment_id": str(assessment_id)},
        )
        trend = None

    if trend is not None:
        results = results.model_copy(update={"trend": trend})

    # ==========================================================================
    # 7. Persist snapshot
    # ==========================================================================
    save_computed_results(assessment_id, results.model_dump(mode="json"))

    logger.info(
        f"Computed results for assessment {assessment_id}: overall={results.overall_score}, "
        f"responses={len(rater_responses)}, trend={'yes' if results.trend else 'no'}",
        extra={"assessment_id": str(assessment_id)},
    )
    return results


def score_assessment(
    template: TemplateConfig,
    invitations: list[Invitation],
    rater_responses: list[tuple[RaterType, RaterResponse]],
    computed_at: datetime | None = None,
) -> ComputedAssessmentResults:
    """
    Run the in-memory scoring stages (everything except trend and persistence).

    Pure: identical inputs give identical results apart from computed_at.

    Args:
        template: Template config
        invitations: All invitations (drives response rates)
        rater_responses: (rater_type, response) pairs for completed invitations
        computed_at: Snapshot timestamp, defaults to now

    Returns:
        ComputedAssessmentResults without a trend
    """
    matrix = build_score_matrix(template, rater_responses)

    item_scores = score_items(template, matrix)
    competency_scores = score_competencies(template, matrix)

    strengths, development_areas = rank_competencies(competency_scores)
    top_items, bottom_items = rank_items(template, item_scores)

    return ComputedAssessmentResults(
        computed_at=computed_at or datetime.now(UTC),
        overall_score=compute_overall_score(competency_scores),
        response_rate_by_type=compute_response_rates(invitations),
        competency_scores=competency_scores,
        item_scores=item_scores,
        gap_analysis=analyze_gaps(competency_scores),
        top_items=top_items,
        bottom_items=bottom_items,
        strengths=strengths,
        development_areas=development_areas,
        comments=matrix.comments,
        overall_comments=matrix.overall_comments,
        johari_window=build_johari_window(competency_scores, template.midpoint),
        cci_result=compute_cci(template, matrix, item_scores),
        current_ceiling=find_current_ceiling(template, competency_scores),
    )


def _load_invitations(assessment_id: UUID) -> list[Invitation]:
    """Fetch invitations, skipping rows with a rater type the engine does not score."""
    invitations: list[Invitation] = []
    for row in list_invitations(assessment_id):
        try:
            invitations.append(Invitation.model_validate(row))
        except ValidationError:
            logger.warning(
                f"Skipping invitation {row.get('id')} with rater_type={row.get('rater_type')!r} "
                f"status={row.get('status')!r}",
                extra={"assessment_id": str(assessment_id)},
            )
    return invitations


def _load_rater_responses(
    invitations: list[Invitation],
) -> list[tuple[RaterType, RaterResponse]]:
    """Fetch complete responses for completed invitations, tagged with rater type."""
    rater_types = {inv.id: inv.rater_type for inv in invitations}
    completed_ids = [
        inv.id for inv in invitations if inv.status == InvitationStatus.COMPLETED
    ]

    pairs: list[tuple[RaterType, RaterResponse]] = []
    for row in list_completed_responses(completed_ids):
        rater_type = rater_types.get(str(row.get("invitation_id")))
        if rater_type is None:
            continue
        pairs.append(
            (
                rater_type,
                RaterResponse(
                    invitation_id=str(row["invitation_id"]),
                    responses=row.get("responses") or [],
                    overall_comments=row.get("overall_comments"),
                ),
            )
        )

    logger.debug(
        f"Loaded {len(pairs)} complete responses from "
        f"{len(completed_ids)}/{len(invitations)} completed invitations"
    )
    return pairs
