"""Derived indices: Coaching Capacity Index and Current Ceiling."""

from app.core.assessment_scoring.matrix import ScoreMatrix, split_self_and_others
from app.core.assessment_scoring.stats import mean, round2
from app.core.assessment_scoring.types import (
    CCI_BANDS,
    CCIBand,
    CCIItem,
    CCIResult,
    ComputedCompetencyScore,
    ComputedItemScore,
    CurrentCeiling,
    TemplateConfig,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


def cci_band(score: float) -> CCIBand:
    for upper, band in CCI_BANDS:
        if score <= upper:
            return band
    return "Very High"


def compute_cci(
    template: TemplateConfig,
    matrix: ScoreMatrix,
    item_scores: list[ComputedItemScore],
) -> CCIResult | None:
    """
    Compute the Coaching Capacity Index.

    Each competency contributes through its first CCI-flagged question, provided
    that question has ratings. The effective score is the non-self average; when
    only self ratings exist it falls back to the item's overall average.

    Returns:
        CCIResult, or None when no competency contributes (not applicable,
        as opposed to a score of zero)
    """
    items_by_key = {(i.competency_id, i.question_id): i for i in item_scores}
    cci_items: list[CCIItem] = []

    for comp in template.competencies:
        question = next((q for q in comp.questions if q.is_cci), None)
        if question is None:
            continue

        item_score = items_by_key.get((comp.id, question.id))
        grouped = matrix.question_ratings(comp.id, question.id)
        if item_score is None or not grouped:
            continue

        _self_ratings, others_ratings = split_self_and_others(grouped)
        effective_score = (
            round2(mean(others_ratings)) if others_ratings else item_score.overall_average
        )

        cci_items.append(
            CCIItem(
                competency_id=comp.id,
                competency_name=comp.name,
                question_id=question.id,
                question_text=question.text,
                raw_score=item_score.overall_average,
                effective_score=effective_score,
            )
        )

    if not cci_items:
        return None

    score = round2(mean([i.effective_score for i in cci_items]))
    band = cci_band(score)
    logger.info(f"CCI computed: {score} ({band}) from {len(cci_items)} competencies")
    return CCIResult(score=score, band=band, items=cci_items)


def find_current_ceiling(
    template: TemplateConfig,
    competency_scores: list[ComputedCompetencyScore],
) -> CurrentCeiling | None:
    """Lowest-scoring competency with data; ties go to the first in template order."""
    lowest: ComputedCompetencyScore | None = None
    for comp in competency_scores:
        if comp.overall_average <= 0:
            continue
        if lowest is None or comp.overall_average < lowest.overall_average:
            lowest = comp

    if lowest is None:
        return None

    definition = next((c for c in template.competencies if c.id == lowest.competency_id), None)
    subtitle = (definition.subtitle or "") if definition else ""

    return CurrentCeiling(
        competency_id=lowest.competency_id,
        competency_name=lowest.competency_name,
        subtitle=subtitle,
        score=lowest.overall_average,
        narrative=_ceiling_narrative(lowest.competency_name, subtitle),
    )


def _ceiling_narrative(name: str, subtitle: str) -> str:
    subject = f"{name} ({subtitle})" if subtitle else name
    return (
        f"The data suggests that {subject} represents the current constraint on "
        f"leadership capacity. Until this area is addressed, growth in other "
        f"dimensions may be constrained."
    )
