"""Ranking and classification of scored competencies and items.

Rankings exclude anything without data (an average of 0) instead of treating
it as the worst score. Sorting is stable, so ties keep template order.
"""

from app.core.assessment_scoring.stats import round2
from app.core.assessment_scoring.types import (
    GAP_THRESHOLD,
    RANKED_ITEM_COUNT,
    STRENGTH_COUNT,
    ComputedCompetencyScore,
    ComputedItemScore,
    GapClassification,
    GapEntry,
    JohariWindow,
    RankedItem,
    TemplateConfig,
)


def rank_competencies(
    competency_scores: list[ComputedCompetencyScore],
    count: int = STRENGTH_COUNT,
) -> tuple[list[str], list[str]]:
    """
    Rank competencies by others' average.

    Returns:
        (strengths, development_areas). Strengths are the top ``count`` names,
        highest first. Development areas are the last ``count`` of the same
        descending order, reversed so the lowest comes first.
    """
    ranked = sorted(
        (c for c in competency_scores if c.others_average > 0),
        key=lambda c: c.others_average,
        reverse=True,
    )
    strengths = [c.competency_name for c in ranked[:count]]
    development_areas = [c.competency_name for c in reversed(ranked[-count:])]
    return strengths, development_areas


def _to_ranked_item(item: ComputedItemScore, competency_names: dict[str, str]) -> RankedItem:
    return RankedItem(
        competency_id=item.competency_id,
        competency_name=competency_names.get(item.competency_id, ""),
        question_id=item.question_id,
        question_text=item.question_text,
        overall_average=item.overall_average,
        self_score=item.self_score,
        gap=item.gap,
    )


def rank_items(
    template: TemplateConfig,
    item_scores: list[ComputedItemScore],
    count: int = RANKED_ITEM_COUNT,
) -> tuple[list[RankedItem], list[RankedItem]]:
    """Top ``count`` items (highest first) and bottom ``count`` items (worst first)."""
    competency_names = {comp.id: comp.name for comp in template.competencies}
    ranked = sorted(
        (i for i in item_scores if i.overall_average > 0),
        key=lambda i: i.overall_average,
        reverse=True,
    )
    if not ranked:
        return [], []

    top_items = [_to_ranked_item(i, competency_names) for i in ranked[:count]]
    bottom_items = [_to_ranked_item(i, competency_names) for i in reversed(ranked[-count:])]
    return top_items, bottom_items


def classify_gap(gap: float) -> GapClassification:
    if gap > GAP_THRESHOLD:
        return "blind_spot"
    if gap < -GAP_THRESHOLD:
        return "hidden_strength"
    return "aligned"


_GAP_INTERPRETATIONS: dict[str, str] = {
    "blind_spot": (
        "You rated yourself higher than others on {name}. This may indicate an area "
        "where self-perception differs from how others experience you."
    ),
    "hidden_strength": (
        "Others rated you higher than you rated yourself on {name}. This is a strength "
        "that others see in you that you may not fully recognize."
    ),
    "aligned": "Your self-assessment and others' ratings on {name} are well-aligned.",
}


def analyze_gaps(competency_scores: list[ComputedCompetencyScore]) -> list[GapEntry]:
    """Self vs. others gap entries for every competency that has a self score."""
    entries: list[GapEntry] = []

    for comp in competency_scores:
        if comp.self_score is None:
            continue
        gap = round2(comp.self_score - comp.others_average)
        classification = classify_gap(gap)
        entries.append(
            GapEntry(
                competency_id=comp.competency_id,
                competency_name=comp.competency_name,
                self_score=comp.self_score,
                others_average=comp.others_average,
                gap=gap,
                classification=classification,
                interpretation=_GAP_INTERPRETATIONS[classification].format(
                    name=comp.competency_name
                ),
            )
        )

    return entries


def johari_quadrant(self_score: float, others_average: float, midpoint: float) -> str:
    """Quadrant name for one competency; "high" means at or above the midpoint."""
    self_high = self_score >= midpoint
    others_high = others_average >= midpoint

    if self_high and others_high:
        return "open_area"
    if others_high:
        return "blind_spot"
    if self_high:
        return "hidden_area"
    return "unknown_area"


def build_johari_window(
    competency_scores: list[ComputedCompetencyScore], midpoint: float
) -> JohariWindow:
    window = JohariWindow()
    for comp in competency_scores:
        if comp.self_score is None:
            continue
        quadrant = johari_quadrant(comp.self_score, comp.others_average, midpoint)
        getattr(window, quadrant).append(comp.competency_name)
    return window
