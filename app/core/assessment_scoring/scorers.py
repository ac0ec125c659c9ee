"""Item, competency and whole-assessment scoring.

Every template question and competency gets a score, even with no responses,
so the output shape never depends on response volume.
"""

from app.core.assessment_scoring.matrix import ScoreMatrix, split_self_and_others
from app.core.assessment_scoring.stats import mean, population_std_dev, round2, round_int
from app.core.assessment_scoring.types import (
    RATER_TYPE_ORDER,
    ComputedCompetencyScore,
    ComputedItemScore,
    Invitation,
    InvitationStatus,
    ResponseRate,
    TemplateConfig,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


def score_items(template: TemplateConfig, matrix: ScoreMatrix) -> list[ComputedItemScore]:
    """Per-question averages by rater type, overall average, self score and gap."""
    item_scores: list[ComputedItemScore] = []

    for comp in template.competencies:
        for question in comp.questions:
            grouped = matrix.question_ratings(comp.id, question.id)
            self_ratings, others_ratings = split_self_and_others(grouped)
            all_ratings = self_ratings + others_ratings

            # Gap is taken from unrounded averages, then rounded once
            self_score = mean(self_ratings) if self_ratings else None
            others_avg = mean(others_ratings)

            item_scores.append(
                ComputedItemScore(
                    competency_id=comp.id,
                    question_id=question.id,
                    question_text=question.text,
                    scores={
                        rater_type: round2(mean(ratings))
                        for rater_type, ratings in grouped.items()
                    },
                    overall_average=round2(mean(all_ratings)),
                    self_score=round2(self_score) if self_score is not None else None,
                    gap=round2(self_score - others_avg) if self_score is not None else 0,
                )
            )

    return item_scores


def _response_distribution(ratings: list[float], scale_min: int, scale_max: int) -> dict[int, int]:
    distribution = {point: 0 for point in range(scale_min, scale_max + 1)}
    for rating in ratings:
        point = round_int(rating)
        if point in distribution:
            distribution[point] += 1
    return distribution


def score_competencies(
    template: TemplateConfig, matrix: ScoreMatrix
) -> list[ComputedCompetencyScore]:
    """
    Per-competency scores pooled across the competency's questions.

    Zero ratings yield overall_average 0, rater_agreement 0 and an all-zero
    distribution rather than missing values.
    """
    competency_scores: list[ComputedCompetencyScore] = []

    for comp in template.competencies:
        grouped = matrix.competency_ratings(comp.id)
        self_ratings, others_ratings = split_self_and_others(grouped)
        all_ratings = self_ratings + others_ratings

        others_average = round2(mean(others_ratings))
        self_score = round2(mean(self_ratings)) if self_ratings else None

        competency_scores.append(
            ComputedCompetencyScore(
                competency_id=comp.id,
                competency_name=comp.name,
                scores={
                    rater_type: round2(mean(ratings))
                    for rater_type, ratings in grouped.items()
                },
                overall_average=round2(mean(all_ratings)),
                others_average=others_average,
                self_score=self_score,
                gap=round2(self_score - others_average) if self_score is not None else 0,
                response_distribution=_response_distribution(
                    all_ratings, template.scale_min, template.scale_max
                ),
                rater_agreement=round2(population_std_dev(others_ratings)),
            )
        )

    logger.debug(
        f"Scored {len(competency_scores)} competencies, "
        f"{sum(1 for c in competency_scores if c.overall_average > 0)} with data"
    )
    return competency_scores


def compute_overall_score(competency_scores: list[ComputedCompetencyScore]) -> float:
    """Mean of the competency averages that have data; 0 when none do."""
    scored = [c.overall_average for c in competency_scores if c.overall_average > 0]
    return round2(mean(scored))


def compute_response_rates(invitations: list[Invitation]) -> dict[str, ResponseRate]:
    """Invitation completion counts and percentage per rater type, in rater type order."""
    rates: dict[str, ResponseRate] = {}

    for invitation in invitations:
        entry = rates.setdefault(invitation.rater_type.value, ResponseRate())
        entry.invited += 1
        if invitation.status == InvitationStatus.COMPLETED:
            entry.completed += 1

    for entry in rates.values():
        entry.rate = round_int(entry.completed / entry.invited * 100) if entry.invited else 0

    return {key: rates[key] for key in sorted(rates, key=RATER_TYPE_ORDER.__getitem__)}
