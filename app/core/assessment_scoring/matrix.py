"""Score matrix construction.

Turns raw rater responses into effective ratings keyed by
``(competency_id, question_id, rater_type)``. The matrix is transient: it is
rebuilt from raw responses on every computation and never persisted.
"""

from dataclasses import dataclass, field

from app.core.assessment_scoring.types import (
    RATER_TYPE_ORDER,
    CollectedComment,
    OverallComment,
    RaterResponse,
    RaterType,
    TemplateConfig,
    TemplateQuestion,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

SELF = RaterType.SELF.value


def effective_rating(raw: float, question: TemplateQuestion, scale_min: int, scale_max: int) -> float:
    """Apply reverse scoring: ``scale_max + scale_min - raw`` for flagged questions."""
    if question.reverse_scored:
        return scale_max + scale_min - raw
    return raw


@dataclass
class ScoreMatrix:
    """Sparse ratings keyed by (competency_id, question_id, rater_type)."""

    cells: dict[tuple[str, str, str], list[float]] = field(default_factory=dict)
    comments: list[CollectedComment] = field(default_factory=list)
    overall_comments: list[OverallComment] = field(default_factory=list)

    def add(self, competency_id: str, question_id: str, rater_type: str, rating: float) -> None:
        self.cells.setdefault((competency_id, question_id, rater_type), []).append(rating)

    def question_ratings(self, competency_id: str, question_id: str) -> dict[str, list[float]]:
        """Ratings for one question, grouped by rater type."""
        grouped: dict[str, list[float]] = {}
        for (comp_id, q_id, rater_type), ratings in self.cells.items():
            if comp_id == competency_id and q_id == question_id:
                grouped.setdefault(rater_type, []).extend(ratings)
        return _in_rater_order(grouped)

    def competency_ratings(self, competency_id: str) -> dict[str, list[float]]:
        """Ratings for every question of a competency, pooled per rater type."""
        grouped: dict[str, list[float]] = {}
        for (comp_id, _q_id, rater_type), ratings in self.cells.items():
            if comp_id == competency_id:
                grouped.setdefault(rater_type, []).extend(ratings)
        return _in_rater_order(grouped)

    @property
    def rating_count(self) -> int:
        return sum(len(ratings) for ratings in self.cells.values())


def _in_rater_order(grouped: dict[str, list[float]]) -> dict[str, list[float]]:
    return {key: grouped[key] for key in sorted(grouped, key=RATER_TYPE_ORDER.__getitem__)}


def split_self_and_others(grouped: dict[str, list[float]]) -> tuple[list[float], list[float]]:
    """Split rater-type groups into (self ratings, non-self ratings)."""
    self_ratings: list[float] = []
    others_ratings: list[float] = []
    for rater_type, ratings in grouped.items():
        if rater_type == SELF:
            self_ratings.extend(ratings)
        else:
            others_ratings.extend(ratings)
    return self_ratings, others_ratings


def build_score_matrix(
    template: TemplateConfig,
    rater_responses: list[tuple[RaterType, RaterResponse]],
) -> ScoreMatrix:
    """
    Build the score matrix from completed responses.

    Args:
        template: Template config (question flags and scale bounds)
        rater_responses: (rater_type, response) pairs for completed invitations only

    Responses are processed by (rater type, invitation id) whatever order they
    arrive in, so the matrix and its comment lists are reproducible.

    Returns:
        ScoreMatrix with effective ratings, competency comments and overall comments
    """
    matrix = ScoreMatrix()
    skipped = 0

    ordered_responses = sorted(
        rater_responses,
        key=lambda pair: (RATER_TYPE_ORDER[RaterType(pair[0]).value], pair[1].invitation_id),
    )

    for rater_type, response in ordered_responses:
        rater_key = RaterType(rater_type).value

        for item in response.responses:
            if item.rating is not None:
                question = template.get_question(item.competency_id, item.question_id)
                if question is None:
                    skipped += 1
                    logger.debug(
                        f"Skipping rating for unknown question "
                        f"{item.competency_id}:{item.question_id}"
                    )
                elif not template.scale_min <= item.rating <= template.scale_max:
                    skipped += 1
                    logger.warning(
                        f"Skipping out-of-scale rating {item.rating} for "
                        f"{item.competency_id}:{item.question_id} "
                        f"(scale {template.scale_min}-{template.scale_max})"
                    )
                else:
                    matrix.add(
                        item.competency_id,
                        item.question_id,
                        rater_key,
                        effective_rating(
                            item.rating, question, template.scale_min, template.scale_max
                        ),
                    )

            if item.comment:
                matrix.comments.append(
                    CollectedComment(
                        competency_id=item.competency_id,
                        rater_type=rater_key,
                        comment=item.comment,
                    )
                )

        if response.overall_comments:
            matrix.overall_comments.append(
                OverallComment(rater_type=rater_key, comment=response.overall_comments)
            )

    # Competency comments follow template order; stable within a competency
    competency_position = {comp.id: i for i, comp in enumerate(template.competencies)}
    matrix.comments.sort(
        key=lambda c: competency_position.get(c.competency_id, len(competency_position))
    )

    logger.info(
        f"Built score matrix: {matrix.rating_count} ratings in {len(matrix.cells)} cells "
        f"from {len(rater_responses)} responses ({skipped} skipped)"
    )
    return matrix
