"""Tests for item, competency and overall scoring."""

import pytest

from app.core.assessment_scoring.matrix import build_score_matrix
from app.core.assessment_scoring.scorers import (
    compute_overall_score,
    compute_response_rates,
    score_competencies,
    score_items,
)
from app.core.assessment_scoring.types import ComputedCompetencyScore, Invitation
from tests.fixtures_assessment import (
    INVITATIONS,
    fixture_rater_responses,
    make_template,
    rated,
)


@pytest.fixture
def matrix(template):
    """Score matrix for the three completed fixture responses."""
    return build_score_matrix(template, fixture_rater_responses())


def _competency(scores, competency_id):
    return next(c for c in scores if c.competency_id == competency_id)


def _item(scores, question_id):
    return next(i for i in scores if i.question_id == question_id)


# =============================================================================
# Worked example: one self rating, two manager ratings, one peer rating
# =============================================================================


class TestWorkedExample:
    @pytest.fixture
    def scores(self):
        template = make_template(
            {"id": "c", "name": "Delegation", "questions": [{"id": "q", "text": "Delegates well"}]}
        )
        matrix = build_score_matrix(
            template,
            [
                rated("self", "c", {"q": 4}),
                rated("manager", "c", {"q": 3}, invitation_id="m1"),
                rated("manager", "c", {"q": 3}, invitation_id="m2"),
                rated("peer", "c", {"q": 2}),
            ],
        )
        return score_items(template, matrix), score_competencies(template, matrix)

    def test_competency_scores(self, scores):
        _, competencies = scores
        comp = competencies[0]

        assert comp.others_average == 2.67
        assert comp.self_score == 4.0
        assert comp.gap == 1.33
        assert comp.overall_average == 3.0
        assert comp.scores == {"self": 4.0, "manager": 3.0, "peer": 2.0}

    def test_item_scores(self, scores):
        items, _ = scores
        item = items[0]

        assert item.overall_average == 3.0
        assert item.self_score == 4.0
        assert item.gap == 1.33


# =============================================================================
# Item scoring
# =============================================================================


class TestScoreItems:
    def test_every_question_is_scored_in_template_order(self, template, matrix):
        items = score_items(template, matrix)
        assert [i.question_id for i in items] == ["q1", "q2", "q3", "q4", "q5", "q6"]

    def test_reverse_scored_item(self, template, matrix):
        # raw 2/3/4 become 4/3/2
        item = _item(score_items(template, matrix), "q2")
        assert item.scores == {"self": 4.0, "manager": 3.0, "peer": 2.0}
        assert item.overall_average == 3.0
        assert item.gap == 1.5

    def test_item_without_ratings(self, template, matrix):
        item = _item(score_items(template, matrix), "q6")
        assert item.scores == {}
        assert item.overall_average == 0
        assert item.self_score is None
        assert item.gap == 0

    def test_rounded_averages(self, template, matrix):
        items = score_items(template, matrix)
        assert _item(items, "q3").overall_average == 3.67
        assert _item(items, "q3").gap == -1.0
        assert _item(items, "q5").overall_average == 3.33
        assert _item(items, "q5").gap == 2.5

    def test_only_self_ratings_give_gap_of_self_score(self):
        template = make_template(
            {"id": "c", "name": "Focus", "questions": [{"id": "q", "text": "Stays focused"}]}
        )
        matrix = build_score_matrix(template, [rated("self", "c", {"q": 4})])
        item = score_items(template, matrix)[0]

        assert item.overall_average == 4.0
        assert item.gap == 4.0


# =============================================================================
# Competency scoring
# =============================================================================


class TestScoreCompetencies:
    def test_pooled_competency_scores(self, template, matrix):
        clarity = _competency(score_competencies(template, matrix), "clarity")

        assert clarity.overall_average == 3.0
        assert clarity.others_average == 2.5
        assert clarity.self_score == 4.0
        assert clarity.gap == 1.5
        assert clarity.scores == {"self": 4.0, "manager": 3.0, "peer": 2.0}

    def test_response_distribution_counts_every_scale_point(self, template, matrix):
        clarity = _competency(score_competencies(template, matrix), "clarity")
        assert clarity.response_distribution == {1: 0, 2: 2, 3: 2, 4: 2, 5: 0}

        coaching = _competency(score_competencies(template, matrix), "coaching")
        assert coaching.response_distribution == {1: 0, 2: 0, 3: 2, 4: 3, 5: 1}

    def test_rater_agreement_is_population_std_dev_of_others(self, template, matrix):
        competencies = score_competencies(template, matrix)
        # others [3, 2, 3, 2]
        assert _competency(competencies, "clarity").rater_agreement == 0.5
        # others [4, 5, 4, 4]
        assert _competency(competencies, "coaching").rater_agreement == 0.43

    def test_competency_without_ratings(self, template, matrix):
        innovation = _competency(score_competencies(template, matrix), "innovation")

        assert innovation.overall_average == 0
        assert innovation.others_average == 0
        assert innovation.self_score is None
        assert innovation.gap == 0
        assert innovation.rater_agreement == 0
        assert innovation.scores == {}
        assert set(innovation.response_distribution.values()) == {0}

    def test_rater_agreement_zero_with_single_other(self):
        template = make_template(
            {"id": "c", "name": "Focus", "questions": [{"id": "q", "text": "Stays focused"}]}
        )
        matrix = build_score_matrix(
            template, [rated("self", "c", {"q": 1}), rated("peer", "c", {"q": 5})]
        )
        assert score_competencies(template, matrix)[0].rater_agreement == 0

    def test_seven_point_scale_distribution(self):
        template = make_template(
            {"id": "c", "name": "Focus", "questions": [{"id": "q", "text": "Stays focused"}]},
            scale_max=7,
        )
        matrix = build_score_matrix(template, [rated("peer", "c", {"q": 7})])
        distribution = score_competencies(template, matrix)[0].response_distribution
        assert list(distribution) == [1, 2, 3, 4, 5, 6, 7]
        assert distribution[7] == 1


# =============================================================================
# Overall score and response rates
# =============================================================================


def _scored(average: float) -> ComputedCompetencyScore:
    return ComputedCompetencyScore(
        competency_id=f"c{average}", competency_name=f"C {average}", overall_average=average
    )


class TestOverallScore:
    def test_fixture_overall_score(self, template, matrix):
        # mean(3.0, 3.83, 3.33); innovation has no data
        assert compute_overall_score(score_competencies(template, matrix)) == 3.39

    def test_excludes_competencies_without_data(self):
        assert compute_overall_score([_scored(4.0), _scored(0), _scored(3.0)]) == 3.5

    def test_zero_when_nothing_scored(self):
        assert compute_overall_score([_scored(0), _scored(0)]) == 0
        assert compute_overall_score([]) == 0


class TestResponseRates:
    def test_fixture_rates(self):
        invitations = [Invitation.model_validate(row) for row in INVITATIONS]
        rates = compute_response_rates(invitations)

        assert {k: v.model_dump() for k, v in rates.items()} == {
            "self": {"invited": 1, "completed": 1, "rate": 100},
            "manager": {"invited": 1, "completed": 1, "rate": 100},
            "peer": {"invited": 2, "completed": 1, "rate": 50},
            "direct_report": {"invited": 1, "completed": 0, "rate": 0},
        }

    def test_rate_rounds_half_up(self):
        invitations = [
            Invitation(id=f"p{i}", rater_type="peer", status="completed" if i < 2 else "pending")
            for i in range(3)
        ]
        # 2/3 -> 66.67
        assert compute_response_rates(invitations)["peer"].rate == 67

    def test_only_invited_types_appear(self):
        assert compute_response_rates([]) == {}
