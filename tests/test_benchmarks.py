"""Tests for agency benchmarks and percentile ranks."""

from unittest.mock import patch
from uuid import uuid4

import pytest

from app.core.assessment_scoring import TemplateNotFoundError
from app.core.assessment_scoring.benchmarks import (
    compute_benchmarks,
    percentile_rank,
    summarize_scores,
)
from app.core.assessment_scoring.types import CompetencyBenchmark
from tests.fakes.fake_db import fake_db
from tests.fixtures_assessment import AGENCY_ID, TEMPLATE_ID

BENCHMARKS = "app.core.assessment_scoring.benchmarks"


def completed_row(clarity: float, coaching: float) -> dict:
    return {
        "id": str(uuid4()),
        "tenant_id": "t",
        "template_id": str(TEMPLATE_ID),
        "subject_id": str(uuid4()),
        "status": "completed",
        "updated_at": "2026-01-01T00:00:00+00:00",
        "computed_results": {
            "overall_score": (clarity + coaching) / 2,
            "competency_scores": [
                {"competency_id": "clarity", "overall_average": clarity},
                {"competency_id": "coaching", "overall_average": coaching},
                {"competency_id": "retired", "overall_average": 1.0},
            ],
        },
    }


@pytest.fixture
def db():
    fake_db.reset()
    with (
        patch(f"{BENCHMARKS}.get_template", side_effect=fake_db.get_template),
        patch(
            f"{BENCHMARKS}.list_completed_assessment_results",
            side_effect=fake_db.list_completed_assessment_results,
        ),
        patch(f"{BENCHMARKS}.upsert_benchmark", side_effect=fake_db.upsert_benchmark),
    ):
        yield fake_db


class TestSummarizeScores:
    def test_statistics(self):
        benchmark = summarize_scores([4.0, 2.0, 3.0, 5.0])

        assert benchmark.mean == 3.5
        assert benchmark.median == 3.5
        assert benchmark.p25 == 2.75
        assert benchmark.p75 == 4.25
        assert benchmark.std_dev == 1.29
        assert benchmark.sample_size == 4

    def test_empty(self):
        assert summarize_scores([]) == CompetencyBenchmark()


class TestComputeBenchmarks:
    def test_aggregates_completed_assessments(self, db):
        for clarity, coaching in [(3.0, 4.0), (2.0, 4.0), (4.0, 4.0)]:
            db.add_assessment(completed_row(clarity, coaching))

        benchmarks = compute_benchmarks(AGENCY_ID, TEMPLATE_ID)

        assert list(benchmarks) == ["clarity", "coaching", "accountability", "innovation"]
        assert benchmarks["clarity"].mean == 3.0
        assert benchmarks["clarity"].std_dev == 1.0
        assert benchmarks["coaching"].std_dev == 0
        assert benchmarks["innovation"].sample_size == 0

        stored = db.benchmarks[0]
        assert stored["agency_id"] == str(AGENCY_ID)
        assert stored["sample_size"] == 3
        assert "retired" not in stored["benchmark_data"]

    def test_assessments_without_results_are_excluded(self, db):
        # the fixture assessment is completed but was never computed
        db.add_assessment(completed_row(3.0, 4.0))

        compute_benchmarks(AGENCY_ID, TEMPLATE_ID)

        assert db.benchmarks[0]["sample_size"] == 1

    def test_recompute_replaces_previous_benchmark(self, db):
        db.add_assessment(completed_row(3.0, 4.0))
        compute_benchmarks(AGENCY_ID, TEMPLATE_ID)
        db.add_assessment(completed_row(2.0, 4.0))
        compute_benchmarks(AGENCY_ID, TEMPLATE_ID)

        assert len(db.benchmarks) == 1
        assert db.benchmarks[0]["sample_size"] == 2

    def test_missing_template(self, db):
        with pytest.raises(TemplateNotFoundError):
            compute_benchmarks(AGENCY_ID, uuid4())
        assert db.benchmarks == []


class TestPercentileRank:
    def test_no_sample(self):
        assert percentile_rank(3.5, CompetencyBenchmark()) == 50

    def test_no_spread(self):
        benchmark = CompetencyBenchmark(mean=3.0, std_dev=0, sample_size=5)
        assert percentile_rank(4.5, benchmark) == 50

    def test_at_mean(self):
        benchmark = CompetencyBenchmark(mean=3.5, std_dev=0.5, sample_size=20)
        assert percentile_rank(3.5, benchmark) == 50

    def test_one_std_dev_above(self):
        benchmark = CompetencyBenchmark(mean=3.5, std_dev=0.5, sample_size=20)
        assert 80 <= percentile_rank(4.0, benchmark) <= 90

    def test_clamped(self):
        benchmark = CompetencyBenchmark(mean=3.0, std_dev=0.1, sample_size=20)
        assert percentile_rank(5.0, benchmark) == 99
        assert percentile_rank(1.0, benchmark) == 1
