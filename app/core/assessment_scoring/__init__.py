"""Assessment scoring system.

Turns raw multi-rater responses into:
- Item and competency scores by rater type, with self/others gap
- Strengths, development areas and top/bottom items
- Gap classification and Johari window
- Coaching Capacity Index (CCI) and Current Ceiling
- Trend against the previous assessment of the same subject + template

Usage:
    from app.core.assessment_scoring import compute_assessment_results

    results = compute_assessment_results(assessment_id)
    print(f"Overall: {results.overall_score} / CCI: {results.cci_result}")
"""

from app.core.assessment_scoring.benchmarks import compute_benchmarks, percentile_rank
from app.core.assessment_scoring.compute import (
    AssessmentNotFoundError,
    AssessmentScoringError,
    TemplateNotFoundError,
    compute_assessment_results,
    score_assessment,
)
from app.core.assessment_scoring.types import (
    CCIResult,
    CompetencyBenchmark,
    ComputedAssessmentResults,
    ComputedCompetencyScore,
    ComputedItemScore,
    CurrentCeiling,
    GapEntry,
    JohariWindow,
    RaterType,
    TemplateConfig,
    TrendComparison,
)

__all__ = [
    "compute_assessment_results",
    "score_assessment",
    "compute_benchmarks",
    "percentile_rank",
    "AssessmentScoringError",
    "AssessmentNotFoundError",
    "TemplateNotFoundError",
    "ComputedAssessmentResults",
    "ComputedCompetencyScore",
    "ComputedItemScore",
    "CCIResult",
    "CompetencyBenchmark",
    "CurrentCeiling",
    "GapEntry",
    "JohariWindow",
    "RaterType",
    "TemplateConfig",
    "TrendComparison",
]
