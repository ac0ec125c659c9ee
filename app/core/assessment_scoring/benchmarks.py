"""Agency-level normative benchmarks per template.

Aggregates competency overall averages across every completed assessment of a
template and stores mean, median, quartiles and spread per competency. Used to
place an individual score as a percentile rank.
"""

import logging
import math
from uuid import UUID

from app.core.assessment_scoring.compute import TemplateNotFoundError
from app.core.assessment_scoring.stats import mean, percentile, round2, round_int, sample_std_dev
from app.core.assessment_scoring.types import CompetencyBenchmark, TemplateConfig
from app.core.logging import get_logger, log_with_context
from app.db.assessment_benchmarks import upsert_benchmark
from app.db.assessment_templates import get_template
from app.db.assessments import list_completed_assessment_results

logger = get_logger(__name__)


def summarize_scores(scores: list[float]) -> CompetencyBenchmark:
    """Benchmark statistics for one competency's scores; all zero when empty."""
    if not scores:
        return CompetencyBenchmark()

    ordered = sorted(scores)
    return CompetencyBenchmark(
        mean=round2(mean(ordered)),
        median=round2(percentile(ordered, 50)),
        p25=round2(percentile(ordered, 25)),
        p75=round2(percentile(ordered, 75)),
        std_dev=round2(sample_std_dev(ordered)),
        sample_size=len(ordered),
    )


def compute_benchmarks(agency_id: UUID, template_id: UUID) -> dict[str, CompetencyBenchmark]:
    """
    Compute and store benchmarks for a template.

    Args:
        agency_id: Agency that owns the template
        template_id: Template UUID

    Returns:
        Benchmark per competency_id, in template order

    Raises:
        TemplateNotFoundError: If the template does not exist
    """
    template_row = get_template(template_id)
    if not template_row:
        raise TemplateNotFoundError(f"Template {template_id} not found")

    template = TemplateConfig.model_validate(template_row.get("config") or {})
    scores_by_competency: dict[str, list[float]] = {c.id: [] for c in template.competencies}

    completed = list_completed_assessment_results(template_id)
    for row in completed:
        for cs in row["computed_results"].get("competency_scores", []):
            if cs.get("competency_id") in scores_by_competency:
                scores_by_competency[cs["competency_id"]].append(cs.get("overall_average", 0))

    benchmarks = {cid: summarize_scores(scores) for cid, scores in scores_by_competency.items()}

    upsert_benchmark(
        agency_id=agency_id,
        template_id=template_id,
        sample_size=len(completed),
        benchmark_data={cid: b.model_dump() for cid, b in benchmarks.items()},
    )

    log_with_context(
        logger,
        logging.INFO,
        "Computed benchmarks",
        agency_id=str(agency_id),
        template_id=str(template_id),
        competencies=len(benchmarks),
        sample_size=len(completed),
    )
    return benchmarks


def percentile_rank(score: float, benchmark: CompetencyBenchmark) -> int:
    """
    Approximate percentile of ``score`` within a benchmark.

    Uses a logistic approximation of the normal CDF on the z-score, clamped
    to 1..99. Returns 50 when there is no spread to compare against.
    """
    if benchmark.sample_size == 0 or benchmark.std_dev == 0:
        return 50

    z = (score - benchmark.mean) / benchmark.std_dev
    rank = 100 / (1 + math.exp(-1.7 * z))
    return round_int(min(max(rank, 1), 99))
