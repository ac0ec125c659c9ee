"""Pydantic models for assessment scoring."""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Thresholds
# =============================================================================

# |gap| above this splits blind spots / hidden strengths from aligned
GAP_THRESHOLD = 0.5

# |change| above this is a real trend movement
TREND_THRESHOLD = 0.15

# Upper bounds (inclusive) for each CCI band; anything above is "Very High"
CCI_BANDS: list[tuple[float, str]] = [
    (2.0, "Low"),
    (3.0, "Moderate"),
    (4.0, "High"),
]

STRENGTH_COUNT = 2
RANKED_ITEM_COUNT = 5


# =============================================================================
# Enums
# =============================================================================


class RaterType(str, Enum):
    """Category of feedback provider. Everything except SELF counts as "others"."""

    SELF = "self"
    MANAGER = "manager"
    PEER = "peer"
    DIRECT_REPORT = "direct_report"


# Output order for anything keyed by rater type
RATER_TYPE_ORDER: dict[str, int] = {rater.value: position for position, rater in enumerate(RaterType)}


class InvitationStatus(str, Enum):
    """Lifecycle of a rater invitation."""

    PENDING = "pending"
    STARTED = "started"
    COMPLETED = "completed"
    DECLINED = "declined"
    EXPIRED = "expired"


GapClassification = Literal["blind_spot", "hidden_strength", "aligned"]
TrendDirection = Literal["improved", "declined", "stable"]
CCIBand = Literal["Low", "Moderate", "High", "Very High"]


# =============================================================================
# Template (read-only input)
# =============================================================================


class TemplateQuestion(BaseModel):
    """A single rated question within a competency."""

    id: str
    text: str
    reverse_scored: bool = Field(
        default=False, description="Raw rating is scale-inverted before aggregation"
    )
    is_cci: bool = Field(default=False, description="Coaching Capacity Index item")


class TemplateCompetency(BaseModel):
    """A competency and its ordered questions."""

    id: str
    name: str
    subtitle: str | None = None
    description: str | None = None
    questions: list[TemplateQuestion] = Field(default_factory=list)


class TemplateConfig(BaseModel):
    """Template configuration stored in assessment_templates.config."""

    competencies: list[TemplateCompetency] = Field(default_factory=list)
    scale_min: int = Field(default=1, description="Lowest rating (inclusive)")
    scale_max: int = Field(default=5, description="Highest rating (inclusive)")

    @property
    def midpoint(self) -> float:
        return (self.scale_min + self.scale_max) / 2

    def get_question(self, competency_id: str, question_id: str) -> TemplateQuestion | None:
        for comp in self.competencies:
            if comp.id != competency_id:
                continue
            for question in comp.questions:
                if question.id == question_id:
                    return question
        return None


# =============================================================================
# Responses (ingested input)
# =============================================================================


class Invitation(BaseModel):
    """A rater invited to an assessment."""

    id: str
    rater_type: RaterType
    status: InvitationStatus = InvitationStatus.PENDING


class ResponseItem(BaseModel):
    """One rater's answer to one question. A None rating means skipped."""

    competency_id: str
    question_id: str
    rating: Optional[float] = None
    comment: Optional[str] = None


class RaterResponse(BaseModel):
    """A submitted response set for one completed invitation."""

    invitation_id: str
    responses: list[ResponseItem] = Field(default_factory=list)
    overall_comments: Optional[str] = None


# =============================================================================
# Computed results
# =============================================================================


class CollectedComment(BaseModel):
    """A free-text comment attached to a competency."""

    competency_id: str
    rater_type: str
    comment: str


class OverallComment(BaseModel):
    """A free-text comment attached to a whole response set."""

    rater_type: str
    comment: str


class ResponseRate(BaseModel):
    """Invitation completion for one rater type."""

    invited: int = 0
    completed: int = 0
    rate: int = Field(default=0, description="Completion percentage (0-100)")


class ComputedItemScore(BaseModel):
    """Scores for a single question."""

    competency_id: str
    question_id: str
    question_text: str
    scores: dict[str, float] = Field(
        default_factory=dict, description="Average per rater type"
    )
    overall_average: float = 0
    self_score: float | None = None
    gap: float = Field(default=0, description="self_score - others average, 0 without self")


class ComputedCompetencyScore(BaseModel):
    """Scores for a single competency, pooled across its questions."""

    competency_id: str
    competency_name: str
    scores: dict[str, float] = Field(default_factory=dict)
    overall_average: float = 0
    others_average: float = 0
    self_score: float | None = None
    gap: float = 0
    response_distribution: dict[int, int] = Field(
        default_factory=dict, description="Rating count per scale point"
    )
    rater_agreement: float = Field(
        default=0, description="Population std dev of non-self ratings"
    )


class RankedItem(BaseModel):
    """A question surfaced in the top/bottom item lists."""

    competency_id: str
    competency_name: str
    question_id: str
    question_text: str
    overall_average: float
    self_score: float | None = None
    gap: float = 0


class GapEntry(BaseModel):
    """Self vs. others classification for a competency."""

    competency_id: str
    competency_name: str
    self_score: float
    others_average: float
    gap: float
    classification: GapClassification
    interpretation: str


class JohariWindow(BaseModel):
    """Competency names per Johari quadrant."""

    open_area: list[str] = Field(default_factory=list)
    blind_spot: list[str] = Field(default_factory=list)
    hidden_area: list[str] = Field(default_factory=list)
    unknown_area: list[str] = Field(default_factory=list)


class CCIItem(BaseModel):
    """One competency's contribution to the Coaching Capacity Index."""

    competency_id: str
    competency_name: str
    question_id: str
    question_text: str
    raw_score: float = Field(..., description="Overall item average (self included)")
    effective_score: float = Field(..., description="Others average, or raw when none")


class CCIResult(BaseModel):
    """Coaching Capacity Index."""

    score: float
    band: CCIBand
    items: list[CCIItem] = Field(default_factory=list)


class CurrentCeiling(BaseModel):
    """The lowest-scoring competency, framed as the limiting factor."""

    competency_id: str
    competency_name: str
    subtitle: str = ""
    score: float
    narrative: str


class CompetencyChange(BaseModel):
    """Period-over-period movement for one competency."""

    competency_id: str
    competency_name: str
    previous_score: float
    current_score: float
    change: float
    change_percent: int
    direction: TrendDirection


class TrendComparison(BaseModel):
    """Comparison against the previous completed assessment."""

    previous_assessment_id: str
    previous_completed_at: str | None = None
    competency_changes: list[CompetencyChange] = Field(default_factory=list)
    overall_change: float
    overall_direction: TrendDirection


class ComputedAssessmentResults(BaseModel):
    """Full snapshot written to assessments.computed_results."""

    computed_at: datetime
    overall_score: float = 0
    response_rate_by_type: dict[str, ResponseRate] = Field(default_factory=dict)
    competency_scores: list[ComputedCompetencyScore] = Field(default_factory=list)
    item_scores: list[ComputedItemScore] = Field(default_factory=list)
    gap_analysis: list[GapEntry] = Field(default_factory=list)
    top_items: list[RankedItem] = Field(default_factory=list)
    bottom_items: list[RankedItem] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    development_areas: list[str] = Field(default_factory=list)
    comments: list[CollectedComment] = Field(default_factory=list)
    overall_comments: list[OverallComment] = Field(default_factory=list)
    johari_window: JohariWindow = Field(default_factory=JohariWindow)
    cci_result: CCIResult | None = None
    current_ceiling: CurrentCeiling | None = None
    trend: TrendComparison | None = None


# =============================================================================
# Benchmarks
# =============================================================================


class CompetencyBenchmark(BaseModel):
    """Normative statistics for one competency across completed assessments."""

    mean: float = 0
    median: float = 0
    p25: float = 0
    p75: float = 0
    std_dev: float = 0
    sample_size: int = 0
