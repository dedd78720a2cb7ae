"""Pydantic models for the assessment pipeline.

Models serialize with the camelCase field names used by the analysis services
and by stored profiles; Python code reads and writes the snake_case attributes.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant of CamelModel."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class RubricCriterion(FrozenCamelModel):
    """Single rubric criterion configured by an administrator."""
    id: str = Field(min_length=1, description="Unique id of the criterion within the rubric")
    category: str = Field(description="Short label, e.g. 'Clarity & Flow'")
    description: str = Field(description="What is being evaluated")
    max_points: int = Field(gt=0, description="Maximum points for this criterion")


class RubricScore(FrozenCamelModel):
    """Points awarded for one rubric criterion."""
    criterion_id: str = Field(description="Id of the rubric criterion being scored")
    score: float = Field(description="Points awarded, from 0 up to the criterion's max points")
    comments: str = Field(default="", description="Brief justification for the score")


class StyleMetrics(FrozenCamelModel):
    """Style fingerprint of a text."""
    vocabulary_richness: float = Field(ge=0, le=100, description="Score 0-100")
    sentence_complexity: float = Field(ge=0, le=100, description="Score 0-100")
    passive_voice_usage: float = Field(ge=0, le=100, description="Percentage estimation 0-100")
    tone: str = Field(description="Short label for the overall tone")
    detected_ai_probability: float = Field(
        ge=0, le=100, description="0-100 probability of being AI generated"
    )
    consistency_score: float = Field(ge=0, le=100, description="Internal consistency 0-100")
    key_traits: List[str] = Field(default_factory=list, description="Short labels for notable traits")


class StyleAnalysis(FrozenCamelModel):
    """Structured response of the style and rubric analysis."""
    metrics: StyleMetrics
    rubric_scores: List[RubricScore] = Field(description="Exactly one score per rubric criterion id")
    feedback: str = Field(description="Constructive feedback for the writer")
    summary: str = Field(description="One-paragraph summary of the analysis")


class RubricItem(FrozenCamelModel):
    """Rubric criterion as sent to the language analysis service."""
    id: str
    category: str
    max_points: int
    description: str


class StyleAnalysisRequest(FrozenCamelModel):
    """Request for the style and rubric analysis."""
    text: str
    rubric: List[RubricItem]


class BaselineSample(FrozenCamelModel):
    """Baseline writing sample as sent to the authorship comparison."""
    label: str
    type: str
    content: str


class AuthorshipRequest(FrozenCamelModel):
    """Request for the forensic authorship comparison."""
    baseline_samples: List[BaselineSample]
    target_text: str


class AuthorshipComparison(FrozenCamelModel):
    """Likelihood that the target text shares an author with the baseline."""
    match_score: float = Field(ge=0, le=100, description="0-100 likelihood of same author")
    reason: str = Field(description="Detailed explanation of findings")


class PlagiarismRequest(FrozenCamelModel):
    """Request for the search-grounded originality check."""
    text: str


class PlagiarismSource(FrozenCamelModel):
    """Web page cited as a possible origin of the text."""
    title: str
    uri: str


class SearchFindings(FrozenCamelModel):
    """Raw answer of the search-grounded analysis service."""
    analysis_text: Optional[str] = None
    sources: List[PlagiarismSource] = Field(default_factory=list)


class PlagiarismResult(FrozenCamelModel):
    """Similarity score derived from cited web sources."""
    score: float = Field(ge=0, le=100)
    sources: List[PlagiarismSource] = Field(default_factory=list)
    analysis: str = ""


class TelemetrySnapshot(FrozenCamelModel):
    """Anti-cheat telemetry frozen at submission time."""
    start_time: float = Field(description="Epoch seconds when the writing phase started")
    end_time: float = Field(description="Epoch seconds when the text was submitted")
    paste_count: int = Field(ge=0)

    @property
    def elapsed_seconds(self) -> float:
        return max(0.0, self.end_time - self.start_time)


class AssessmentResult(FrozenCamelModel):
    """Composite result of one successful submission attempt."""
    overall_score: int = Field(ge=0, le=100)
    rubric_scores: List[RubricScore]
    feedback: str
    authorship_match_score: float = Field(ge=0, le=100)
    metrics: StyleMetrics
    plagiarism: Optional[PlagiarismResult] = None
    time_taken_seconds: Optional[float] = Field(default=None, ge=0)
    paste_count: Optional[int] = Field(default=None, ge=0)
