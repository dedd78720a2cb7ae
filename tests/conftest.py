"""Shared fixtures for veriscript tests."""

from unittest.mock import AsyncMock, Mock

import pytest

from veriscript.assessment.models import (
    AuthorshipComparison,
    PlagiarismSource,
    RubricScore,
    SearchFindings,
    StyleAnalysis,
    StyleMetrics,
)
from veriscript.assessment.rubric import DEFAULT_RUBRIC


SUBMISSION_TEXT = (
    "Remote work has quietly redrawn the map of many cities. Downtown office towers sit "
    "half empty while suburban coffee shops fill with laptops, and planners are only now "
    "starting to ask what a commute-free city should look like."
)


@pytest.fixture
def rubric():
    """Default rubric: five criteria totaling 100 points."""
    return list(DEFAULT_RUBRIC)


@pytest.fixture
def submission_text():
    return SUBMISSION_TEXT


@pytest.fixture
def sample_metrics():
    return StyleMetrics(
        vocabulary_richness=72,
        sentence_complexity=64,
        passive_voice_usage=12,
        tone="Analytical",
        detected_ai_probability=18,
        consistency_score=81,
        key_traits=["concise", "concrete examples"],
    )


@pytest.fixture
def style_analysis(sample_metrics):
    """Style analysis earning 18+16+25+10+12 = 81 of 100 points."""
    return StyleAnalysis(
        metrics=sample_metrics,
        rubric_scores=[
            RubricScore(criterion_id='1', score=18, comments="Few slips"),
            RubricScore(criterion_id='2', score=16, comments="Mostly clear"),
            RubricScore(criterion_id='3', score=25, comments="Accurate"),
            RubricScore(criterion_id='4', score=10, comments="Tone wavers"),
            RubricScore(criterion_id='5', score=12, comments="On topic"),
        ],
        feedback="Strong analysis; tighten the conclusion.",
        summary="Competent analytical writer.",
    )


@pytest.fixture
def language_service(style_analysis):
    """Language analysis service mock answering both request kinds."""
    service = Mock()
    service.analyze_style = AsyncMock(return_value=style_analysis)
    service.compare_authorship = AsyncMock(
        return_value=AuthorshipComparison(match_score=88, reason="Same comma habits")
    )
    return service


@pytest.fixture
def search_service():
    """Search service mock citing two sources."""
    service = Mock()
    service.search = AsyncMock(return_value=SearchFindings(
        analysis_text="Two pages share phrasing with the text.",
        sources=[
            PlagiarismSource(title="Cities after 2020", uri="https://example.com/cities"),
            PlagiarismSource(title="Remote work survey", uri="https://example.org/survey"),
        ],
    ))
    return service
