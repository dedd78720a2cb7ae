"""Assessment stages and models.

The orchestrator lives in ``veriscript.assessment.pipeline``.
"""

from .models import (
    AssessmentResult,
    AuthorshipComparison,
    PlagiarismResult,
    PlagiarismSource,
    RubricCriterion,
    RubricScore,
    StyleAnalysis,
    StyleMetrics,
    TelemetrySnapshot,
)
from .rubric import DEFAULT_RUBRIC, total_points, validate_rubric
from .rubric_parser import RubricParser
from .telemetry import TelemetryCollector

__all__ = [
    'AssessmentResult',
    'AuthorshipComparison',
    'PlagiarismResult',
    'PlagiarismSource',
    'RubricCriterion',
    'RubricScore',
    'StyleAnalysis',
    'StyleMetrics',
    'TelemetrySnapshot',
    'DEFAULT_RUBRIC',
    'total_points',
    'validate_rubric',
    'RubricParser',
    'TelemetryCollector',
]
