"""Style fingerprint, AI-likelihood and rubric scoring stage."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError
from pydantic_ai.exceptions import UnexpectedModelBehavior

from veriscript.errors import AnalysisFailure, FailureKind
from .models import (
    RubricCriterion,
    RubricItem,
    RubricScore,
    StyleAnalysis,
    StyleAnalysisRequest,
    StyleMetrics,
)
from .services import LanguageAnalysisService

LOG = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50
MAX_TEXT_LENGTH = 4000


def insufficient_text_analysis(rubric: Sequence[RubricCriterion]) -> StyleAnalysis:
    """Fixed result for texts too short to analyze."""
    return StyleAnalysis(
        metrics=StyleMetrics(
            vocabulary_richness=0,
            sentence_complexity=0,
            passive_voice_usage=0,
            tone='N/A',
            detected_ai_probability=0,
            consistency_score=0,
            key_traits=[],
        ),
        rubric_scores=[
            RubricScore(criterion_id=c.id, score=0, comments="Insufficient text") for c in rubric
        ],
        feedback="Text too short to analyze.",
        summary="Insufficient data.",
    )


class StyleAnalyzer:
    """Score a submission against the rubric and measure its style."""

    def __init__(self, service: LanguageAnalysisService,
                 timeout: Optional[float] = None,
                 min_text_length: int = MIN_TEXT_LENGTH):
        self.service = service
        self.timeout = timeout
        self.min_text_length = min_text_length

    def build_request(self, text: str, rubric: Sequence[RubricCriterion]) -> StyleAnalysisRequest:
        return StyleAnalysisRequest(
            text=text[:MAX_TEXT_LENGTH],
            rubric=[
                RubricItem(id=c.id, category=c.category, max_points=c.max_points, description=c.description)
                for c in rubric
            ],
        )

    async def analyze(self, text: Optional[str], rubric: Sequence[RubricCriterion]) -> StyleAnalysis:
        """
        Analyze the submission.

        Args:
            text: Submission text (may be empty)
            rubric: Active rubric, non-empty

        Returns:
            StyleAnalysis with one score per criterion, in rubric order

        Raises:
            AnalysisFailure: If the service fails, times out or answers with
                unusable output
        """
        if not text or len(text) < self.min_text_length:
            LOG.info("Submission shorter than %d characters, skipping style analysis",
                     self.min_text_length)
            return insufficient_text_analysis(rubric)

        request = self.build_request(text, rubric)

        try:
            call = self.service.analyze_style(request)
            response = await asyncio.wait_for(call, self.timeout) if self.timeout else await call
        except asyncio.TimeoutError as e:
            LOG.error("Style analysis timed out after %ss", self.timeout)
            raise AnalysisFailure(FailureKind.TIMEOUT, "Style analysis timed out") from e
        except (UnexpectedModelBehavior, ValidationError) as e:
            LOG.error("Style analysis returned unusable output: %s", e)
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, str(e)) from e
        except Exception as e:  # pylint: disable=broad-except
            LOG.error("Style analysis error: %s", e)
            raise AnalysisFailure(FailureKind.SERVICE_UNAVAILABLE, str(e)) from e

        analysis = self._parse_response(response)
        return analysis.model_copy(update={
            'rubric_scores': self._align_scores(rubric, analysis.rubric_scores)
        })

    def _parse_response(self, response: Any) -> StyleAnalysis:
        if isinstance(response, StyleAnalysis):
            return response
        if not response:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, "No response from AI")
        try:
            if isinstance(response, (str, bytes)):
                return StyleAnalysis.model_validate_json(response)
            return StyleAnalysis.model_validate(response)
        except ValidationError as e:
            LOG.error("Could not parse style analysis response: %s", e)
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE, str(e)) from e

    def _align_scores(self, rubric: Sequence[RubricCriterion],
                      scores: Sequence[RubricScore]) -> List[RubricScore]:
        """Order scores by the rubric, clamp them to each criterion's range and
        reject responses that skip, repeat or invent criteria."""
        by_id: Dict[str, RubricScore] = {}
        for score in scores:
            if score.criterion_id in by_id:
                raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE,
                                      f"Duplicate score for criterion {score.criterion_id!r}")
            by_id[score.criterion_id] = score

        expected = {c.id for c in rubric}
        unknown = sorted(set(by_id) - expected)
        if unknown:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE,
                                  f"Scores for unknown criteria: {', '.join(unknown)}")
        missing = [c.id for c in rubric if c.id not in by_id]
        if missing:
            raise AnalysisFailure(FailureKind.MALFORMED_RESPONSE,
                                  f"Missing scores for criteria: {', '.join(missing)}")

        aligned = []
        for criterion in rubric:
            score = by_id[criterion.id]
            clamped = min(max(score.score, 0), criterion.max_points)
            if clamped != score.score:
                LOG.warning("Clamped score %s for criterion %s to %s",
                            score.score, criterion.id, clamped)
                score = score.model_copy(update={'score': clamped})
            aligned.append(score)
        return aligned
