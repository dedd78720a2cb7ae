"""Assessment pipeline: runs the three analyses and aggregates the result."""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from veriscript.applicants.models import AssessmentRecord, WritingSample
from veriscript.applicants.status import StatusEvent, transition
from veriscript.applicants.store import ProfileStore
from veriscript.applicants.workflow import require_profile, task_prompt_for_track
from veriscript.errors import AnalysisFailure, FailureKind
from veriscript.libs.config_loader import ConfigType, get_config
from .authorship import AuthorshipVerifier
from .models import (
    AssessmentResult,
    AuthorshipComparison,
    PlagiarismResult,
    RubricCriterion,
    StyleAnalysis,
    TelemetrySnapshot,
)
from .plagiarism import PlagiarismChecker
from .rubric import total_points, validate_rubric
from .services import (
    AgentLanguageAnalysisService,
    AgentSearchAnalysisService,
    LanguageAnalysisService,
    SearchAnalysisService,
)
from .style import MIN_TEXT_LENGTH, StyleAnalyzer

LOG = logging.getLogger(__name__)

SUBMISSION_FAILED_MESSAGE = "Submission processing failed"
DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class AssessmentSucceeded:
    """All analyses returned; ``result`` is complete."""
    result: AssessmentResult
    succeeded: bool = True


@dataclass(frozen=True)
class AssessmentFailed:
    """The attempt was aborted and nothing was stored. The applicant may retry."""
    kind: FailureKind
    detail: str
    message: str = SUBMISSION_FAILED_MESSAGE
    succeeded: bool = False


AssessmentOutcome = Union[AssessmentSucceeded, AssessmentFailed]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def overall_score(style: StyleAnalysis, rubric: Sequence[RubricCriterion]) -> int:
    """Earned rubric points as a 0-100 percentage of the rubric total."""
    total = total_points(rubric)
    if total <= 0:
        return 0
    earned = sum(score.score for score in style.rubric_scores)
    return min(100, max(0, round_half_up(100 * earned / total)))


def aggregate(style: StyleAnalysis,
              plagiarism: PlagiarismResult,
              authorship: AuthorshipComparison,
              rubric: Sequence[RubricCriterion],
              telemetry: Optional[TelemetrySnapshot]) -> AssessmentResult:
    """Combine the three stage outputs into one result. Pure."""
    return AssessmentResult(
        overall_score=overall_score(style, rubric),
        rubric_scores=list(style.rubric_scores),
        feedback=style.feedback,
        authorship_match_score=authorship.match_score,
        metrics=style.metrics,
        plagiarism=plagiarism,
        time_taken_seconds=telemetry.elapsed_seconds if telemetry else None,
        paste_count=telemetry.paste_count if telemetry else None,
    )


class AssessmentPipeline:
    """Evaluate assessment submissions and record the outcome on the profile."""

    def __init__(self,
                 language_service: LanguageAnalysisService,
                 search_service: SearchAnalysisService,
                 store: Optional[ProfileStore] = None,
                 timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
                 concurrent: bool = True,
                 min_text_length: int = MIN_TEXT_LENGTH):
        """
        Initialize the pipeline.

        Args:
            language_service: Style, rubric and authorship analysis
            search_service: Search-grounded plagiarism analysis
            store: Profile store used by submit() (optional for evaluate())
            timeout: Seconds allowed for each service call (None disables)
            concurrent: Run the three analyses concurrently
            min_text_length: Texts shorter than this skip the service calls
        """
        self.store = store
        self.concurrent = concurrent
        self.style_analyzer = StyleAnalyzer(language_service, timeout=timeout,
                                            min_text_length=min_text_length)
        self.plagiarism_checker = PlagiarismChecker(search_service, timeout=timeout,
                                                    min_text_length=min_text_length)
        self.authorship_verifier = AuthorshipVerifier(language_service, timeout=timeout)

    @classmethod
    def from_config(cls, configs: ConfigType, store: Optional[ProfileStore] = None,
                    model: Optional[str] = None,
                    settings: Optional[Dict[str, Any]] = None) -> "AssessmentPipeline":
        """Build a pipeline with pydantic-ai backed services."""
        return cls(
            language_service=AgentLanguageAnalysisService(configs, model=model, settings=settings),
            search_service=AgentSearchAnalysisService(configs, model=model, settings=settings),
            store=store,
            timeout=get_config("assessment.request_timeout_seconds", configs,
                               default=DEFAULT_TIMEOUT_SECONDS),
            concurrent=bool(get_config("assessment.concurrent_stages", configs, default=True)),
            min_text_length=get_config("assessment.min_text_length", configs, default=MIN_TEXT_LENGTH),
        )

    async def _run_stages(self, text: str, rubric: Sequence[RubricCriterion],
                          samples: Sequence[WritingSample]):
        if self.concurrent:
            return await asyncio.gather(
                self.style_analyzer.analyze(text, rubric),
                self.plagiarism_checker.check(text),
                self.authorship_verifier.compare(samples, text),
            )
        style = await self.style_analyzer.analyze(text, rubric)
        plagiarism = await self.plagiarism_checker.check(text)
        authorship = await self.authorship_verifier.compare(samples, text)
        return style, plagiarism, authorship

    async def evaluate(self,
                       text: str,
                       rubric: Sequence[RubricCriterion],
                       samples: Sequence[WritingSample],
                       telemetry: Optional[TelemetrySnapshot]) -> AssessmentOutcome:
        """
        Run all analyses on a submission.

        Args:
            text: Submission text
            rubric: Active rubric
            samples: Baseline writing samples (may be empty)
            telemetry: Frozen anti-cheat telemetry

        Returns:
            AssessmentSucceeded with the full result, or AssessmentFailed if
            the style and rubric analysis failed
        """
        rubric = validate_rubric(rubric)

        try:
            style, plagiarism, authorship = await self._run_stages(text, rubric, samples)
        except AnalysisFailure as e:
            LOG.error("%s: %s", SUBMISSION_FAILED_MESSAGE, e)
            return AssessmentFailed(kind=e.kind, detail=e.message)

        result = aggregate(style, plagiarism, authorship, rubric, telemetry)
        LOG.info("Assessment scored %d/100 (plagiarism %s, authorship %s)",
                 result.overall_score, plagiarism.score, authorship.match_score)
        return AssessmentSucceeded(result=result)

    async def submit(self, profile_id: str, text: str,
                     telemetry: TelemetrySnapshot) -> AssessmentOutcome:
        """
        Evaluate an applicant's submission and store it on success.

        On success the profile gains an assessment record and moves to
        REVIEWING. On failure the stored profile is left untouched.

        Raises:
            ValueError: If the pipeline was created without a store
            ProfileNotFoundError: If the applicant does not exist
            InvalidStatusTransition: If the applicant is not in ASSESSMENT_PENDING
        """
        if self.store is None:
            raise ValueError("submit() requires a profile store")

        profile = require_profile(self.store, profile_id)
        next_status = transition(profile.status, StatusEvent.ASSESSMENT_COMPLETED)
        rubric = self.store.get_rubric()

        outcome = await self.evaluate(text, rubric, profile.samples, telemetry)
        if not outcome.succeeded:
            return outcome

        record = AssessmentRecord(
            task_prompt=task_prompt_for_track(profile.track),
            submission=text,
            result=outcome.result,
            meta=telemetry,
        )
        self.store.put(profile.model_copy(update={'assessment': record, 'status': next_status}))
        LOG.info("Applicant %s moved to %s", profile_id, next_status.value)
        return outcome

    def evaluate_sync(self, text: str, rubric: Sequence[RubricCriterion],
                      samples: Sequence[WritingSample],
                      telemetry: Optional[TelemetrySnapshot]) -> AssessmentOutcome:
        """Synchronous wrapper for evaluate()."""
        return asyncio.run(self.evaluate(text, rubric, samples, telemetry))

    def submit_sync(self, profile_id: str, text: str,
                    telemetry: TelemetrySnapshot) -> AssessmentOutcome:
        """Synchronous wrapper for submit()."""
        return asyncio.run(self.submit(profile_id, text, telemetry))
