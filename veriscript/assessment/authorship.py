"""Authorship consistency stage."""

import asyncio
import logging
from typing import Any, Optional, Sequence

from .models import AuthorshipComparison, AuthorshipRequest, BaselineSample
from .services import LanguageAnalysisService

LOG = logging.getLogger(__name__)

MAX_SAMPLE_LENGTH = 1500
MAX_TARGET_LENGTH = 3000

NO_BASELINE = AuthorshipComparison(match_score=100, reason="No baseline to compare against.")
ANALYSIS_FAILED = AuthorshipComparison(match_score=0, reason="Analysis failed")


class AuthorshipVerifier:
    """Compare a submission with the applicant's earlier samples. Never raises."""

    def __init__(self, service: LanguageAnalysisService, timeout: Optional[float] = None):
        self.service = service
        self.timeout = timeout

    def build_request(self, samples: Sequence[Any], target_text: str) -> AuthorshipRequest:
        """Label and truncate each sample; samples need ``type`` and ``content``."""
        return AuthorshipRequest(
            baseline_samples=[
                BaselineSample(
                    label=f"Sample {i}",
                    type=getattr(sample.type, 'value', sample.type),
                    content=sample.content[:MAX_SAMPLE_LENGTH],
                )
                for i, sample in enumerate(samples, start=1)
            ],
            target_text=(target_text or "")[:MAX_TARGET_LENGTH],
        )

    async def compare(self, samples: Sequence[Any], target_text: str) -> AuthorshipComparison:
        if not samples:
            return NO_BASELINE

        request = self.build_request(samples, target_text)

        try:
            call = self.service.compare_authorship(request)
            response = await asyncio.wait_for(call, self.timeout) if self.timeout else await call
            if response is None:
                raise ValueError("No response from AI")
            if not isinstance(response, AuthorshipComparison):
                response = AuthorshipComparison.model_validate(response)
        except Exception as e:  # pylint: disable=broad-except
            LOG.error("Authorship comparison error: %s", e)
            return ANALYSIS_FAILED

        return response
