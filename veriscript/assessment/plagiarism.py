"""Web plagiarism stage."""

import asyncio
import logging
from typing import Optional

from .models import PlagiarismRequest, PlagiarismResult
from .services import SearchAnalysisService

LOG = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50
MAX_TEXT_LENGTH = 1000

BASE_SIMILARITY = 50
SIMILARITY_PER_SOURCE = 10
MAX_SIMILARITY = 100


def similarity_score(source_count: int) -> int:
    """
    Similarity score implied by the number of cited web sources.

    No sources means 0. Otherwise a single citation starts at 50 and each
    further citation adds 10, capped at 100. Citations are not checked for
    relevance, so benign sources raise the score as much as real matches.
    """
    if source_count <= 0:
        return 0
    return min(MAX_SIMILARITY, BASE_SIMILARITY + SIMILARITY_PER_SOURCE * source_count)


class PlagiarismChecker:
    """Look for web sources of a submission. Never raises."""

    def __init__(self, service: SearchAnalysisService,
                 timeout: Optional[float] = None,
                 min_text_length: int = MIN_TEXT_LENGTH):
        self.service = service
        self.timeout = timeout
        self.min_text_length = min_text_length

    async def check(self, text: Optional[str]) -> PlagiarismResult:
        if not text or len(text) < self.min_text_length:
            return PlagiarismResult(score=0, sources=[], analysis="Text too short to check.")

        request = PlagiarismRequest(text=text[:MAX_TEXT_LENGTH])

        try:
            call = self.service.search(request)
            findings = await asyncio.wait_for(call, self.timeout) if self.timeout else await call
            sources = list(findings.sources or [])
            analysis = findings.analysis_text or "No analysis provided."
        except Exception as e:  # pylint: disable=broad-except
            LOG.error("Plagiarism check error: %s", e)
            return PlagiarismResult(score=0, sources=[], analysis="Error during plagiarism check.")

        return PlagiarismResult(
            score=similarity_score(len(sources)),
            sources=sources,
            analysis=analysis,
        )
