"""Analysis service contracts and their pydantic-ai backed implementations."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from pydantic_ai.builtin_tools import WebSearchTool
from pydantic_ai.exceptions import UnexpectedModelBehavior

from veriscript.libs.config_loader import ConfigType
from veriscript.libs.llm import create_agent
from .models import (
    AuthorshipComparison,
    AuthorshipRequest,
    PlagiarismRequest,
    PlagiarismSource,
    SearchFindings,
    StyleAnalysis,
    StyleAnalysisRequest,
)

LOG = logging.getLogger(__name__)

SAMPLE_SEPARATOR = "\n\n--- NEXT SAMPLE ---\n\n"

STYLE_SYSTEM_PROMPT = (
    "You are an experienced editor reviewing writing assessments from applicants. "
    "Measure style objectively, estimate how likely the text is to be AI generated, "
    "and score it fairly against every rubric criterion you are given. "
    "Never award more than a criterion's maximum points."
)

AUTHORSHIP_SYSTEM_PROMPT = (
    "You are a forensic linguist. You compare writing samples to decide whether "
    "they were written by the same person. Base your judgement on stylistic "
    "evidence only, never on topic."
)

SEARCH_SYSTEM_PROMPT = (
    "You check texts for originality. Use web search to look for published sources "
    "that contain the text or closely paraphrase it, and report what you find."
)


class LanguageAnalysisService(Protocol):
    """Style, rubric and authorship analysis of free text."""

    async def analyze_style(self, request: StyleAnalysisRequest) -> StyleAnalysis:
        ...

    async def compare_authorship(self, request: AuthorshipRequest) -> AuthorshipComparison:
        ...


class SearchAnalysisService(Protocol):
    """Web-search grounded originality analysis."""

    async def search(self, request: PlagiarismRequest) -> SearchFindings:
        ...


def _require_output(result: Any) -> Any:
    output = getattr(result, 'output', None)
    if output is None:
        raise UnexpectedModelBehavior("No response from AI")
    return output


class AgentLanguageAnalysisService:
    """LanguageAnalysisService backed by pydantic-ai agents with structured output."""

    def __init__(self, configs: ConfigType,
                 model: Optional[str] = None, settings: Optional[Dict[str, Any]] = None):
        """
        Initialize the service.

        Args:
            configs: Configuration dictionary (required)
            model: Model to use (overrides config value)
            settings: Pydantic AI settings dict (overrides config values)
        """
        self.configs = configs
        self.model_name = model
        self.settings = settings

        self.style_agent = create_agent(
            configs=configs,
            model=model,
            settings_dict=settings,
            system_prompt=STYLE_SYSTEM_PROMPT,
            output_type=StyleAnalysis,
        )
        self.authorship_agent = create_agent(
            configs=configs,
            model=model,
            settings_dict=settings,
            system_prompt=AUTHORSHIP_SYSTEM_PROMPT,
            output_type=AuthorshipComparison,
        )

    async def analyze_style(self, request: StyleAnalysisRequest) -> StyleAnalysis:
        result = await self.style_agent.run(self._build_style_prompt(request))
        return _require_output(result)

    async def compare_authorship(self, request: AuthorshipRequest) -> AuthorshipComparison:
        result = await self.authorship_agent.run(self._build_authorship_prompt(request))
        return _require_output(result)

    def _build_style_prompt(self, request: StyleAnalysisRequest) -> str:
        """Build the style and rubric prompt listing every criterion."""
        rubric_text = "\n".join(
            f"- ID {item.id}: {item.category} ({item.max_points} pts) - {item.description}"
            for item in request.rubric
        )
        criterion_ids = ", ".join(item.id for item in request.rubric)

        return f"""Analyze the following text.

1. STYLE & AI DETECTION:
Assess vocabulary, sentence structure, passive voice, and tone.
Estimate the likelihood of AI generation (0-100).

2. RUBRIC SCORING:
Score the text based on the following rubric criteria. Provide a score up to the max points for each.
{rubric_text}

Return exactly one rubric score for each of these criterion ids: {criterion_ids}.

Text to analyze:
"{request.text}..."
"""

    def _build_authorship_prompt(self, request: AuthorshipRequest) -> str:
        """Build the forensic comparison prompt."""
        formatted_samples = SAMPLE_SEPARATOR.join(
            f"[{sample.label} ({sample.type})]\n{sample.content}"
            for sample in request.baseline_samples
        )

        return f"""Compare the 'Target Assessment Text' against the 'Baseline Writing Samples' provided below.
Determine if the 'Target Assessment Text' was likely written by the same person as the 'Baseline Writing Samples'.

Look for:
- Idiosyncrasies in punctuation or grammar.
- Common spelling errors or specific vocabulary choices.
- Sentence length distribution.
- Formatting habits.
- Tone and voice consistencies.

Baseline Writing Samples:
{formatted_samples}

==========================================

Target Assessment Text:
"{request.target_text}"
"""


def _sources_from_content(content: Any) -> Iterable[Dict[str, Any]]:
    if isinstance(content, dict):
        for key in ('sources', 'results'):
            if isinstance(content.get(key), list):
                return content[key]
        return [content] if ('url' in content or 'uri' in content) else []
    if isinstance(content, list):
        return content
    return []


def extract_citations(messages: Iterable[Any]) -> List[PlagiarismSource]:
    """
    Collect cited web pages from the built-in web search results of an agent run.

    Missing or unexpected metadata yields no citations rather than an error.
    Repeated URIs are reported once.
    """
    sources: List[PlagiarismSource] = []
    seen = set()
    for message in messages:
        for part in getattr(message, 'parts', None) or []:
            if getattr(part, 'part_kind', None) != 'builtin-tool-return':
                continue
            for item in _sources_from_content(getattr(part, 'content', None)):
                if not isinstance(item, dict):
                    continue
                uri = item.get('uri') or item.get('url')
                if not uri or uri in seen:
                    continue
                seen.add(uri)
                sources.append(PlagiarismSource(title=item.get('title') or uri, uri=uri))
    return sources


class AgentSearchAnalysisService:
    """SearchAnalysisService backed by a pydantic-ai agent with web search."""

    def __init__(self, configs: ConfigType,
                 model: Optional[str] = None, settings: Optional[Dict[str, Any]] = None):
        self.configs = configs
        # The Responses API only reports the pages it searched when asked to
        self.agent = create_agent(
            configs=configs,
            model=model,
            settings_dict={**(settings or {}), 'openai_include_web_search_sources': True},
            system_prompt=SEARCH_SYSTEM_PROMPT,
            builtin_tools=[WebSearchTool()],
        )

    async def search(self, request: PlagiarismRequest) -> SearchFindings:
        result = await self.agent.run(self._build_prompt(request))
        sources = extract_citations(result.all_messages())
        LOG.debug("Web search cited %d sources", len(sources))
        return SearchFindings(analysis_text=result.output or None, sources=sources)

    def _build_prompt(self, request: PlagiarismRequest) -> str:
        return f"""Search the web to determine if the following text is original or plagiarized.
If you find exact matches or very close paraphrasing, report them.

Text snippet:
"{request.text}"
"""
