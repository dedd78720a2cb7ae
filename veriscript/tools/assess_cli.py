#!/usr/bin/env python3
"""Command-line interface for submitting an applicant's assessment text."""

import argparse
import logging
import sys
import time
from pathlib import Path

from veriscript.applicants.models import ApplicationStatus
from veriscript.applicants.store import YamlProfileStore
from veriscript.applicants.workflow import begin_assessment, require_profile
from veriscript.assessment.models import TelemetrySnapshot
from veriscript.assessment.pipeline import AssessmentPipeline
from veriscript.errors import VeriScriptError
from veriscript.libs.config_loader import get_config, load_all_configs

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Score an applicant assessment: rubric, AI likelihood, plagiarism and authorship',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Submit an assessment for an existing applicant
  veriscript-assess --applicant 3f2a9c --submission essay.txt

  # Record anti-cheat telemetry captured by the writing client
  veriscript-assess --applicant 3f2a9c --submission essay.txt --elapsed-seconds 1520 --paste-count 2

  # Use a specific model and a different store
  veriscript-assess -a 3f2a9c -s essay.txt --model gpt-4.1 --store data/applicants.yaml
        """
    )

    parser.add_argument(
        '--applicant', '-a',
        type=str,
        required=True,
        help='Applicant id'
    )
    parser.add_argument(
        '--submission', '-s',
        type=Path,
        required=True,
        help='Text file containing the assessment submission'
    )
    parser.add_argument(
        '--store',
        type=Path,
        default=None,
        help='Profile store YAML file (overrides config value)'
    )
    parser.add_argument(
        '--elapsed-seconds',
        type=float,
        default=0.0,
        help='Seconds the applicant spent writing (default: 0)'
    )
    parser.add_argument(
        '--paste-count',
        type=int,
        default=0,
        help='Number of paste events during writing (default: 0)'
    )
    parser.add_argument(
        '--model', '-m',
        type=str,
        default=None,
        help='OpenAI model to use (overrides config value)'
    )
    parser.add_argument(
        '--sequential',
        action='store_true',
        help='Run the analyses one after another instead of concurrently'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    return parser


def main():
    """Main entry point for veriscript-assess command."""
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.submission.is_file():
        LOG.error(f"Submission file does not exist: {args.submission}")
        sys.exit(1)
    if args.elapsed_seconds < 0 or args.paste_count < 0:
        LOG.error("--elapsed-seconds and --paste-count must not be negative")
        sys.exit(1)

    try:
        config = load_all_configs()
    except Exception as e:
        LOG.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    store = YamlProfileStore(args.store or Path(get_config("store.path", config)))
    text = args.submission.read_text(encoding='utf-8', errors='ignore')

    try:
        profile = require_profile(store, args.applicant)
        if profile.status == ApplicationStatus.PROFILE_SUBMITTED:
            # Status change only; telemetry comes from the writing client via the flags below
            begin_assessment(store, args.applicant)

        pipeline = AssessmentPipeline.from_config(config, store=store, model=args.model)
        if args.sequential:
            pipeline.concurrent = False

        end_time = time.time()
        telemetry = TelemetrySnapshot(
            start_time=end_time - args.elapsed_seconds,
            end_time=end_time,
            paste_count=args.paste_count,
        )
        outcome = pipeline.submit_sync(args.applicant, text, telemetry)
    except VeriScriptError as e:
        LOG.error(f"Cannot submit assessment: {e}")
        sys.exit(1)

    if not outcome.succeeded:
        print(f"\n{outcome.message}. Please check your connection and try again.")
        LOG.debug(f"Failure kind {outcome.kind.value}: {outcome.detail}")
        sys.exit(1)

    result = outcome.result
    print(f"\n{'='*60}")
    print("Assessment Complete")
    print(f"{'='*60}")
    print(f"Overall score: {result.overall_score}/100")
    print(f"AI probability: {result.metrics.detected_ai_probability:.0f}%")
    print(f"Authorship match: {result.authorship_match_score:.0f}%")
    if result.plagiarism:
        print(f"Plagiarism similarity: {result.plagiarism.score:.0f}% "
              f"({len(result.plagiarism.sources)} sources)")
    print(f"Time taken: {result.time_taken_seconds:.0f}s, pastes: {result.paste_count}")
    print(f"\nFeedback: {result.feedback}")


if __name__ == "__main__":
    main()
