"""Applicant lifecycle operations outside the scoring pipeline."""

import logging
import time
from typing import Callable, Optional

from veriscript.assessment.telemetry import TelemetryCollector
from veriscript.errors import InvalidStatusTransition, ProfileNotFoundError, SampleLockedError
from .models import ApplicationStatus, SampleType, Track, WriterProfile, WritingSample
from .status import StatusEvent, transition
from .store import ProfileStore

LOG = logging.getLogger(__name__)

TASK_PROMPTS = {
    Track.TECHNICAL: ("Explain the concept of 'Recursion' to a 10-year-old, then provide a Python "
                      "example for a technical audience."),
    Track.ACADEMIC: ("Critically analyze the impact of Remote Work on urban planning in post-2020 "
                     "cities. Cite hypothetical sources."),
}
DEFAULT_TASK_PROMPT = "Discuss the ethical implications of Artificial Intelligence in creative industries."


def task_prompt_for_track(track: Optional[Track]) -> str:
    """Live-writing task given to applicants of a track."""
    return TASK_PROMPTS.get(track, DEFAULT_TASK_PROMPT)


def new_profile(full_name: str, email: str, track: Optional[Track] = None,
                experience_years: float = 0, bio: str = "") -> WriterProfile:
    return WriterProfile(
        full_name=full_name,
        email=email,
        track=track,
        experience_years=experience_years,
        bio=bio,
        status=ApplicationStatus.PROFILE_SUBMITTED,
    )


def require_profile(store: ProfileStore, profile_id: str) -> WriterProfile:
    profile = store.get(profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile


def add_sample(profile: WriterProfile, title: str, content: str,
               sample_type: SampleType = SampleType.UPLOADED) -> WriterProfile:
    """
    Return a copy of the profile with one more baseline sample appended.

    Raises:
        SampleLockedError: If the assessment has already been submitted
    """
    if profile.assessment is not None and profile.assessment.result is not None:
        raise SampleLockedError(f"Assessment already submitted for applicant {profile.id}")
    sample = WritingSample(title=title, content=content, type=sample_type)
    return profile.model_copy(update={'samples': [*profile.samples, sample]})


def begin_assessment(store: ProfileStore, profile_id: str,
                     clock: Callable[[], float] = time.time) -> TelemetryCollector:
    """
    Move the applicant into the live-writing phase and start telemetry.

    Returns:
        A started TelemetryCollector for the writing session
    """
    profile = require_profile(store, profile_id)
    status = transition(profile.status, StatusEvent.ENTER_ASSESSMENT)
    store.put(profile.model_copy(update={'status': status}))
    LOG.info("Applicant %s entered the assessment phase", profile_id)

    collector = TelemetryCollector(clock=clock)
    collector.start()
    return collector


def record_decision(store: ProfileStore, profile_id: str, decision: StatusEvent) -> WriterProfile:
    """Apply an administrator's ONBOARD or REJECT decision."""
    if decision not in (StatusEvent.ONBOARD, StatusEvent.REJECT):
        raise InvalidStatusTransition(f"{decision} is not an administrator decision")
    profile = require_profile(store, profile_id)
    updated = profile.model_copy(update={'status': transition(profile.status, decision)})
    store.put(updated)
    LOG.info("Applicant %s is now %s", profile_id, updated.status.value)
    return updated
