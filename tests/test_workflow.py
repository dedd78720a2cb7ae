"""Tests for applicant lifecycle operations."""

import pytest

from veriscript.applicants.models import ApplicationStatus, AssessmentRecord, SampleType, Track
from veriscript.applicants.status import StatusEvent
from veriscript.applicants.store import InMemoryProfileStore
from veriscript.applicants.workflow import (
    DEFAULT_TASK_PROMPT,
    add_sample,
    begin_assessment,
    new_profile,
    record_decision,
    require_profile,
    task_prompt_for_track,
)
from veriscript.assessment.models import TelemetrySnapshot
from veriscript.errors import InvalidStatusTransition, ProfileNotFoundError, SampleLockedError


@pytest.fixture
def store():
    return InMemoryProfileStore()


@pytest.fixture
def profile(store):
    p = new_profile("Lin Writer", "lin@example.com", track=Track.TECHNICAL)
    store.put(p)
    return p


def test_new_profile_defaults():
    p = new_profile("Sam", "sam@example.com")

    assert p.status == ApplicationStatus.PROFILE_SUBMITTED
    assert p.samples == []
    assert p.assessment is None
    assert p.id


def test_task_prompts():
    assert "Recursion" in task_prompt_for_track(Track.TECHNICAL)
    assert "Remote Work" in task_prompt_for_track(Track.ACADEMIC)
    assert task_prompt_for_track(Track.BOTH) == DEFAULT_TASK_PROMPT
    assert task_prompt_for_track(None) == DEFAULT_TASK_PROMPT


def test_require_profile(store, profile):
    assert require_profile(store, profile.id) == profile
    with pytest.raises(ProfileNotFoundError):
        require_profile(store, "nobody")


def test_add_sample_returns_copy(profile):
    updated = add_sample(profile, "notes.txt", "Earlier text", SampleType.UPLOADED)

    assert profile.samples == []
    assert [s.title for s in updated.samples] == ["notes.txt"]
    assert updated.samples[0].type == SampleType.UPLOADED


def test_samples_locked_after_submission(profile):
    record = AssessmentRecord(
        task_prompt="Write",
        submission="Text",
        result=None,
        meta=TelemetrySnapshot(start_time=0, end_time=1, paste_count=0),
    )
    # A stored attempt without a result does not lock samples
    add_sample(profile.model_copy(update={'assessment': record}), "a", "b")

    finished = profile.model_copy(update={'assessment': record.model_copy(update={'result': object()})})
    with pytest.raises(SampleLockedError):
        add_sample(finished, "late.md", "Too late")


def test_begin_assessment(store, profile):
    collector = begin_assessment(store, profile.id, clock=lambda: 50.0)

    assert store.get(profile.id).status == ApplicationStatus.ASSESSMENT_PENDING
    assert collector.started
    assert collector.paste_count == 0


def test_begin_assessment_again_after_failed_submit(store, profile):
    begin_assessment(store, profile.id)
    begin_assessment(store, profile.id)

    assert store.get(profile.id).status == ApplicationStatus.ASSESSMENT_PENDING


def test_begin_assessment_after_review(store, profile):
    store.put(profile.model_copy(update={'status': ApplicationStatus.REVIEWING}))

    with pytest.raises(InvalidStatusTransition):
        begin_assessment(store, profile.id)


@pytest.mark.parametrize("decision,expected", [
    (StatusEvent.ONBOARD, ApplicationStatus.ONBOARDED),
    (StatusEvent.REJECT, ApplicationStatus.REJECTED),
])
def test_record_decision(store, profile, decision, expected):
    store.put(profile.model_copy(update={'status': ApplicationStatus.REVIEWING}))

    updated = record_decision(store, profile.id, decision)

    assert updated.status == expected
    assert store.get(profile.id).status == expected


def test_decision_is_final(store, profile):
    record_decision(store, profile.id, StatusEvent.REJECT)

    with pytest.raises(InvalidStatusTransition):
        record_decision(store, profile.id, StatusEvent.ONBOARD)


def test_only_admin_events_are_decisions(store, profile):
    with pytest.raises(InvalidStatusTransition):
        record_decision(store, profile.id, StatusEvent.ASSESSMENT_COMPLETED)
