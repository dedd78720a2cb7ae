"""Applicant profile models."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import Field

from veriscript.assessment.models import (
    AssessmentResult,
    CamelModel,
    FrozenCamelModel,
    TelemetrySnapshot,
)


class Track(str, Enum):
    ACADEMIC = 'ACADEMIC'
    TECHNICAL = 'TECHNICAL'
    BOTH = 'BOTH'


class ApplicationStatus(str, Enum):
    PROFILE_SUBMITTED = 'PROFILE_SUBMITTED'
    ASSESSMENT_PENDING = 'ASSESSMENT_PENDING'
    REVIEWING = 'REVIEWING'
    ONBOARDED = 'ONBOARDED'
    REJECTED = 'REJECTED'


class SampleType(str, Enum):
    UPLOADED = 'UPLOADED_SAMPLE'
    ASSESSMENT_TASK = 'ASSESSMENT_TASK'


def generate_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class WritingSample(FrozenCamelModel):
    """Baseline writing provided before the timed assessment."""
    id: str = Field(default_factory=generate_id)
    title: str
    content: str
    type: SampleType = SampleType.UPLOADED
    date_submitted: str = Field(default_factory=now_iso)


class AssessmentRecord(CamelModel):
    """The live-writing task, what was submitted and how it scored."""
    task_prompt: str
    submission: str
    result: Optional[AssessmentResult] = None
    meta: TelemetrySnapshot


class WriterProfile(CamelModel):
    """Applicant aggregate root."""
    id: str = Field(default_factory=generate_id)
    full_name: str
    email: str
    track: Optional[Track] = None
    experience_years: float = Field(default=0, ge=0)
    bio: str = ""
    samples: List[WritingSample] = Field(default_factory=list)
    assessment: Optional[AssessmentRecord] = None
    status: ApplicationStatus = ApplicationStatus.PROFILE_SUBMITTED
    applied_date: str = Field(default_factory=now_iso)
