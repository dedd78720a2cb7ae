"""Applicant profiles, review status and persistence."""

from .models import ApplicationStatus, SampleType, Track, WriterProfile, WritingSample
from .status import StatusEvent, transition
from .store import InMemoryProfileStore, ProfileStore, YamlProfileStore

__all__ = [
    'ApplicationStatus',
    'SampleType',
    'Track',
    'WriterProfile',
    'WritingSample',
    'StatusEvent',
    'transition',
    'InMemoryProfileStore',
    'ProfileStore',
    'YamlProfileStore',
]
