"""Exception types raised by the assessment engine."""

from enum import Enum


class VeriScriptError(Exception):
    """Base class for all veriscript errors."""


class FailureKind(str, Enum):
    """Why an analysis service call could not produce a usable answer."""
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class AnalysisFailure(VeriScriptError):
    """The style and rubric analysis could not be completed."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class RubricValidationError(VeriScriptError, ValueError):
    """A rubric was rejected at save time."""


class InvalidStatusTransition(VeriScriptError, ValueError):
    """An applicant status change is not allowed from the current status."""


class ProfileNotFoundError(VeriScriptError, KeyError):
    """No applicant profile exists for the requested id."""


class SampleLockedError(VeriScriptError):
    """Writing samples can no longer be added to the profile."""


class TelemetryError(VeriScriptError):
    """Base class for telemetry collector misuse."""


class TelemetryNotStartedError(TelemetryError):
    """Telemetry was recorded or frozen before the writing phase started."""


class TelemetryFrozenError(TelemetryError):
    """Telemetry was modified after the snapshot was taken."""
