"""Applicant review status machine."""

from enum import Enum
from typing import Dict, List, Tuple

from veriscript.errors import InvalidStatusTransition
from .models import ApplicationStatus


class StatusEvent(str, Enum):
    ENTER_ASSESSMENT = 'ENTER_ASSESSMENT'
    ASSESSMENT_COMPLETED = 'ASSESSMENT_COMPLETED'
    # Administrator decisions
    ONBOARD = 'ONBOARD'
    REJECT = 'REJECT'


TERMINAL_STATUSES = frozenset({ApplicationStatus.ONBOARDED, ApplicationStatus.REJECTED})

_TRANSITIONS: Dict[Tuple[ApplicationStatus, StatusEvent], ApplicationStatus] = {
    (ApplicationStatus.PROFILE_SUBMITTED, StatusEvent.ENTER_ASSESSMENT): ApplicationStatus.ASSESSMENT_PENDING,
    # Re-entering after a failed submission keeps the applicant pending
    (ApplicationStatus.ASSESSMENT_PENDING, StatusEvent.ENTER_ASSESSMENT): ApplicationStatus.ASSESSMENT_PENDING,
    (ApplicationStatus.ASSESSMENT_PENDING, StatusEvent.ASSESSMENT_COMPLETED): ApplicationStatus.REVIEWING,
}
for _status in ApplicationStatus:
    if _status not in TERMINAL_STATUSES:
        _TRANSITIONS[(_status, StatusEvent.ONBOARD)] = ApplicationStatus.ONBOARDED
        _TRANSITIONS[(_status, StatusEvent.REJECT)] = ApplicationStatus.REJECTED


def transition(current: ApplicationStatus, event: StatusEvent) -> ApplicationStatus:
    """
    Return the status that follows ``current`` after ``event``.

    Raises:
        InvalidStatusTransition: If the event is not allowed in ``current``
    """
    try:
        return _TRANSITIONS[(ApplicationStatus(current), StatusEvent(event))]
    except KeyError:
        raise InvalidStatusTransition(
            f"Cannot apply {StatusEvent(event).value} to an applicant in status "
            f"{ApplicationStatus(current).value}"
        ) from None


def allowed_events(current: ApplicationStatus) -> List[StatusEvent]:
    return [event for (status, event) in _TRANSITIONS if status == current]
