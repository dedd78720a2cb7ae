"""Anti-cheat telemetry gathered while the applicant writes the assessment."""

import logging
import threading
import time
from typing import Callable, Optional

from veriscript.errors import TelemetryFrozenError, TelemetryNotStartedError
from .models import TelemetrySnapshot

LOG = logging.getLogger(__name__)


class TelemetryCollector:
    """
    Track elapsed time and paste events during the live-writing phase.

    The collector only counts. Whether a high paste count matters is left to
    the human reviewer.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._start_time: Optional[float] = None
        self._paste_count = 0
        self._snapshot: Optional[TelemetrySnapshot] = None

    @property
    def started(self) -> bool:
        return self._start_time is not None

    @property
    def frozen(self) -> bool:
        return self._snapshot is not None

    @property
    def paste_count(self) -> int:
        return self._paste_count

    def start(self) -> None:
        """Record the wall-clock time at which the writing phase began."""
        with self._lock:
            if self._snapshot is not None:
                raise TelemetryFrozenError("Telemetry already frozen")
            self._start_time = self._clock()
            self._paste_count = 0
        LOG.debug("Telemetry started at %s", self._start_time)

    def record_paste(self) -> int:
        """Count one paste event and return the running total."""
        with self._lock:
            if self._snapshot is not None:
                raise TelemetryFrozenError("Cannot record paste events after submission")
            if self._start_time is None:
                raise TelemetryNotStartedError("Writing phase has not started")
            self._paste_count += 1
            return self._paste_count

    def freeze(self) -> TelemetrySnapshot:
        """Record the submission time and return the immutable snapshot.

        Calling freeze() again returns the same snapshot.
        """
        with self._lock:
            if self._snapshot is None:
                if self._start_time is None:
                    raise TelemetryNotStartedError("Writing phase has not started")
                self._snapshot = TelemetrySnapshot(
                    start_time=self._start_time,
                    end_time=self._clock(),
                    paste_count=self._paste_count,
                )
                LOG.info("Telemetry frozen: %.1fs elapsed, %d paste events",
                         self._snapshot.elapsed_seconds, self._snapshot.paste_count)
            return self._snapshot
