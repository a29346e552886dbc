# lms_attendance/services/attendance_feed.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date as date_type
from typing import List, Optional, Tuple

from lms_attendance.schemas.attendance import AttendanceDateRecord, AttendanceSummary
from lms_attendance.services.attendance_summary import AttendanceSummaryComputer

logger = logging.getLogger(__name__)

SummaryListener = Callable[[AttendanceSummary], None]


class AttendanceFeed:
    """
    Turns a stream of attendance snapshots into a stream of summaries.

    Whatever delivers snapshots (a polling loop, a change stream, a test)
    calls `publish()` with the full current set of documents; every subscriber
    then receives a freshly computed summary. Nothing is patched
    incrementally, the computer re-runs over the whole snapshot each time.

    `clock` supplies the current business date; the feed never reads the
    system clock itself.
    """

    def __init__(
        self,
        student_identifiers: Iterable[str],
        computer: AttendanceSummaryComputer,
        clock: Callable[[], date_type],
    ) -> None:
        self._identifiers = frozenset(student_identifiers)
        self._computer = computer
        self._clock = clock
        self._listeners: List[SummaryListener] = []
        self._latest: Optional[AttendanceSummary] = None
        self._last_input: Optional[Tuple[Tuple[AttendanceDateRecord, ...], date_type]] = None

    @property
    def latest(self) -> Optional[AttendanceSummary]:
        return self._latest

    def subscribe(self, listener: SummaryListener) -> Callable[[], None]:
        """
        Register `listener` and return a callable that unregisters it.

        If a summary has already been computed, the listener receives it
        immediately.
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

        if self._latest is not None:
            self._deliver(listener, self._latest)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, records: Sequence[AttendanceDateRecord]) -> Optional[AttendanceSummary]:
        """
        Recompute the summary for a new snapshot and notify listeners.

        Returns the new summary, or None if the snapshot (and the current day)
        is unchanged since the previous call.
        """
        today = self._clock()
        snapshot = (tuple(records), today)
        if snapshot == self._last_input:
            logger.debug("Attendance snapshot unchanged, skipping recompute")
            return None

        summary = self._computer.compute_monthly(self._identifiers, records, today)
        self._last_input = snapshot
        self._latest = summary

        for listener in list(self._listeners):
            self._deliver(listener, summary)
        return summary

    def close(self) -> None:
        self._listeners.clear()
        self._latest = None
        self._last_input = None

    @staticmethod
    def _deliver(listener: SummaryListener, summary: AttendanceSummary) -> None:
        try:
            listener(summary)
        except Exception:
            # One broken listener must not starve the others.
            logger.exception("Attendance summary listener failed")
