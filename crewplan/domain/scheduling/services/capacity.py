"""
Crew-day load metrics.

Booked minutes per crew-day, capacity classification and detection of
assignments that overlap each other.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..entities.assignment import Assignment
from ..value_objects.enums import CapacityStatus

DEFAULT_NORMAL_CAPACITY_MINUTES = 8 * 60
DEFAULT_WARNING_CAPACITY_MINUTES = 9 * 60


@dataclass(frozen=True)
class CrewCapacity:
    total_minutes: int
    status: CapacityStatus

    @property
    def hours(self) -> float:
        return round(self.total_minutes / 60, 2)


def classify_capacity(
    total_minutes: int,
    normal_limit: int = DEFAULT_NORMAL_CAPACITY_MINUTES,
    warning_limit: int = DEFAULT_WARNING_CAPACITY_MINUTES,
) -> CapacityStatus:
    """``normal`` below ``normal_limit``, ``over`` from ``warning_limit``."""
    if total_minutes >= warning_limit:
        return CapacityStatus.OVER
    if total_minutes >= normal_limit:
        return CapacityStatus.WARNING
    return CapacityStatus.NORMAL


def crew_capacity(
    assignments: Iterable[Assignment],
    normal_limit: int = DEFAULT_NORMAL_CAPACITY_MINUTES,
    warning_limit: int = DEFAULT_WARNING_CAPACITY_MINUTES,
) -> CrewCapacity:
    """Booked job minutes of one crew-day and how loaded that makes it."""
    total = sum(assignment.duration_minutes for assignment in assignments)
    return CrewCapacity(total, classify_capacity(total, normal_limit, warning_limit))


def detect_assignment_overlaps(
    assignments: Sequence[Assignment],
) -> dict[str, list[str]]:
    """
    Map each assignment id to the ids of same-crew-day assignments it overlaps.

    Callers pass one crew-day at a time (see ``group_by_crew_day``).
    Assignments that overlap nothing are absent from the result.
    """
    overlaps: dict[str, list[str]] = {}
    for index, first in enumerate(assignments):
        for second in assignments[index + 1 :]:
            if (
                first.start_minutes < second.end_minutes
                and second.start_minutes < first.end_minutes
            ):
                overlaps.setdefault(first.id, []).append(second.id)
                overlaps.setdefault(second.id, []).append(first.id)
    return overlaps
