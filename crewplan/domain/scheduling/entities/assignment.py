"""
Assignment Entity

A job scheduled for one crew on one calendar day. The placement engine only
reads assignments; persistence and editing belong to the calling system.
"""

import datetime as dt

from pydantic import Field, model_validator
from typing_extensions import Self

from ...shared.base import ValueObject
from ...shared.exceptions import InvalidStatusTransitionError
from ..services.day_keys import day_key
from ..value_objects.enums import AssignmentStatus
from ..value_objects.org_time import OrgTimeContext

MINUTES_PER_DAY = 24 * 60


class Assignment(ValueObject):
    """
    Snapshot of a crew's job on a given day.

    Times are minute offsets from the workday origin and form the half-open
    interval ``[start_minutes, end_minutes)``. ``location`` is the key used
    for travel-time lookups; it defaults to the assignment id.
    """

    id: str = Field(min_length=1)
    crew_id: str | None = None
    date: dt.datetime | dt.date | str
    start_minutes: int = Field(ge=0, le=MINUTES_PER_DAY)
    end_minutes: int = Field(ge=0, le=MINUTES_PER_DAY)
    start_at_home: bool = False
    end_at_home: bool = False
    location: str | None = None
    status: AssignmentStatus = AssignmentStatus.SCHEDULED

    @model_validator(mode="after")
    def _check_interval(self) -> Self:
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"start_minutes ({self.start_minutes}) must be before "
                f"end_minutes ({self.end_minutes})"
            )
        return self

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def location_key(self) -> str:
        return self.location or self.id

    def day_key(self, context: OrgTimeContext | None = None) -> str:
        """Org-local calendar day this assignment belongs to."""
        return day_key(self.date, context)

    def transition_to(self, target: AssignmentStatus) -> "Assignment":
        """Return a copy in ``target`` status if the lifecycle allows it."""
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransitionError(
                self.id, self.status.value, target.value
            )
        return self.model_copy(update={"status": target})
