"""
Time Window Value Objects

Half-open minute intervals relative to the workday origin. Occupied blocks
(jobs and travel buffers) and placement windows are all expressed this way.
"""

from dataclasses import dataclass, field

from .enums import BlockKind, TravelKind


@dataclass(frozen=True)
class MinuteInterval:
    """
    A half-open interval ``[start_minutes, end_minutes)``.

    Two intervals that merely touch (one ends where the other starts) do not
    overlap.
    """

    start_minutes: int
    end_minutes: int

    def __post_init__(self):
        if self.start_minutes > self.end_minutes:
            raise ValueError(
                f"Interval start {self.start_minutes} is after end {self.end_minutes}"
            )

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def contains(self, minutes: int) -> bool:
        """Check if a minute offset falls inside the interval."""
        return self.start_minutes <= minutes < self.end_minutes

    def overlaps(self, start_minutes: int, end_minutes: int) -> bool:
        """Check if ``[start_minutes, end_minutes)`` intersects this interval."""
        return start_minutes < self.end_minutes and end_minutes > self.start_minutes


@dataclass(frozen=True)
class WorkdayBounds(MinuteInterval):
    """The bookable part of a crew's day."""

    def __post_init__(self):
        super().__post_init__()
        if self.start_minutes < 0:
            raise ValueError("Workday cannot start before the day origin")
        if self.start_minutes == self.end_minutes:
            raise ValueError("Workday must have a positive length")


@dataclass(frozen=True)
class PlacementWindow(MinuteInterval):
    """A grid-aligned slot of one crew-day into which a job can be inserted."""

    crew_id: str = ""
    date: str = ""


@dataclass(frozen=True)
class JobBlock(MinuteInterval):
    """Occupied time taken by an assignment itself."""

    assignment_id: str = ""
    kind: BlockKind = field(default=BlockKind.JOB, init=False)

    @property
    def id(self) -> str:
        return self.assignment_id


@dataclass(frozen=True)
class TravelBlock(MinuteInterval):
    """
    Occupied time spent driving between two stops.

    ``from_assignment_id`` / ``to_assignment_id`` are ``None`` on the home side
    of a home-base leg. ``travel_minutes`` is the raw looked-up duration before
    it was rounded to the grid and clamped to the free gap.
    """

    travel_kind: TravelKind = TravelKind.BETWEEN
    from_assignment_id: str | None = None
    to_assignment_id: str | None = None
    travel_minutes: int = 0
    kind: BlockKind = field(default=BlockKind.TRAVEL, init=False)

    @property
    def id(self) -> str:
        if self.travel_kind is TravelKind.HOME_START:
            return f"travel-home-start-{self.to_assignment_id}"
        if self.travel_kind is TravelKind.HOME_END:
            return f"travel-home-end-{self.from_assignment_id}"
        return f"travel-{self.from_assignment_id}-{self.to_assignment_id}"


OccupiedBlock = JobBlock | TravelBlock
