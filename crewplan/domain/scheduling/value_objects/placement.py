"""Results of placement checks and snap-forward resolution."""

from dataclasses import dataclass

from .enums import PlacementReason
from .time_window import OccupiedBlock, PlacementWindow


@dataclass(frozen=True)
class PlacementCheck:
    """
    Outcome of checking a proposed ``[start, start + duration)`` placement.

    ``is_valid`` means the placement collides with nothing and stays inside
    the workday. ``within_window`` means it also sits inside one of the
    windows the finder offered for that duration; server-side writes that
    must match what the UI offered should require both.
    """

    is_valid: bool
    within_window: bool
    window: PlacementWindow | None = None
    conflict: OccupiedBlock | None = None
    reason: PlacementReason | None = None


@dataclass(frozen=True)
class SnapResult:
    """Where a dropped job ends up after being pushed past occupied blocks."""

    resolved_start: int | None
    snapped: bool
    reason: PlacementReason | None = None

    @property
    def is_placeable(self) -> bool:
        return self.resolved_start is not None
