"""Scheduling value objects."""

from .enums import (
    AssignmentStatus,
    BlockKind,
    CapacityStatus,
    PlacementReason,
    TravelKind,
)
from .org_time import UTC_CONTEXT, OrgTimeContext
from .placement import PlacementCheck, SnapResult
from .time_window import (
    JobBlock,
    MinuteInterval,
    OccupiedBlock,
    PlacementWindow,
    TravelBlock,
    WorkdayBounds,
)

__all__ = [
    "AssignmentStatus",
    "BlockKind",
    "CapacityStatus",
    "JobBlock",
    "MinuteInterval",
    "OccupiedBlock",
    "OrgTimeContext",
    "PlacementCheck",
    "PlacementReason",
    "PlacementWindow",
    "SnapResult",
    "TravelBlock",
    "TravelKind",
    "UTC_CONTEXT",
    "WorkdayBounds",
]
