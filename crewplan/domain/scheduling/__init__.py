"""
Crew Scheduling Domain

Assignments of field crews, the occupied timeline of a crew-day (jobs plus
travel between sites) and the search for placement windows.

Everything here is pure and stateless; callers supply the snapshot and the
drive-time table on every call.
"""

# Entities
from .entities import Assignment

# Domain Services
from .services.capacity import CrewCapacity, crew_capacity, detect_assignment_overlaps
from .services.day_keys import day_key, day_keys_back, today_key
from .services.grid import GridSnapper, snap_duration, snap_end, snap_start
from .services.placement import (
    compute_placement_windows,
    find_placement_window,
    is_placement_valid,
    is_time_in_placement_window,
    resolve_snap_forward_placement,
    validate_proposed_placement,
)
from .services.timeline import (
    assert_non_overlapping,
    build_occupied_timeline,
    find_overlaps,
    group_by_crew_day,
)
from .services.travel import HOME_BASE, TravelTimeTable, resolve_travel_buffers

# Value Objects
from .value_objects import (
    AssignmentStatus,
    BlockKind,
    CapacityStatus,
    JobBlock,
    OccupiedBlock,
    OrgTimeContext,
    PlacementCheck,
    PlacementReason,
    PlacementWindow,
    SnapResult,
    TravelBlock,
    TravelKind,
    WorkdayBounds,
)

__all__ = [
    # Entities
    "Assignment",
    # Domain Services
    "CrewCapacity",
    "GridSnapper",
    "HOME_BASE",
    "TravelTimeTable",
    "assert_non_overlapping",
    "build_occupied_timeline",
    "compute_placement_windows",
    "crew_capacity",
    "day_key",
    "day_keys_back",
    "detect_assignment_overlaps",
    "find_overlaps",
    "find_placement_window",
    "group_by_crew_day",
    "is_placement_valid",
    "is_time_in_placement_window",
    "resolve_snap_forward_placement",
    "resolve_travel_buffers",
    "snap_duration",
    "snap_end",
    "snap_start",
    "today_key",
    "validate_proposed_placement",
    # Value Objects
    "AssignmentStatus",
    "BlockKind",
    "CapacityStatus",
    "JobBlock",
    "OccupiedBlock",
    "OrgTimeContext",
    "PlacementCheck",
    "PlacementReason",
    "PlacementWindow",
    "SnapResult",
    "TravelBlock",
    "TravelKind",
    "WorkdayBounds",
]
