"""
Placement Window Finder

Walks a crew-day's occupied timeline and reports where a job of a given
length can be inserted. Windows are grid aligned and never overlap a job or
travel block. "No room" is an empty list, never an exception.
"""

from collections.abc import Iterable, Sequence

from ....core.observability import get_logger
from ..entities.assignment import Assignment
from ..value_objects.enums import PlacementReason
from ..value_objects.org_time import OrgTimeContext
from ..value_objects.placement import PlacementCheck, SnapResult
from ..value_objects.time_window import OccupiedBlock, PlacementWindow
from .day_keys import DayInput
from .day_keys import day_key as normalize_day_key
from .grid import DEFAULT_GRID_MINUTES, snap_end, snap_start
from .timeline import DEFAULT_WORKDAY_MINUTES, build_occupied_timeline, find_overlaps
from .travel import DEFAULT_MIN_TRAVEL_MINUTES, TravelLookup

logger = get_logger(__name__)


def _fit_gap(
    gap_start: int,
    gap_end: int,
    duration: int,
    grid: int,
    after_block: bool,
) -> tuple[int, int] | None:
    """Earliest grid-aligned ``(start, end)`` for ``duration`` inside the gap."""
    if gap_end - gap_start < duration:
        return None

    if after_block:
        # Rounding down would reach back into the block that ends here.
        start = snap_end(gap_start, grid)
        end = snap_end(start + duration, grid)
    else:
        start = snap_start(gap_start, grid)
        end = snap_end(gap_start + duration, grid)

    if end > gap_end:
        return None
    return start, end


def find_free_windows(
    blocks: Sequence[OccupiedBlock],
    job_duration_minutes: int,
    crew_id: str,
    day_key: str,
    *,
    workday_start: int = 0,
    workday_end: int = DEFAULT_WORKDAY_MINUTES,
    grid_minutes: int = DEFAULT_GRID_MINUTES,
) -> list[PlacementWindow]:
    """
    Scan an occupied timeline for windows of ``job_duration_minutes``.

    One window per free gap, at the earliest grid-aligned fit. A window whose
    snapped end would spill past the gap is rejected rather than clipped.
    """
    windows: list[PlacementWindow] = []

    def consider(gap_start: int, gap_end: int, after_block: bool) -> None:
        fit = _fit_gap(
            gap_start,
            min(gap_end, workday_end),
            job_duration_minutes,
            grid_minutes,
            after_block,
        )
        if fit is None:
            logger.debug(
                "Gap too small for job",
                gap_start=gap_start,
                gap_end=gap_end,
                duration=job_duration_minutes,
            )
            return
        windows.append(
            PlacementWindow(
                start_minutes=fit[0],
                end_minutes=fit[1],
                crew_id=crew_id,
                date=day_key,
            )
        )

    free_start = workday_start
    after_block = False
    leading_edge = snap_start(workday_start, grid_minutes)
    for block in sorted(blocks, key=lambda b: b.start_minutes):
        if block.end_minutes <= free_start:
            # A block ending inside the snapped leading slot still bounds it.
            if block.end_minutes > leading_edge:
                after_block = True
            continue
        consider(free_start, block.start_minutes, after_block)
        free_start = max(free_start, block.end_minutes)
        after_block = True

    consider(free_start, workday_end, after_block)
    return windows


def compute_placement_windows(
    assignments: Iterable[Assignment],
    travel_lookup: TravelLookup,
    job_duration_minutes: int,
    crew_id: str,
    day_key: DayInput,
    exclude_assignment_id: str | None = None,
    workday_start: int = 0,
    workday_end: int = DEFAULT_WORKDAY_MINUTES,
    *,
    context: OrgTimeContext | None = None,
    grid_minutes: int = DEFAULT_GRID_MINUTES,
    min_travel_minutes: int = DEFAULT_MIN_TRAVEL_MINUTES,
) -> list[PlacementWindow]:
    """
    Compute insertion windows for a job on one crew-day.

    Args:
        assignments: Assignment snapshot, any crews and days
        travel_lookup: Drive times between location keys; may be empty
        job_duration_minutes: Length of the job to place
        crew_id: Crew to place the job on
        day_key: Org-local day, as a key or anything ``day_key`` accepts
        exclude_assignment_id: Assignment being moved, whose time counts as free
        workday_start: Start of the bookable day in minutes
        workday_end: End of the bookable day in minutes
        context: Organization time context for day-key derivation
        grid_minutes: Grid the windows are aligned to
        min_travel_minutes: Shortest gap that gets a travel block

    Returns:
        Windows in start order, at most one per free gap
    """
    key = normalize_day_key(day_key, context)
    blocks = build_occupied_timeline(
        assignments,
        travel_lookup,
        crew_id,
        key,
        exclude_assignment_id,
        context=context,
        workday_start=workday_start,
        workday_end=workday_end,
        grid_minutes=grid_minutes,
        min_travel_minutes=min_travel_minutes,
    )

    overlaps = find_overlaps(blocks)
    if overlaps:
        logger.warning(
            "Occupied timeline has overlapping blocks",
            crew_id=crew_id,
            day_key=key,
            overlaps=overlaps,
        )

    windows = find_free_windows(
        blocks,
        job_duration_minutes,
        crew_id,
        key,
        workday_start=workday_start,
        workday_end=workday_end,
        grid_minutes=grid_minutes,
    )
    logger.debug(
        "Computed placement windows",
        crew_id=crew_id,
        day_key=key,
        duration=job_duration_minutes,
        windows=len(windows),
    )
    return windows


def find_placement_window(
    minutes: int, windows: Iterable[PlacementWindow]
) -> PlacementWindow | None:
    """First window containing ``minutes`` (half-open), if any."""
    for window in windows:
        if window.contains(minutes):
            return window
    return None


def is_time_in_placement_window(
    minutes: int, windows: Iterable[PlacementWindow]
) -> bool:
    return find_placement_window(minutes, windows) is not None


def _first_conflict(
    start: int, duration: int, blocks: Iterable[OccupiedBlock]
) -> OccupiedBlock | None:
    end = start + duration
    for block in blocks:
        if block.overlaps(start, end):
            return block
    return None


def is_placement_valid(
    start_minutes: int, duration_minutes: int, blocks: Iterable[OccupiedBlock]
) -> bool:
    """True if ``[start, start + duration)`` overlaps no occupied block."""
    return _first_conflict(start_minutes, duration_minutes, blocks) is None


def validate_proposed_placement(
    assignments: Iterable[Assignment],
    travel_lookup: TravelLookup,
    start_minutes: int,
    job_duration_minutes: int,
    crew_id: str,
    day_key: DayInput,
    exclude_assignment_id: str | None = None,
    workday_start: int = 0,
    workday_end: int = DEFAULT_WORKDAY_MINUTES,
    *,
    context: OrgTimeContext | None = None,
    grid_minutes: int = DEFAULT_GRID_MINUTES,
    min_travel_minutes: int = DEFAULT_MIN_TRAVEL_MINUTES,
) -> PlacementCheck:
    """
    Check a proposed placement the way a server-side write would.

    The placement must stay inside the workday and clear every occupied
    block; ``within_window`` additionally reports whether it lies inside one
    of the windows offered for this duration.
    """
    assignments = list(assignments)
    key = normalize_day_key(day_key, context)
    blocks = build_occupied_timeline(
        assignments,
        travel_lookup,
        crew_id,
        key,
        exclude_assignment_id,
        context=context,
        workday_start=workday_start,
        workday_end=workday_end,
        grid_minutes=grid_minutes,
        min_travel_minutes=min_travel_minutes,
    )
    windows = find_free_windows(
        blocks,
        job_duration_minutes,
        crew_id,
        key,
        workday_start=workday_start,
        workday_end=workday_end,
        grid_minutes=grid_minutes,
    )

    end_minutes = start_minutes + job_duration_minutes
    window = next(
        (
            candidate
            for candidate in windows
            if candidate.start_minutes <= start_minutes
            and end_minutes <= candidate.end_minutes
        ),
        None,
    )

    # The leading window may begin on the grid line at or before workday_start.
    earliest_start = snap_start(workday_start, grid_minutes)
    if start_minutes < earliest_start or end_minutes > workday_end:
        return PlacementCheck(
            is_valid=False,
            within_window=window is not None,
            window=window,
            reason=PlacementReason.OUT_OF_BOUNDS,
        )

    conflict = _first_conflict(start_minutes, job_duration_minutes, blocks)
    if conflict is not None:
        return PlacementCheck(
            is_valid=False,
            within_window=window is not None,
            window=window,
            conflict=conflict,
            reason=PlacementReason.from_block_kind(conflict.kind),
        )

    return PlacementCheck(
        is_valid=True, within_window=window is not None, window=window
    )


def resolve_snap_forward_placement(
    desired_start: int,
    duration_minutes: int,
    blocks: Iterable[OccupiedBlock],
    workday_end: int = DEFAULT_WORKDAY_MINUTES,
) -> SnapResult:
    """
    Push a dropped job forward until it clears every occupied block.

    Each overlapping block moves the start to that block's end; ``reason``
    names the kind of the last block that caused a move. If the job would
    then run past ``workday_end`` there is no placement.
    """
    start = desired_start
    reason: PlacementReason | None = None

    for block in sorted(blocks, key=lambda b: b.start_minutes):
        if block.end_minutes <= start:
            continue
        if block.start_minutes >= start + duration_minutes:
            break
        start = block.end_minutes
        reason = PlacementReason.from_block_kind(block.kind)

    if start + duration_minutes > workday_end:
        return SnapResult(
            resolved_start=None,
            snapped=start != desired_start,
            reason=PlacementReason.OUT_OF_BOUNDS,
        )

    return SnapResult(
        resolved_start=start, snapped=start != desired_start, reason=reason
    )
