"""
Timeline Builder

Merges one crew-day's jobs and the travel between them into a single ordered
list of occupied blocks. Everything here is a pure function of its inputs.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from ....core.observability import get_logger
from ...shared.exceptions import TimelineIntegrityError
from ..entities.assignment import Assignment
from ..value_objects.enums import BlockKind
from ..value_objects.org_time import OrgTimeContext
from ..value_objects.time_window import JobBlock, OccupiedBlock, TravelBlock
from .day_keys import DayInput
from .day_keys import day_key as normalize_day_key
from .grid import DEFAULT_GRID_MINUTES
from .travel import DEFAULT_MIN_TRAVEL_MINUTES, TravelLookup, resolve_travel_buffers

logger = get_logger(__name__)

DEFAULT_WORKDAY_MINUTES = 12 * 60

CrewDayKey = tuple[str, str]


def _chronological(assignment: Assignment) -> tuple[int, int, str]:
    return (assignment.start_minutes, assignment.end_minutes, assignment.id)


def _block_order(block: OccupiedBlock) -> tuple[int, int, int]:
    # Travel sorts ahead of a job starting at the same minute.
    return (
        block.start_minutes,
        0 if block.kind is BlockKind.TRAVEL else 1,
        block.end_minutes,
    )


def crew_day_assignments(
    assignments: Iterable[Assignment],
    crew_id: str,
    day_key: DayInput,
    exclude_assignment_id: str | None = None,
    *,
    context: OrgTimeContext | None = None,
) -> list[Assignment]:
    """Assignments of one crew-day in chronological order."""
    key = normalize_day_key(day_key, context)
    selected = [
        assignment
        for assignment in assignments
        if assignment.crew_id == crew_id
        and assignment.id != exclude_assignment_id
        and assignment.day_key(context) == key
    ]
    return sorted(selected, key=_chronological)


def build_occupied_timeline(
    assignments: Iterable[Assignment],
    travel_lookup: TravelLookup,
    crew_id: str,
    day_key: DayInput,
    exclude_assignment_id: str | None = None,
    *,
    context: OrgTimeContext | None = None,
    workday_start: int = 0,
    workday_end: int = DEFAULT_WORKDAY_MINUTES,
    grid_minutes: int = DEFAULT_GRID_MINUTES,
    min_travel_minutes: int = DEFAULT_MIN_TRAVEL_MINUTES,
) -> list[OccupiedBlock]:
    """
    Build the occupied timeline of one crew-day.

    The excluded assignment (the one being dragged or moved) is left out
    entirely, together with any travel it would have implied.

    Args:
        assignments: Assignment snapshot, any crews and days
        travel_lookup: Drive times between location keys
        crew_id: Crew whose day is built
        day_key: Org-local day, as a key or anything ``day_key`` accepts
        exclude_assignment_id: Assignment to ignore
        context: Organization time context for day-key derivation
        workday_start: Start of the bookable day in minutes
        workday_end: End of the bookable day in minutes
        grid_minutes: Grid used to round travel up
        min_travel_minutes: Shortest gap that gets a travel block

    Returns:
        Job and travel blocks ascending by start; travel precedes the job it
        leads into
    """
    legs = crew_day_assignments(
        assignments, crew_id, day_key, exclude_assignment_id, context=context
    )
    travel = resolve_travel_buffers(
        legs,
        travel_lookup,
        workday_start=workday_start,
        workday_end=workday_end,
        grid_minutes=grid_minutes,
        min_travel_minutes=min_travel_minutes,
    )
    jobs = [
        JobBlock(
            start_minutes=assignment.start_minutes,
            end_minutes=assignment.end_minutes,
            assignment_id=assignment.id,
        )
        for assignment in legs
    ]
    blocks: list[OccupiedBlock] = sorted([*jobs, *travel], key=_block_order)

    logger.debug(
        "Built occupied timeline",
        crew_id=crew_id,
        day_key=str(day_key),
        jobs=len(jobs),
        travel_blocks=len(travel),
        excluded=exclude_assignment_id,
    )
    return blocks


def group_by_crew_day(
    assignments: Iterable[Assignment], context: OrgTimeContext | None = None
) -> dict[CrewDayKey, list[Assignment]]:
    """
    Group assignments by ``(crew_id, day_key)``.

    Assignments without a crew are skipped. Each group is sorted
    chronologically.
    """
    groups: dict[CrewDayKey, list[Assignment]] = defaultdict(list)
    for assignment in assignments:
        if not assignment.crew_id:
            continue
        groups[(assignment.crew_id, assignment.day_key(context))].append(assignment)

    return {key: sorted(group, key=_chronological) for key, group in groups.items()}


def job_blocks(blocks: Sequence[OccupiedBlock]) -> list[JobBlock]:
    return [block for block in blocks if isinstance(block, JobBlock)]


def travel_blocks(blocks: Sequence[OccupiedBlock]) -> list[TravelBlock]:
    return [block for block in blocks if isinstance(block, TravelBlock)]


def total_travel_minutes(blocks: Sequence[OccupiedBlock]) -> int:
    return sum(block.duration_minutes for block in travel_blocks(blocks))


def find_overlaps(blocks: Sequence[OccupiedBlock]) -> list[tuple[str, str]]:
    """Return id pairs of blocks whose intervals intersect."""
    ordered = sorted(blocks, key=_block_order)
    overlaps: list[tuple[str, str]] = []
    for index, block in enumerate(ordered):
        for other in ordered[index + 1 :]:
            if other.start_minutes >= block.end_minutes:
                break
            if block.overlaps(other.start_minutes, other.end_minutes):
                overlaps.append((block.id, other.id))
    return overlaps


def assert_non_overlapping(blocks: Sequence[OccupiedBlock]) -> None:
    """Raise ``TimelineIntegrityError`` if any two blocks overlap."""
    overlaps = find_overlaps(blocks)
    if overlaps:
        raise TimelineIntegrityError(overlaps)
