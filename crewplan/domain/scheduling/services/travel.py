"""
Travel Buffer Resolver

Turns the chronological stops of one crew-day into travel blocks, using a
caller-supplied table of drive times between location pairs. Drive times are
never computed here; a pair the table does not know yields no buffer.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ....core.observability import get_logger
from ..entities.assignment import Assignment
from ..value_objects.enums import TravelKind
from ..value_objects.time_window import TravelBlock
from .grid import DEFAULT_GRID_MINUTES, snap_duration

logger = get_logger(__name__)

HOME_BASE = "@home"
DEFAULT_MIN_TRAVEL_MINUTES = 15


@runtime_checkable
class TravelTimeLookup(Protocol):
    """Anything that can answer drive time between two location keys."""

    def minutes_between(self, origin: str, destination: str) -> int | None: ...


@dataclass(frozen=True)
class TravelTimeTable:
    """
    Precomputed drive times keyed by ``(origin, destination)``.

    Entries are directional; ``A -> B`` says nothing about ``B -> A``.
    """

    entries: Mapping[tuple[str, str], int] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[str, str, int]]) -> "TravelTimeTable":
        return cls(
            {(origin, destination): minutes for origin, destination, minutes in rows}
        )

    def minutes_between(self, origin: str, destination: str) -> int | None:
        return self.entries.get((origin, destination))

    def __len__(self) -> int:
        return len(self.entries)


TravelLookup = TravelTimeLookup | Mapping[tuple[str, str], int] | None


def lookup_travel_minutes(lookup: TravelLookup, origin: str, destination: str) -> int:
    """Drive time for a pair, or 0 when the lookup has no answer."""
    if lookup is None:
        minutes = None
    elif isinstance(lookup, Mapping):
        minutes = lookup.get((origin, destination))
    else:
        minutes = lookup.minutes_between(origin, destination)

    if minutes is None:
        logger.debug(
            "No travel time for location pair",
            origin=origin,
            destination=destination,
        )
        return 0
    return max(0, int(minutes))


@dataclass
class _BufferBuilder:
    lookup: TravelLookup
    grid_minutes: int
    min_travel_minutes: int
    blocks: list[TravelBlock] = field(default_factory=list)

    def leg_minutes(self, origin: str, destination: str) -> tuple[int, int]:
        raw = lookup_travel_minutes(self.lookup, origin, destination)
        return raw, snap_duration(raw, self.grid_minutes)

    def emit(
        self,
        start: int,
        end: int,
        kind: TravelKind,
        raw_minutes: int,
        from_id: str | None,
        to_id: str | None,
    ) -> int:
        length = end - start
        if length <= 0 or length < self.min_travel_minutes:
            return 0
        self.blocks.append(
            TravelBlock(
                start_minutes=start,
                end_minutes=end,
                travel_kind=kind,
                from_assignment_id=from_id,
                to_assignment_id=to_id,
                travel_minutes=raw_minutes,
            )
        )
        return length


def resolve_travel_buffers(
    assignments: Sequence[Assignment],
    lookup: TravelLookup,
    *,
    workday_start: int = 0,
    workday_end: int,
    grid_minutes: int = DEFAULT_GRID_MINUTES,
    min_travel_minutes: int = DEFAULT_MIN_TRAVEL_MINUTES,
) -> list[TravelBlock]:
    """
    Build travel blocks for chronologically sorted assignments of one crew-day.

    Rules:
        * Looked-up minutes are rounded up to the grid, then clamped to the
          free gap they must fit into.
        * Site-to-site travel starts at the earlier job's end and is only
          added when the gap is at least ``min_travel_minutes`` and neither
          side of the junction is anchored at home base.
        * ``end_at_home`` adds a home-bound leg after the job, ending by the
          next job's start (or ``workday_end``). If another job follows, the
          outbound leg to it comes out of whatever time remains.
        * ``start_at_home`` adds an outbound leg ending at the job's start,
          starting no earlier than the previous job's end (or
          ``workday_start``).
        * Legs shorter than ``min_travel_minutes`` are dropped.

    Args:
        assignments: One crew-day's assignments, sorted by start time
        lookup: Drive-time table; missing pairs count as zero minutes
        workday_start: Earliest minute an outbound leg may start
        workday_end: Latest minute a home-bound leg may end
        grid_minutes: Grid size used to round travel up
        min_travel_minutes: Shortest gap worth a travel block

    Returns:
        Travel blocks in chronological order
    """
    builder = _BufferBuilder(lookup, grid_minutes, min_travel_minutes)
    outbound_handled: set[str] = set()

    for index, current in enumerate(assignments):
        previous = assignments[index - 1] if index > 0 else None
        following = (
            assignments[index + 1] if index + 1 < len(assignments) else None
        )

        if current.start_at_home and current.id not in outbound_handled:
            raw, snapped = builder.leg_minutes(HOME_BASE, current.location_key)
            floor = previous.end_minutes if previous else workday_start
            leg_start = max(floor, current.start_minutes - snapped)
            builder.emit(
                leg_start,
                current.start_minutes,
                TravelKind.HOME_START,
                raw,
                None,
                current.id,
            )

        if current.end_at_home:
            ceiling = following.start_minutes if following else workday_end
            gap = max(0, ceiling - current.end_minutes)
            raw, snapped = builder.leg_minutes(current.location_key, HOME_BASE)
            home_leg = min(snapped, gap)
            used = builder.emit(
                current.end_minutes,
                current.end_minutes + home_leg,
                TravelKind.HOME_END,
                raw,
                current.id,
                None,
            )

            if following is not None:
                # The crew leaves home again for the next job.
                remaining = gap - used
                raw, snapped = builder.leg_minutes(
                    HOME_BASE, following.location_key
                )
                out_leg = min(snapped, remaining)
                builder.emit(
                    following.start_minutes - out_leg,
                    following.start_minutes,
                    TravelKind.HOME_START,
                    raw,
                    None,
                    following.id,
                )
                outbound_handled.add(following.id)
            continue

        if following is None or following.start_at_home:
            continue

        gap = following.start_minutes - current.end_minutes
        if gap <= 0 or gap < min_travel_minutes:
            continue
        raw, snapped = builder.leg_minutes(
            current.location_key, following.location_key
        )
        builder.emit(
            current.end_minutes,
            current.end_minutes + min(snapped, gap),
            TravelKind.BETWEEN,
            raw,
            current.id,
            following.id,
        )

    return sorted(
        builder.blocks, key=lambda block: (block.start_minutes, block.end_minutes)
    )
