"""
Placement application service.

Binds the pure placement engine to organization settings: workday length,
grid size, travel threshold, timezone and capacity limits. Callers may
override the workday bounds per request; everything else comes from
configuration.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from ...core.config import Settings, settings
from ...core.observability import PLACEMENT_WINDOWS, get_logger, monitor_performance
from ...domain.scheduling.entities.assignment import Assignment
from ...domain.scheduling.services.capacity import (
    CrewCapacity,
    crew_capacity,
    detect_assignment_overlaps,
)
from ...domain.scheduling.services.day_keys import DayInput, day_key
from ...domain.scheduling.services.placement import (
    compute_placement_windows,
    resolve_snap_forward_placement,
    validate_proposed_placement,
)
from ...domain.scheduling.services.timeline import (
    build_occupied_timeline,
    crew_day_assignments,
    total_travel_minutes,
)
from ...domain.scheduling.services.travel import TravelLookup
from ...domain.scheduling.value_objects.org_time import OrgTimeContext
from ...domain.scheduling.value_objects.placement import PlacementCheck, SnapResult
from ...domain.scheduling.value_objects.time_window import (
    OccupiedBlock,
    PlacementWindow,
    WorkdayBounds,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class CrewDaySummary:
    """Load and conflicts of one crew-day."""

    crew_id: str
    day_key: str
    assignment_count: int
    capacity: CrewCapacity
    travel_minutes: int
    overlaps: dict[str, list[str]]


class PlacementService:
    """
    Settings-aware entry point to timeline and placement computations.

    All methods are stateless; one instance can serve concurrent requests.
    """

    def __init__(self, config: Settings | None = None) -> None:
        self._config = config or settings

    @property
    def context(self) -> OrgTimeContext:
        return OrgTimeContext(timezone=self._config.ORG_TIMEZONE)

    def workday(
        self, workday_start: int | None = None, workday_end: int | None = None
    ) -> WorkdayBounds:
        """Requested bounds, defaulting to the configured workday."""
        return WorkdayBounds(
            start_minutes=0 if workday_start is None else workday_start,
            end_minutes=(
                self._config.WORKDAY_LENGTH_MINUTES
                if workday_end is None
                else workday_end
            ),
        )

    def _engine_options(self) -> dict[str, int]:
        return {
            "grid_minutes": self._config.GRID_MINUTES,
            "min_travel_minutes": self._config.MIN_TRAVEL_MINUTES,
        }

    @monitor_performance("placement_windows")
    def find_windows(
        self,
        assignments: Sequence[Assignment],
        travel_lookup: TravelLookup,
        job_duration_minutes: int,
        crew_id: str,
        day: DayInput,
        exclude_assignment_id: str | None = None,
        workday: WorkdayBounds | None = None,
    ) -> list[PlacementWindow]:
        workday = workday or self.workday()
        windows = compute_placement_windows(
            assignments,
            travel_lookup,
            job_duration_minutes,
            crew_id,
            day,
            exclude_assignment_id,
            workday.start_minutes,
            workday.end_minutes,
            context=self.context,
            **self._engine_options(),
        )
        if self._config.ENABLE_METRICS:
            PLACEMENT_WINDOWS.observe(len(windows))
        return windows

    @monitor_performance("occupied_timeline")
    def occupied_timeline(
        self,
        assignments: Sequence[Assignment],
        travel_lookup: TravelLookup,
        crew_id: str,
        day: DayInput,
        exclude_assignment_id: str | None = None,
        workday: WorkdayBounds | None = None,
    ) -> list[OccupiedBlock]:
        workday = workday or self.workday()
        return build_occupied_timeline(
            assignments,
            travel_lookup,
            crew_id,
            day,
            exclude_assignment_id,
            context=self.context,
            workday_start=workday.start_minutes,
            workday_end=workday.end_minutes,
            **self._engine_options(),
        )

    @monitor_performance("validate_placement")
    def validate(
        self,
        assignments: Sequence[Assignment],
        travel_lookup: TravelLookup,
        start_minutes: int,
        job_duration_minutes: int,
        crew_id: str,
        day: DayInput,
        exclude_assignment_id: str | None = None,
        workday: WorkdayBounds | None = None,
    ) -> PlacementCheck:
        workday = workday or self.workday()
        check = validate_proposed_placement(
            assignments,
            travel_lookup,
            start_minutes,
            job_duration_minutes,
            crew_id,
            day,
            exclude_assignment_id,
            workday.start_minutes,
            workday.end_minutes,
            context=self.context,
            **self._engine_options(),
        )
        if not check.is_valid:
            logger.info(
                "Proposed placement rejected",
                crew_id=crew_id,
                start_minutes=start_minutes,
                duration=job_duration_minutes,
                reason=check.reason.value if check.reason else None,
            )
        return check

    @monitor_performance("snap_forward")
    def snap_forward(
        self,
        assignments: Sequence[Assignment],
        travel_lookup: TravelLookup,
        desired_start: int,
        job_duration_minutes: int,
        crew_id: str,
        day: DayInput,
        exclude_assignment_id: str | None = None,
        workday: WorkdayBounds | None = None,
    ) -> SnapResult:
        workday = workday or self.workday()
        blocks = self.occupied_timeline(
            assignments,
            travel_lookup,
            crew_id,
            day,
            exclude_assignment_id,
            workday,
        )
        return resolve_snap_forward_placement(
            desired_start, job_duration_minutes, blocks, workday.end_minutes
        )

    @monitor_performance("crew_day_summary")
    def summarize(
        self,
        assignments: Sequence[Assignment],
        travel_lookup: TravelLookup,
        crew_id: str,
        day: DayInput,
        workday: WorkdayBounds | None = None,
    ) -> CrewDaySummary:
        key = day_key(day, self.context)
        legs = crew_day_assignments(assignments, crew_id, key, context=self.context)
        blocks = self.occupied_timeline(
            legs, travel_lookup, crew_id, key, workday=workday
        )
        return CrewDaySummary(
            crew_id=crew_id,
            day_key=key,
            assignment_count=len(legs),
            capacity=crew_capacity(
                legs,
                self._config.NORMAL_CAPACITY_MINUTES,
                self._config.WARNING_CAPACITY_MINUTES,
            ),
            travel_minutes=total_travel_minutes(blocks),
            overlaps=detect_assignment_overlaps(legs),
        )
