"""
Placement API Routes

Stateless endpoints over caller-supplied snapshots: the client sends the
crew-day's assignments and drive times, and gets back windows, the occupied
timeline, or a verdict on a proposed placement. Nothing is persisted.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self

from crewplan.application.services.placement_service import PlacementService
from crewplan.core.config import settings
from crewplan.domain.scheduling.entities.assignment import Assignment
from crewplan.domain.scheduling.services.day_keys import day_key
from crewplan.domain.scheduling.services.timeline import total_travel_minutes
from crewplan.domain.scheduling.services.travel import HOME_BASE, TravelTimeTable
from crewplan.domain.scheduling.value_objects.enums import (
    BlockKind,
    CapacityStatus,
    PlacementReason,
    TravelKind,
)
from crewplan.domain.scheduling.value_objects.time_window import (
    OccupiedBlock,
    PlacementWindow,
    TravelBlock,
    WorkdayBounds,
)

router = APIRouter(prefix="/placement", tags=["placement"])

service = PlacementService()


# Request/Response Models
class TravelEntry(BaseModel):
    """Drive time from one location key to another."""

    origin: str = Field(
        min_length=1, description=f'Location key, or "{HOME_BASE}" for home base'
    )
    destination: str = Field(min_length=1)
    minutes: int = Field(ge=0)


class CrewDayRequest(BaseModel):
    """Snapshot of one crew-day plus the drive times that apply to it."""

    crew_id: str = Field(min_length=1)
    day: str = Field(min_length=1, description="Day key or ISO-8601 timestamp")
    assignments: list[Assignment] = Field(default_factory=list)
    travel: list[TravelEntry] = Field(default_factory=list)
    exclude_assignment_id: str | None = None
    workday_start: int | None = Field(default=None, ge=0)
    workday_end: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_workday(self) -> Self:
        start = self.workday_start or 0
        end = (
            self.workday_end
            if self.workday_end is not None
            else settings.WORKDAY_LENGTH_MINUTES
        )
        if end <= start:
            raise ValueError("workday_end must be after workday_start")
        for assignment in self.assignments:
            if assignment.end_minutes > end:
                raise ValueError(
                    f"Assignment {assignment.id} ends at minute "
                    f"{assignment.end_minutes}, after the workday end ({end})"
                )
        return self

    def travel_table(self) -> TravelTimeTable:
        return TravelTimeTable.from_rows(
            (entry.origin, entry.destination, entry.minutes) for entry in self.travel
        )

    def bounds(self) -> WorkdayBounds:
        return service.workday(self.workday_start, self.workday_end)


class WindowsRequest(CrewDayRequest):
    job_duration_minutes: int = Field(gt=0)


class ValidatePlacementRequest(WindowsRequest):
    start_minutes: int = Field(ge=0)


class SnapPlacementRequest(WindowsRequest):
    desired_start: int = Field(ge=0)


class WindowResponse(BaseModel):
    crew_id: str
    date: str
    start_minutes: int
    end_minutes: int

    @classmethod
    def from_window(cls, window: PlacementWindow) -> "WindowResponse":
        return cls(
            crew_id=window.crew_id,
            date=window.date,
            start_minutes=window.start_minutes,
            end_minutes=window.end_minutes,
        )


class WindowsResponse(BaseModel):
    crew_id: str
    day_key: str
    job_duration_minutes: int
    windows: list[WindowResponse]


class BlockResponse(BaseModel):
    """One occupied block; travel fields are null for job blocks."""

    id: str
    kind: BlockKind
    start_minutes: int
    end_minutes: int
    assignment_id: str | None = None
    travel_kind: TravelKind | None = None
    from_assignment_id: str | None = None
    to_assignment_id: str | None = None
    travel_minutes: int | None = None

    @classmethod
    def from_block(cls, block: OccupiedBlock) -> "BlockResponse":
        if isinstance(block, TravelBlock):
            return cls(
                id=block.id,
                kind=block.kind,
                start_minutes=block.start_minutes,
                end_minutes=block.end_minutes,
                travel_kind=block.travel_kind,
                from_assignment_id=block.from_assignment_id,
                to_assignment_id=block.to_assignment_id,
                travel_minutes=block.travel_minutes,
            )
        return cls(
            id=block.id,
            kind=block.kind,
            start_minutes=block.start_minutes,
            end_minutes=block.end_minutes,
            assignment_id=block.assignment_id,
        )


class TimelineResponse(BaseModel):
    crew_id: str
    day_key: str
    blocks: list[BlockResponse]
    total_travel_minutes: int


class PlacementCheckResponse(BaseModel):
    is_valid: bool
    within_window: bool
    window: WindowResponse | None = None
    conflict: BlockResponse | None = None
    reason: PlacementReason | None = None


class SnapResponse(BaseModel):
    resolved_start: int | None
    snapped: bool
    reason: PlacementReason | None = None


class CrewDaySummaryResponse(BaseModel):
    crew_id: str
    day_key: str
    assignment_count: int
    total_minutes: int
    capacity_status: CapacityStatus
    travel_minutes: int
    overlaps: dict[str, list[str]]


@router.post("/windows", response_model=WindowsResponse)
def placement_windows(request: WindowsRequest):
    """Grid-aligned windows where a job of the requested length fits."""
    windows = service.find_windows(
        request.assignments,
        request.travel_table(),
        request.job_duration_minutes,
        request.crew_id,
        request.day,
        request.exclude_assignment_id,
        request.bounds(),
    )
    return WindowsResponse(
        crew_id=request.crew_id,
        day_key=day_key(request.day, service.context),
        job_duration_minutes=request.job_duration_minutes,
        windows=[WindowResponse.from_window(window) for window in windows],
    )


@router.post("/timeline", response_model=TimelineResponse)
def occupied_timeline(request: CrewDayRequest):
    """Jobs and travel buffers occupying the crew-day, in time order."""
    blocks = service.occupied_timeline(
        request.assignments,
        request.travel_table(),
        request.crew_id,
        request.day,
        request.exclude_assignment_id,
        request.bounds(),
    )
    return TimelineResponse(
        crew_id=request.crew_id,
        day_key=day_key(request.day, service.context),
        blocks=[BlockResponse.from_block(block) for block in blocks],
        total_travel_minutes=total_travel_minutes(blocks),
    )


@router.post("/validate", response_model=PlacementCheckResponse)
def validate_placement(request: ValidatePlacementRequest):
    """Check a proposed placement before it is written."""
    check = service.validate(
        request.assignments,
        request.travel_table(),
        request.start_minutes,
        request.job_duration_minutes,
        request.crew_id,
        request.day,
        request.exclude_assignment_id,
        request.bounds(),
    )
    return PlacementCheckResponse(
        is_valid=check.is_valid,
        within_window=check.within_window,
        window=WindowResponse.from_window(check.window) if check.window else None,
        conflict=BlockResponse.from_block(check.conflict) if check.conflict else None,
        reason=check.reason,
    )


@router.post("/snap", response_model=SnapResponse)
def snap_placement(request: SnapPlacementRequest):
    """Move a dropped job forward past anything it would collide with."""
    result = service.snap_forward(
        request.assignments,
        request.travel_table(),
        request.desired_start,
        request.job_duration_minutes,
        request.crew_id,
        request.day,
        request.exclude_assignment_id,
        request.bounds(),
    )
    return SnapResponse(
        resolved_start=result.resolved_start,
        snapped=result.snapped,
        reason=result.reason,
    )


@router.post("/summary", response_model=CrewDaySummaryResponse)
def crew_day_summary(request: CrewDayRequest):
    """Booked minutes, capacity status, travel and overlaps for the crew-day."""
    summary = service.summarize(
        request.assignments,
        request.travel_table(),
        request.crew_id,
        request.day,
        request.bounds(),
    )
    return CrewDaySummaryResponse(
        crew_id=summary.crew_id,
        day_key=summary.day_key,
        assignment_count=summary.assignment_count,
        total_minutes=summary.capacity.total_minutes,
        capacity_status=summary.capacity.status,
        travel_minutes=summary.travel_minutes,
        overlaps=summary.overlaps,
    )
