"""Domain enums for crew scheduling."""

from enum import Enum


class AssignmentStatus(str, Enum):
    """Assignment lifecycle status."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Check if the assignment is still expected to happen or is happening."""
        return self in {AssignmentStatus.SCHEDULED, AssignmentStatus.IN_PROGRESS}

    @property
    def is_terminal(self) -> bool:
        """Check if status is terminal (cannot transition further)."""
        return self in {AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}

    def can_transition_to(self, target_status: "AssignmentStatus") -> bool:
        """Check if assignment can transition from current status to target status."""
        valid_transitions = {
            AssignmentStatus.SCHEDULED: {
                AssignmentStatus.IN_PROGRESS,
                AssignmentStatus.CANCELLED,
            },
            AssignmentStatus.IN_PROGRESS: {
                AssignmentStatus.COMPLETED,
                AssignmentStatus.CANCELLED,
            },
            AssignmentStatus.COMPLETED: set(),  # Terminal state
            AssignmentStatus.CANCELLED: set(),  # Terminal state
        }
        return target_status in valid_transitions.get(self, set())


class BlockKind(str, Enum):
    """Discriminator for occupied timeline blocks."""

    JOB = "job"
    TRAVEL = "travel"


class TravelKind(str, Enum):
    """Which pair of stops a travel buffer connects."""

    BETWEEN = "between"  # job site to job site
    HOME_START = "home_start"  # home base to first job of a leg
    HOME_END = "home_end"  # job to home base


class PlacementReason(str, Enum):
    """Why a placement was moved or refused."""

    JOB = "job"
    TRAVEL = "travel"
    OUT_OF_BOUNDS = "out_of_bounds"

    @classmethod
    def from_block_kind(cls, kind: BlockKind) -> "PlacementReason":
        return cls.TRAVEL if kind is BlockKind.TRAVEL else cls.JOB


class CapacityStatus(str, Enum):
    """Crew-day load classification."""

    NORMAL = "normal"
    WARNING = "warning"
    OVER = "over"
