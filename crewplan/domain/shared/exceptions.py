"""
Domain Exceptions

Custom exceptions for the crew scheduling domain, discriminated by error type.
The placement engine never raises these for business outcomes ("no room
today" is an empty window list); they cover caller mistakes and the opt-in
integrity checks.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    STATUS_TRANSITION = "status_transition"
    TIMELINE_INTEGRITY = "timeline_integrity"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidStatusTransitionError(DomainError):
    """Raised when an assignment is moved to a status its lifecycle forbids."""

    def __init__(self, assignment_id: str, current: str, target: str) -> None:
        details: dict[str, str | int | bool | None] = {
            "assignment_id": assignment_id,
            "current_status": current,
            "target_status": target,
        }
        super().__init__(
            f"Assignment {assignment_id} cannot move from {current} to {target}",
            ErrorType.STATUS_TRANSITION,
            details,
        )
        self.assignment_id = assignment_id


class TimelineIntegrityError(DomainError):
    """Raised by the opt-in overlap check when occupied blocks intersect."""

    def __init__(self, overlaps: list[tuple[str, str]]) -> None:
        self.overlaps = overlaps
        pairs = ", ".join(f"{a}/{b}" for a, b in overlaps)
        super().__init__(
            f"Occupied timeline has {len(overlaps)} overlapping pair(s): {pairs}",
            ErrorType.TIMELINE_INTEGRITY,
            {"overlap_count": len(overlaps), "pairs": pairs},
        )
