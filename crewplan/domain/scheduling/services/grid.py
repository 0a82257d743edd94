"""
Grid snapping.

The schedule is laid out on a fixed grid (15 minutes unless configured
otherwise). Starts round down to a grid line, ends round up, so a snapped
interval always covers the raw one.
"""

from dataclasses import dataclass

DEFAULT_GRID_MINUTES = 15


def snap_start(minutes: int, grid: int = DEFAULT_GRID_MINUTES) -> int:
    return (minutes // grid) * grid


def snap_end(minutes: int, grid: int = DEFAULT_GRID_MINUTES) -> int:
    return -(-minutes // grid) * grid


def snap_duration(minutes: int, grid: int = DEFAULT_GRID_MINUTES) -> int:
    """Round a positive duration up to whole grid slots; non-positive gives 0."""
    if minutes <= 0:
        return 0
    return snap_end(minutes, grid)


@dataclass(frozen=True)
class GridSnapper:
    """Snapping helpers bound to one grid size."""

    grid_minutes: int = DEFAULT_GRID_MINUTES

    def __post_init__(self):
        if self.grid_minutes <= 0:
            raise ValueError(
                f"Grid size must be positive, got {self.grid_minutes} minutes"
            )

    def snap_start(self, minutes: int) -> int:
        return snap_start(minutes, self.grid_minutes)

    def snap_end(self, minutes: int) -> int:
        return snap_end(minutes, self.grid_minutes)

    def snap_duration(self, minutes: int) -> int:
        return snap_duration(minutes, self.grid_minutes)

    def is_aligned(self, minutes: int) -> bool:
        return minutes % self.grid_minutes == 0
