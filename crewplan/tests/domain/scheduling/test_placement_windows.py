"""
Unit tests for the placement window finder.

Covers the reference scenarios, gap edge cases, self-exclusion and travel.
"""

from crewplan.domain.scheduling.services.placement import (
    compute_placement_windows,
    find_free_windows,
    find_placement_window,
    is_time_in_placement_window,
)
from crewplan.domain.scheduling.value_objects.time_window import (
    JobBlock,
    PlacementWindow,
)

DAY = "2024-03-11"
CREW = "crew-1"


def spans(windows):
    return [(w.start_minutes, w.end_minutes) for w in windows]


class TestReferenceScenarios:
    """Test the canonical one-assignment day."""

    def test_short_job_gets_one_window_per_gap(self, make_assignment):
        """Test an hour-long job fits before and after the booked block."""
        assignments = [make_assignment("a", 120, 240)]

        windows = compute_placement_windows(
            assignments, {}, 60, CREW, DAY, workday_start=0, workday_end=720
        )

        assert spans(windows) == [(0, 60), (240, 300)]
        assert all(w.crew_id == CREW and w.date == DAY for w in windows)

    def test_long_job_only_fits_after(self, make_assignment):
        """Test a job longer than the leading gap only fits afterwards."""
        assignments = [make_assignment("a", 120, 240)]

        windows = compute_placement_windows(
            assignments, {}, 150, CREW, DAY, workday_start=0, workday_end=720
        )

        assert spans(windows) == [(240, 390)]


class TestGapHandling:
    """Test gap sizing, snapping and rejection."""

    def test_empty_day_gives_single_window(self):
        """Test a free day offers its first slot."""
        windows = compute_placement_windows([], {}, 50, CREW, DAY)

        assert spans(windows) == [(0, 60)]

    def test_workday_start_offset(self):
        """Test windows start at the workday start."""
        windows = compute_placement_windows(
            [], {}, 30, CREW, DAY, workday_start=60, workday_end=300
        )

        assert spans(windows) == [(60, 90)]

    def test_exact_fit_accepted(self, make_assignment):
        """Test a gap exactly as long as the job is used."""
        assignments = [make_assignment("a", 0, 60), make_assignment("b", 120, 180)]

        windows = compute_placement_windows(
            assignments, {}, 60, CREW, DAY, workday_end=240
        )

        assert spans(windows) == [(60, 120), (180, 240)]

    def test_snapped_end_past_gap_rejected(self, make_assignment):
        """Test a window is dropped rather than clipped when snapping overruns."""
        assignments = [make_assignment("a", 0, 60), make_assignment("b", 110, 180)]

        windows = compute_placement_windows(assignments, {}, 50, CREW, DAY)

        assert spans(windows) == [(180, 240)]

    def test_day_too_full(self, make_assignment):
        """Test no room is an empty list, not an error."""
        assignments = [make_assignment("a", 0, 700)]

        windows = compute_placement_windows(
            assignments, {}, 60, CREW, DAY, workday_end=720
        )

        assert windows == []

    def test_off_grid_block_end(self, make_assignment):
        """Test a gap after an off-grid block starts at the next grid line."""
        assignments = [make_assignment("a", 0, 50), make_assignment("b", 200, 260)]

        windows = compute_placement_windows(
            assignments, {}, 60, CREW, DAY, workday_end=360
        )

        assert spans(windows) == [(60, 120), (270, 330)]

    def test_other_crews_ignored(self, make_assignment):
        """Test another crew's bookings leave this crew's day free."""
        assignments = [make_assignment("a", 0, 720, crew_id="crew-2")]

        windows = compute_placement_windows(assignments, {}, 60, CREW, DAY)

        assert spans(windows) == [(0, 60)]

    def test_blocks_before_workday_start_skipped(self):
        """Test blocks entirely before the workday do not create gaps."""
        blocks = [
            JobBlock(start_minutes=0, end_minutes=30, assignment_id="early"),
            JobBlock(start_minutes=60, end_minutes=150, assignment_id="a"),
        ]

        windows = find_free_windows(
            blocks, 30, CREW, DAY, workday_start=45, workday_end=240
        )

        assert spans(windows) == [(150, 180)]

    def test_block_ending_at_off_grid_workday_start(self, make_assignment):
        """Test the leading window does not round back into an earlier block."""
        assignments = [make_assignment("early", 0, 20)]

        windows = compute_placement_windows(
            assignments, {}, 60, CREW, DAY, workday_start=20, workday_end=300
        )

        assert spans(windows) == [(30, 90)]

    def test_off_grid_workday_start_on_free_day(self):
        """Test a free day with an unaligned start opens on the grid line before it."""
        windows = compute_placement_windows(
            [], {}, 60, CREW, DAY, workday_start=20, workday_end=300
        )

        assert spans(windows) == [(15, 90)]


class TestSelfExclusion:
    """Test moving an assignment frees its own slot."""

    def test_excluded_slot_becomes_available(self, make_assignment):
        """Test the moved assignment's time is offered back."""
        assignments = [make_assignment("a", 100, 200)]

        without = compute_placement_windows(assignments, {}, 150, CREW, DAY)
        with_exclusion = compute_placement_windows(
            assignments, {}, 150, CREW, DAY, exclude_assignment_id="a"
        )

        assert spans(without) == [(210, 360)]
        assert spans(with_exclusion) == [(0, 150)]


class TestTravelAware:
    """Test travel buffers shrink the free gaps."""

    def test_travel_blocks_gap(self, make_assignment):
        """Test a job cannot be placed on top of travel time."""
        assignments = [make_assignment("a", 60, 120), make_assignment("b", 240, 300)]

        windows = compute_placement_windows(
            assignments, {("a", "b"): 30}, 60, CREW, DAY, workday_end=360
        )

        assert spans(windows) == [(0, 60), (150, 210), (300, 360)]

    def test_missing_travel_never_raises(self, make_assignment):
        """Test an empty lookup behaves like zero travel."""
        assignments = [make_assignment("a", 60, 120), make_assignment("b", 240, 300)]

        with_none = compute_placement_windows(assignments, None, 60, CREW, DAY)
        with_empty = compute_placement_windows(assignments, {}, 60, CREW, DAY)

        expected = [(0, 60), (120, 180), (300, 360)]
        assert spans(with_none) == spans(with_empty) == expected


class TestWindowLookup:
    """Test membership helpers over returned windows."""

    windows = [
        PlacementWindow(start_minutes=0, end_minutes=60, crew_id=CREW, date=DAY),
        PlacementWindow(start_minutes=240, end_minutes=300, crew_id=CREW, date=DAY),
    ]

    def test_find_window(self):
        """Test half-open containment."""
        assert find_placement_window(0, self.windows) == self.windows[0]
        assert find_placement_window(299, self.windows) == self.windows[1]
        assert find_placement_window(60, self.windows) is None

    def test_is_time_in_window(self):
        """Test the boolean companion."""
        assert is_time_in_placement_window(30, self.windows)
        assert not is_time_in_placement_window(300, self.windows)
        assert not is_time_in_placement_window(30, [])
