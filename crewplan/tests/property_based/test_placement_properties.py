"""
Property-Based Testing for the Placement Engine

Using Hypothesis to generate crew-days (possibly messy: overlapping jobs,
home-anchored legs, partial travel tables) and check the guarantees every
returned placement window must satisfy.
"""

from hypothesis import given, settings, strategies as st

from crewplan.domain.scheduling.entities.assignment import Assignment
from crewplan.domain.scheduling.services.grid import snap_end
from crewplan.domain.scheduling.services.placement import (
    compute_placement_windows,
    is_placement_valid,
    resolve_snap_forward_placement,
    validate_proposed_placement,
)
from crewplan.domain.scheduling.services.timeline import build_occupied_timeline
from crewplan.domain.scheduling.services.travel import HOME_BASE

DAY = "2024-03-11"
CREW = "crew-1"
GRID = 15


# Custom Hypothesis strategies for domain-specific types
@st.composite
def workdays(draw):
    """Generate grid-aligned workday bounds."""
    start = draw(st.integers(min_value=0, max_value=8)) * GRID
    length = draw(st.integers(min_value=4, max_value=48)) * GRID
    return start, start + length


@st.composite
def off_grid_workdays(draw):
    """Generate workday bounds that need not sit on the grid."""
    start = draw(st.integers(min_value=0, max_value=180))
    length = draw(st.integers(min_value=30, max_value=600))
    return start, start + length


@st.composite
def assignment_lists(draw, workday_end=720, max_size=6):
    """Generate one crew's assignments, overlaps and off-grid times included."""
    count = draw(st.integers(min_value=0, max_value=max_size))
    assignments = []
    for index in range(count):
        start = draw(st.integers(min_value=0, max_value=workday_end - 1))
        length = draw(st.integers(min_value=1, max_value=180))
        assignments.append(
            Assignment(
                id=f"a{index}",
                crew_id=CREW,
                date=DAY,
                start_minutes=start,
                end_minutes=min(workday_end, start + length),
                start_at_home=draw(st.booleans()),
                end_at_home=draw(st.booleans()),
            )
        )
    return assignments


@st.composite
def travel_tables(draw, size=6):
    """Generate a partial drive-time table over the generated locations."""
    locations = [HOME_BASE] + [f"a{index}" for index in range(size)]
    pairs = st.tuples(st.sampled_from(locations), st.sampled_from(locations))
    return draw(
        st.dictionaries(pairs, st.integers(min_value=0, max_value=90), max_size=12)
    )


durations = st.integers(min_value=1, max_value=240)


class TestPlacementWindowProperties:
    """Guarantees that hold for every computed window."""

    @given(
        assignments=assignment_lists(),
        lookup=travel_tables(),
        duration=durations,
    )
    @settings(max_examples=300, deadline=None)
    def test_windows_never_overlap_occupied_blocks(self, assignments, lookup, duration):
        """Property: no window intersects a job or travel block."""
        blocks = build_occupied_timeline(assignments, lookup, CREW, DAY)
        windows = compute_placement_windows(assignments, lookup, duration, CREW, DAY)

        for window in windows:
            assert is_placement_valid(
                window.start_minutes, window.duration_minutes, blocks
            )

    @given(
        assignments=assignment_lists(),
        lookup=travel_tables(),
        duration=durations,
        bounds=workdays(),
    )
    @settings(max_examples=300, deadline=None)
    def test_windows_aligned_sufficient_and_inside_workday(
        self, assignments, lookup, duration, bounds
    ):
        """Property: windows sit on the grid, fit the job and stay in bounds."""
        workday_start, workday_end = bounds
        windows = compute_placement_windows(
            [a for a in assignments if a.end_minutes <= workday_end],
            lookup,
            duration,
            CREW,
            DAY,
            workday_start=workday_start,
            workday_end=workday_end,
        )

        for window in windows:
            assert window.start_minutes % GRID == 0
            assert window.end_minutes % GRID == 0
            assert window.duration_minutes >= duration
            assert workday_start <= window.start_minutes
            assert window.end_minutes <= workday_end

        starts = [w.start_minutes for w in windows]
        assert starts == sorted(starts)
        for earlier, later in zip(windows, windows[1:]):
            assert earlier.end_minutes <= later.start_minutes

    @given(
        bounds=off_grid_workdays(),
        lookup=travel_tables(),
        duration=durations,
        data=st.data(),
    )
    @settings(max_examples=300, deadline=None)
    def test_off_grid_workday_windows_are_free_and_accepted(
        self, bounds, lookup, duration, data
    ):
        """Property: with unaligned bounds, offered windows stay free and validate."""
        workday_start, workday_end = bounds
        assignments = data.draw(assignment_lists(workday_end=workday_end))
        blocks = build_occupied_timeline(
            assignments,
            lookup,
            CREW,
            DAY,
            workday_start=workday_start,
            workday_end=workday_end,
        )
        windows = compute_placement_windows(
            assignments,
            lookup,
            duration,
            CREW,
            DAY,
            workday_start=workday_start,
            workday_end=workday_end,
        )

        for window in windows:
            assert is_placement_valid(
                window.start_minutes, window.duration_minutes, blocks
            )
            check = validate_proposed_placement(
                assignments,
                lookup,
                window.start_minutes,
                duration,
                CREW,
                DAY,
                workday_start=workday_start,
                workday_end=workday_end,
            )
            assert check.is_valid
            assert check.within_window

    @given(bounds=workdays(), duration=durations)
    @settings(max_examples=200, deadline=None)
    def test_empty_day_offers_exactly_one_window(self, bounds, duration):
        """Property: a free day yields its first slot when the job fits."""
        workday_start, workday_end = bounds
        windows = compute_placement_windows(
            [],
            {},
            duration,
            CREW,
            DAY,
            workday_start=workday_start,
            workday_end=workday_end,
        )

        expected_end = snap_end(workday_start + duration)
        if expected_end <= workday_end:
            assert len(windows) == 1
            assert windows[0].start_minutes == workday_start
            assert windows[0].end_minutes == expected_end
        else:
            assert windows == []

    @given(
        assignments=assignment_lists(),
        lookup=travel_tables(),
        duration=durations,
        data=st.data(),
    )
    @settings(max_examples=200, deadline=None)
    def test_excluding_assignment_equals_removing_it(
        self, assignments, lookup, duration, data
    ):
        """Property: excluding A gives the same windows as a snapshot without A."""
        if not assignments:
            return
        moved = data.draw(st.sampled_from(assignments))
        remaining = [a for a in assignments if a.id != moved.id]

        excluded = compute_placement_windows(
            assignments, lookup, duration, CREW, DAY, exclude_assignment_id=moved.id
        )
        removed = compute_placement_windows(remaining, lookup, duration, CREW, DAY)

        assert excluded == removed

    @given(assignments=assignment_lists(), duration=durations)
    @settings(max_examples=200, deadline=None)
    def test_missing_travel_data_is_zero_travel(self, assignments, duration):
        """Property: no table, an empty table and a None lookup agree."""
        empty = compute_placement_windows(assignments, {}, duration, CREW, DAY)
        absent = compute_placement_windows(assignments, None, duration, CREW, DAY)

        assert empty == absent


class TestSnapForwardProperties:
    """Guarantees of snap-forward resolution."""

    @given(
        assignments=assignment_lists(),
        lookup=travel_tables(),
        duration=durations,
        desired=st.integers(min_value=0, max_value=719),
    )
    @settings(max_examples=300, deadline=None)
    def test_resolved_start_is_free_and_not_earlier(
        self, assignments, lookup, duration, desired
    ):
        """Property: a resolved start never collides and never moves backwards."""
        blocks = build_occupied_timeline(assignments, lookup, CREW, DAY)

        result = resolve_snap_forward_placement(
            desired, duration, blocks, workday_end=720
        )

        if result.resolved_start is not None:
            assert result.resolved_start >= desired
            assert result.resolved_start + duration <= 720
            assert is_placement_valid(result.resolved_start, duration, blocks)
            assert result.snapped == (result.resolved_start != desired)
