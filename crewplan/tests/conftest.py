from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from crewplan.domain.scheduling.entities.assignment import Assignment
from crewplan.main import app

DAY = "2024-03-11"
CREW = "crew-1"


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_assignment() -> Callable[..., Assignment]:
    """Factory for assignments on the default crew-day."""

    def _make(
        id: str,
        start: int,
        end: int,
        *,
        crew_id: str = CREW,
        date: str = DAY,
        **extra,
    ) -> Assignment:
        return Assignment(
            id=id,
            crew_id=crew_id,
            date=date,
            start_minutes=start,
            end_minutes=end,
            **extra,
        )

    return _make
