"""Base classes for domain models and value objects."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Base class for value objects (immutable, defined by their values)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def __eq__(self, other: Any) -> bool:
        """Value objects are equal if all their attributes are equal."""
        if not isinstance(other, self.__class__):
            return False
        return self.model_dump() == other.model_dump()

    def __hash__(self) -> int:
        """Value objects with same values have same hash."""
        return hash(tuple(sorted((k, str(v)) for k, v in self.model_dump().items())))
