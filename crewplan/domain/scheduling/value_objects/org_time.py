"""
Organization Time Context

Carries the organization's timezone and, optionally, a pinned "now" so that
day-key derivation never reads ambient process state.
"""

import functools
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ....core.observability import get_logger

logger = get_logger(__name__)


@functools.lru_cache(maxsize=64)
def _resolve_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown organization timezone, using UTC", timezone=name)
        return UTC


@dataclass(frozen=True)
class OrgTimeContext:
    """Timezone name plus optional reference instant for one organization."""

    timezone: str | None = None
    now: datetime | None = None

    @property
    def tz(self) -> tzinfo:
        """Resolve the zone, falling back to UTC when absent or unknown."""
        if not self.timezone:
            return UTC
        return _resolve_zone(self.timezone)

    def current_time(self) -> datetime:
        """The pinned ``now`` if one was given, else the wall clock (UTC)."""
        if self.now is not None:
            return self.now
        return datetime.now(UTC)


UTC_CONTEXT = OrgTimeContext()
