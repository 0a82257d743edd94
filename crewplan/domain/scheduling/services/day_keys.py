"""
Day-key normalization.

Assignments are grouped per organization-local calendar day. A day key is the
``YYYY-MM-DD`` rendering of a timestamp in the organization's timezone.
"""

from datetime import UTC, date, datetime, timedelta

from ..value_objects.org_time import UTC_CONTEXT, OrgTimeContext

DayInput = datetime | date | str


def _parse(value: str) -> datetime | date:
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def day_key(timestamp: DayInput, context: OrgTimeContext | None = None) -> str:
    """
    Return the org-local ``YYYY-MM-DD`` key for a timestamp.

    Naive datetimes are taken as UTC. Plain dates (and date-only strings)
    are already calendar days and map to themselves. A missing context means
    UTC.
    """
    context = context or UTC_CONTEXT

    if isinstance(timestamp, str):
        timestamp = _parse(timestamp)

    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return timestamp.astimezone(context.tz).date().isoformat()

    return timestamp.isoformat()


def today_key(context: OrgTimeContext | None = None) -> str:
    """Day key for the context's ``now``."""
    context = context or UTC_CONTEXT
    return day_key(context.current_time(), context)


def day_keys_back(
    now: datetime, days: int, context: OrgTimeContext | None = None
) -> set[str]:
    """Keys for ``now``'s org-local day and the ``days - 1`` days before it."""
    if days <= 0:
        return set()
    today = date.fromisoformat(day_key(now, context))
    return {(today - timedelta(days=offset)).isoformat() for offset in range(days)}
