"""Column codecs shared by the SQLite stores."""

from datetime import UTC, date, datetime
from decimal import Decimal


def dec(value: str | int | float | None) -> Decimal:
    """Decimal from a TEXT money column."""
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def ts(value: str | None) -> datetime:
    """Timezone-aware datetime from an ISO column; naive values are read as UTC."""
    if not value:
        return datetime.now(UTC)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def day(value: str | None) -> date:
    if not value:
        return date.today()
    return date.fromisoformat(value[:10])
