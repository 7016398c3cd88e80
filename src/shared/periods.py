"""Calendar reporting periods and their ``[start, now)`` windows."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from shared.errors import ValidationError


class Period(Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def is_aware(moment: datetime) -> bool:
    """True when ``moment`` carries a usable UTC offset."""
    return moment.tzinfo is not None and moment.tzinfo.utcoffset(moment) is not None


@dataclass(frozen=True)
class PeriodWindow:
    """Half-open time window ``[start, end)``."""

    period: Period
    start: datetime
    end: datetime

    def contains(self, moment: datetime | None) -> bool:
        """Naive moments cannot be placed on the timeline and are never inside."""
        if moment is None or not is_aware(moment):
            return False
        return self.start <= moment < self.end


def parse_period(value) -> Period:
    if isinstance(value, Period):
        return value
    try:
        return Period(str(value).lower())
    except ValueError:
        valid = ", ".join(p.value for p in Period)
        raise ValidationError({"period": [f"Unknown period '{value}'. Must be one of: {valid}"]}) from None


def period_start(period, now: datetime | None = None) -> datetime:
    """Return the start of the reporting period that ends at ``now``.

    week is a rolling 7 days; month, quarter and year snap to calendar
    boundaries in the timezone of ``now``.
    """
    period = parse_period(period)
    now = now or datetime.now(UTC)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period is Period.WEEK:
        return now - timedelta(days=7)
    if period is Period.MONTH:
        return midnight.replace(day=1)
    if period is Period.QUARTER:
        first_month = ((now.month - 1) // 3) * 3 + 1
        return midnight.replace(month=first_month, day=1)
    return midnight.replace(month=1, day=1)


def period_window(period, now: datetime | None = None) -> PeriodWindow:
    """Window for ``period`` ending at ``now``; a naive ``now`` is read as UTC."""
    period = parse_period(period)
    now = now or datetime.now(UTC)
    if not is_aware(now):
        now = now.replace(tzinfo=UTC)
    return PeriodWindow(period=period, start=period_start(period, now), end=now)
