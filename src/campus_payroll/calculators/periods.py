"""Payroll month parsing and working-day arithmetic."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta

from campus_payroll.calculators.types import PayrollValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class PayrollMonth:
    """A calendar month in ``YYYY-MM`` form."""

    year: int
    month: int

    @classmethod
    def parse(cls, value: str) -> PayrollMonth:
        """Parse a ``YYYY-MM`` string, raising PayrollValidationError if malformed."""
        if not isinstance(value, str):
            raise PayrollValidationError(f"Month must be a string, got {value!r}", "month")
        match = _MONTH_RE.match(value.strip())
        if match is None:
            raise PayrollValidationError(
                f"Malformed month {value!r}: expected YYYY-MM", "month"
            )
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12 or year < 1:
            raise PayrollValidationError(f"Month out of range: {value!r}", "month")
        return cls(year=year, month=month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def __contains__(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def days(self) -> list[date]:
        """All calendar dates in the month."""
        start = self.first_day
        return [start + timedelta(days=i) for i in range((self.last_day - start).days + 1)]

    def working_days(self) -> int:
        """Count of Monday-Friday dates. No holiday calendar is applied."""
        return sum(1 for day in self.days() if day.weekday() < 5)


def working_days_in_month(month: str) -> int:
    """Count Monday-Friday dates in a ``YYYY-MM`` month."""
    return PayrollMonth.parse(month).working_days()
