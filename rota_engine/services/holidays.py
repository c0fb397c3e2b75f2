"""
Static holiday calendar.

Dates are civil, jurisdiction-local dates; no time component and no timezone
conversion is ever applied. Unknown jurisdictions or dates outside the shipped
range are simply not holidays.
"""
from datetime import date
from typing import Dict, FrozenSet, List, Optional

from rota_engine.core.config import settings

HOLIDAY_DATA_VERSION = "2024.1"

# England & Wales bank holidays (gov.uk), including substitute days
_GB_ENG = frozenset(date.fromisoformat(d) for d in (
    "2024-01-01", "2024-03-29", "2024-04-01", "2024-05-06", "2024-05-27", "2024-08-26", "2024-12-25", "2024-12-26",
    "2025-01-01", "2025-04-18", "2025-04-21", "2025-05-05", "2025-05-26", "2025-08-25", "2025-12-25", "2025-12-26",
    "2026-01-01", "2026-04-03", "2026-04-06", "2026-05-04", "2026-05-25", "2026-08-31", "2026-12-25", "2026-12-28",
))

HOLIDAYS: Dict[str, FrozenSet[date]] = {
    "GB-ENG": _GB_ENG,
    "GB-WLS": _GB_ENG,
}


class HolidayCalendar:
    """Read-only lookup over one jurisdiction's holiday set."""

    version = HOLIDAY_DATA_VERSION

    def __init__(self, jurisdiction: Optional[str] = None):
        self.jurisdiction = jurisdiction or settings.holiday_jurisdiction
        self._dates = HOLIDAYS.get(self.jurisdiction, frozenset())

    def is_holiday(self, day: date) -> bool:
        return day in self._dates

    def holidays_between(self, start: date, end: date) -> List[date]:
        """Holidays within [start, end], ascending."""
        return sorted(d for d in self._dates if start <= d <= end)

    def __contains__(self, day: date) -> bool:
        return self.is_holiday(day)


def is_holiday(day: date, jurisdiction: Optional[str] = None) -> bool:
    return HolidayCalendar(jurisdiction).is_holiday(day)
