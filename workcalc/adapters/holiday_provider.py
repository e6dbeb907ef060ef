"""
Holiday provider backed by a built-in table of national holidays.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

import pendulum

from ..domain.models import Holiday

logger = logging.getLogger(__name__)

# (month, day, name) of holidays with a fixed date every year
FIXED_HOLIDAYS: Dict[str, List[Tuple[int, int, str]]] = {
    "EC": [
        (1, 1, "Año Nuevo"),
        (5, 1, "Día del Trabajador"),
        (5, 24, "Batalla del Pichincha"),
        (8, 10, "Primer Grito de Independencia"),
        (10, 9, "Independencia de Guayaquil"),
        (11, 2, "Día de los Difuntos"),
        (11, 3, "Independencia de Cuenca"),
        (12, 25, "Navidad"),
    ],
}

# Movable holidays, listed per year
MOVABLE_HOLIDAYS: Dict[str, Dict[int, List[Tuple[int, int, str]]]] = {
    "EC": {
        2025: [
            (3, 3, "Carnaval"),
            (3, 4, "Carnaval"),
            (4, 18, "Viernes Santo"),
        ],
    },
}


class HolidayProvider:
    """
    Supplies the holidays of a country for a given year.

    Built-in national holidays are merged with extra holidays supplied by
    the caller (usually from the config file). When two entries share a
    date, the extra entry wins.
    """

    def __init__(self, country: str = "EC", extra_holidays: Optional[Iterable[Holiday]] = None):
        self.country = country.upper()
        self.extra_holidays = list(extra_holidays or [])

        if self.country not in FIXED_HOLIDAYS:
            logger.warning(
                "No built-in holidays for country %s, only configured holidays are used",
                self.country
            )

    def get_holidays(self, year: int) -> List[Holiday]:
        """
        Return the holidays of a year, sorted by date.

        Args:
            year: Calendar year

        Returns:
            List of Holiday objects, one per date
        """
        by_date: Dict[str, Holiday] = {}

        for holiday in self._built_in_holidays(year):
            by_date.setdefault(holiday.date_key, holiday)

        for holiday in self.extra_holidays:
            if holiday.date.year == year:
                by_date[holiday.date_key] = holiday

        return [by_date[key] for key in sorted(by_date)]

    def get_holidays_between(self, start: date, end: date) -> List[Holiday]:
        """Holidays from start to end (both inclusive), across year boundaries."""
        start_day = pendulum.date(start.year, start.month, start.day)
        end_day = pendulum.date(end.year, end.month, end.day)

        holidays: List[Holiday] = []
        for year in range(start_day.year, end_day.year + 1):
            holidays.extend(
                holiday for holiday in self.get_holidays(year)
                if start_day <= holiday.date <= end_day
            )
        return holidays

    def _built_in_holidays(self, year: int) -> List[Holiday]:
        entries = list(FIXED_HOLIDAYS.get(self.country, []))
        entries.extend(MOVABLE_HOLIDAYS.get(self.country, {}).get(year, []))

        return [
            Holiday(
                date=pendulum.date(year, month, day),
                name=name,
                type="national",
                country=self.country,
                is_global=True
            )
            for month, day, name in entries
        ]
