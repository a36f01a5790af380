"""Date parsing for US, ISO, German and Chinese date formats."""

import logging
from datetime import date
from typing import Optional, Tuple

from .base import BaseParser, ParseResult, ReceiptContext
from .patterns import DATE_PATTERNS, MONTH_ABBREVIATIONS, DateLayout, DatePattern

logger = logging.getLogger(__name__)

MIN_YEAR = 2000


def expand_two_digit_year(year: int) -> int:
    """YY > 50 belongs to the 1900s, anything else to the 2000s."""
    return 1900 + year if year > 50 else 2000 + year


class DateParser(BaseParser):
    """Extract the transaction date; falls back to the reference date."""

    def parse(self, context: ReceiptContext) -> ParseResult:
        """
        Extract and normalize a date from receipt text.

        Patterns run in declared order and every match of a pattern is
        tried before moving on; the first one that validates wins.

        Args:
            context: Receipt context with full text, language and reference date

        Returns:
            ParseResult with an ISO date string, never None
        """
        for pattern in DATE_PATTERNS:
            if not pattern.active_for(context.language):
                continue
            for match in pattern.regex.finditer(context.full_text):
                components = self._components(pattern, match.groups(), context.today)
                if components is None or not self._validate(components, context.today):
                    self.logger.debug(f"Invalid date in text: {match.group()}")
                    continue
                year, month, day = components
                result = ParseResult(
                    value=f"{year:04d}-{month:02d}-{day:02d}",
                    source_text=match.group(),
                    metadata={'pattern': pattern.name, 'layout': pattern.layout.value},
                )
                self._log_result(result)
                return result

        self.logger.warning("No valid date found in text, using reference date")
        return ParseResult(
            value=context.today.isoformat(),
            metadata={'pattern': 'today_fallback'},
        )

    def _components(self, pattern: DatePattern, groups: Tuple[str, ...],
                    today: date) -> Optional[Tuple[int, int, int]]:
        """Read (year, month, day) from match groups according to the layout."""
        layout = pattern.layout
        if layout == DateLayout.MD_CURRENT_YEAR:
            month, day = groups
            return today.year, int(month), int(day)

        if layout == DateLayout.MONTH_NAME_DY:
            name, day, year = groups
            month = MONTH_ABBREVIATIONS.get(name[:3].lower())
            if month is None:
                return None
            return int(year), month, int(day)

        if layout == DateLayout.YMD:
            year, month, day = groups
        elif layout == DateLayout.MDY:
            month, day, year = groups
        else:
            day, month, year = groups

        year_int = int(year)
        if len(year) == 2:
            year_int = expand_two_digit_year(year_int)
        return year_int, int(month), int(day)

    def _validate(self, components: Tuple[int, int, int], today: date) -> bool:
        """Range checks plus a real calendar date (no 30 February)."""
        year, month, day = components
        if not (1 <= month <= 12 and 1 <= day <= 31):
            return False
        if not (MIN_YEAR <= year <= today.year + 1):
            return False
        try:
            date(year, month, day)
        except ValueError:
            return False
        return True
