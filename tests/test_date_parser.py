"""Tests for DateParser component."""

from datetime import date

import pytest
from billscan.models import Language
from billscan.parsers.base import ReceiptContext
from billscan.parsers.date_parser import DateParser, expand_two_digit_year

TODAY = date(2025, 6, 15)


class TestDateParser:
    """Test suite for DateParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = DateParser()

    def _parse(self, text, language=Language.ENGLISH, today=TODAY):
        return self.parser.parse(ReceiptContext(full_text=text, language=language, today=today))

    def test_us_date(self):
        """Test MM/DD/YYYY."""
        result = self._parse("TOTAL: $42.50\nStarbucks\n01/15/2024")

        assert result.value == "2024-01-15"
        assert result.metadata['pattern'] == 'us_numeric'

    def test_iso_dash(self):
        """Test YYYY-MM-DD."""
        result = self._parse("Invoice 2024-03-09")

        assert result.value == "2024-03-09"
        assert result.metadata['pattern'] == 'iso_dash'

    def test_iso_slash(self):
        """Test YYYY/MM/DD."""
        result = self._parse("2024/12/25\nStarbucks")

        assert result.value == "2024-12-25"
        assert result.metadata['pattern'] == 'iso_slash'

    def test_us_short_year(self):
        """Test MM/DD/YY."""
        result = self._parse("Date: 03/07/24")

        assert result.value == "2024-03-07"
        assert result.metadata['pattern'] == 'us_short_year'

    def test_month_name(self):
        """Test English month names."""
        assert self._parse("Mar 5, 2024").value == "2024-03-05"
        assert self._parse("September 30 2024").value == "2024-09-30"

    def test_german_date(self):
        """Test DD.MM.YYYY for German receipts."""
        result = self._parse("EDEKA\n12.03.2024", Language.GERMAN)

        assert result.value == "2024-03-12"
        assert result.metadata['pattern'] == 'german_numeric'

    def test_german_date_inactive_for_english(self):
        """Test that dotted dates are only read for German receipts."""
        result = self._parse("EDEKA\n12.03.2024", Language.ENGLISH)

        assert result.value == TODAY.isoformat()
        assert result.metadata['pattern'] == 'today_fallback'

    def test_german_short_year(self):
        """Test DD.MM.YY."""
        result = self._parse("Datum 05.11.23", Language.GERMAN)

        assert result.value == "2023-11-05"
        assert result.metadata['pattern'] == 'german_short_year'

    def test_chinese_full_date(self):
        """Test YYYY年MM月DD日."""
        result = self._parse("开票日期：2024年3月8日", Language.CHINESE_SIMPLIFIED)

        assert result.value == "2024-03-08"
        assert result.metadata['pattern'] == 'chinese_full'

    def test_chinese_month_day_uses_reference_year(self):
        """Test MM月DD日 with the year taken from the reference date."""
        result = self._parse("10月1日 星巴克", Language.CHINESE_SIMPLIFIED)

        assert result.value == "2025-10-01"
        assert result.metadata['pattern'] == 'chinese_month_day'

    def test_two_digit_year_rule(self):
        """Test the two-digit year pivot."""
        assert expand_two_digit_year(0) == 2000
        assert expand_two_digit_year(24) == 2024
        assert expand_two_digit_year(50) == 2050
        assert expand_two_digit_year(51) == 1951
        assert expand_two_digit_year(99) == 1999

    def test_nineteen_hundreds_short_year_rejected(self):
        """Test that 99 expands to 1999 and fails the year range."""
        result = self._parse("01/02/99")

        assert result.value == TODAY.isoformat()

    @pytest.mark.parametrize("text", ["2024-13-01", "2024-01-32", "2024-02-30", "02/29/2023"])
    def test_invalid_dates_rejected(self, text):
        """Test that impossible dates never validate."""
        result = self._parse(text)

        assert result.value == TODAY.isoformat()
        assert result.metadata['pattern'] == 'today_fallback'

    def test_invalid_match_does_not_block_later_match(self):
        """Test that an invalid first match falls through to the next one."""
        assert self._parse("2024-02-30\n2024-02-28").value == "2024-02-28"
        assert self._parse("2024-13-45\n03/15/2024").value == "2024-03-15"

    def test_year_range(self):
        """Test the [2000, reference year + 1] window."""
        assert self._parse("1999-12-31").value == TODAY.isoformat()
        assert self._parse("2026-01-01").value == "2026-01-01"
        assert self._parse("2027-01-01").value == TODAY.isoformat()

    def test_leap_day(self):
        """Test 29 February in a leap year."""
        assert self._parse("02/29/2024").value == "2024-02-29"

    def test_no_date_found(self):
        """Test the fallback to the reference date."""
        result = self._parse("¥1,500\nコーヒー代\n合計")

        assert result is not None
        assert result.value == "2025-06-15"

    @pytest.mark.parametrize("year, month, day", [
        (2000, 1, 1),
        (2012, 2, 29),
        (2024, 12, 31),
        (2026, 7, 4),
    ])
    def test_native_format_round_trip(self, year, month, day):
        """Test that each locale's native format reproduces the ISO date."""
        expected = f"{year:04d}-{month:02d}-{day:02d}"
        cases = [
            (expected, Language.ENGLISH),
            (f"{month:02d}/{day:02d}/{year}", Language.ENGLISH),
            (f"{day:02d}.{month:02d}.{year}", Language.GERMAN),
            (f"{year}年{month}月{day}日", Language.CHINESE_SIMPLIFIED),
        ]

        for text, language in cases:
            assert self._parse(text, language).value == expected, f"Failed for {text}"
