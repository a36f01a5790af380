"""Tests for DescriptionParser component."""

import pytest
from billscan.models import Language
from billscan.parsers.base import ReceiptContext
from billscan.parsers.description_parser import DescriptionParser, title_case


class TestDescriptionParser:
    """Test suite for DescriptionParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = DescriptionParser()

    def _parse(self, text, language=Language.ENGLISH):
        return self.parser.parse(ReceiptContext(full_text=text, language=language))

    def test_first_line_title_cased(self):
        """Test that the merchant line is title-cased."""
        result = self._parse("STARBUCKS COFFEE\n01/15/2024\nTOTAL: $4.50")

        assert result.value == "Starbucks Coffee"
        assert result.metadata['line'] == 0

    def test_skips_digit_and_punctuation_lines(self):
        """Test that number-only and separator-only lines are skipped."""
        text = "12345\n*****\n--==--\n*** WELCOME ***\nTotal 3.00"
        result = self._parse(text)

        assert result.value == "Welcome"
        assert result.source_text == "*** WELCOME ***"
        assert result.metadata['line'] == 3

    def test_blank_lines_ignored(self):
        """Test that blank lines do not count as candidates."""
        result = self._parse("\n\n   \nedeka markt\n")

        assert result.value == "Edeka Markt"
        assert result.metadata['line'] == 0

    def test_whitespace_collapsed(self):
        """Test that inner whitespace runs become one space."""
        result = self._parse("Joe's    Diner\t Downtown")

        assert result.value == "Joe's Diner Downtown"

    def test_single_character_line_skipped(self):
        """Test that lines shorter than two characters after cleanup are skipped."""
        result = self._parse("A\n#B#\nCorner Shop")

        assert result.value == "Corner Shop"

    def test_cjk_line_kept_verbatim(self):
        """Test that a line containing CJK ideographs is not case-folded."""
        result = self._parse("星巴克咖啡 Nanjing RD\n合计：35.00", Language.CHINESE_SIMPLIFIED)

        assert result.value == "星巴克咖啡 Nanjing RD"

    def test_only_first_five_lines_considered(self):
        """Test that a merchant line after the fifth line is never used."""
        text = "1\n22\n333\n4444\n55555\nLate Merchant"
        result = self._parse(text)

        assert result is None

    def test_empty_text(self):
        """Test handling of empty text."""
        assert self._parse("") is None

    @pytest.mark.parametrize("raw, expected", [
        ("mcDONALD's", "Mcdonald's"),
        ("REWE city", "Rewe City"),
        ("a  b", "A  B"),
        ("", ""),
    ])
    def test_title_case(self, raw, expected):
        """Test title_case on single-space boundaries."""
        assert title_case(raw) == expected
