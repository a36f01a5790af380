"""Tests for PDF text-layer extraction."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from billscan.sources import (
    DIGITAL_TEXT_CONFIDENCE,
    PdfTextResult,
    extract_pdf_text,
    is_pdf,
)
from pdfminer.layout import LTTextContainer


def text_box(text):
    box = MagicMock(spec=LTTextContainer)
    box.get_text.return_value = text
    return box


class TestPdfText:
    """Test suite for the embedded text reader."""

    def test_is_pdf(self):
        """Test suffix detection."""
        assert is_pdf(Path("scan.PDF"))
        assert not is_pdf(Path("scan.txt"))

    def test_text_layer_extracted(self):
        """Test reading text boxes from every page."""
        pages = [
            [text_box("EDEKA Markt Hamburg Altona\n"), object(), text_box("Gesamtbetrag: 15,50€\n")],
            [text_box("Vielen Dank fuer Ihren Einkauf 12.03.2024\n")],
        ]
        with patch("pdfminer.high_level.extract_pages", return_value=iter(pages)):
            result = extract_pdf_text(Path("receipt.pdf"))

        assert result.has_text
        assert result.page_count == 2
        assert result.pages[0] == "EDEKA Markt Hamburg Altona\nGesamtbetrag: 15,50€"
        assert result.text.endswith("12.03.2024")

        recognition = result.to_recognition()
        assert recognition.text == result.text
        assert recognition.confidence == DIGITAL_TEXT_CONFIDENCE

    def test_scanned_pdf_has_no_text(self):
        """Test that a short text layer means OCR is needed."""
        with patch("pdfminer.high_level.extract_pages", return_value=iter([[text_box("p. 1")]])):
            result = extract_pdf_text(Path("scan.pdf"))

        assert not result.has_text
        assert result.page_count == 1
        assert result.to_recognition() is None

    def test_unreadable_pdf(self):
        """Test that read errors give an empty result instead of raising."""
        with patch("pdfminer.high_level.extract_pages", side_effect=OSError("bad file")):
            result = extract_pdf_text(Path("broken.pdf"))

        assert result == PdfTextResult(text='', page_count=0)
        assert result.to_recognition() is None
