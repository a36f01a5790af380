"""Boundary types for the recognition step that feeds the receipt parser.

The OCR engine itself lives outside this package; it is represented only by
the (text, confidence) pair it produces, or None when it failed. Digital
PDFs are read through their text layer with pdfminer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Confidence assigned to text read from a PDF text layer instead of OCR
DIGITAL_TEXT_CONFIDENCE = 95.0

# A text layer shorter than this is treated as a scanned (image-only) PDF
MIN_TEXT_LAYER_CHARS = 50


@dataclass(frozen=True)
class RecognitionResult:
    """Final output of an OCR or text-extraction step."""
    text: str
    confidence: float


@dataclass(frozen=True)
class PdfTextResult:
    """Text layer of a PDF, page by page."""
    text: str
    page_count: int
    pages: Tuple[str, ...] = ()
    has_text: bool = False

    def to_recognition(self) -> Optional[RecognitionResult]:
        """High-trust recognition result, or None when there is no usable text layer."""
        if not self.has_text:
            return None
        return RecognitionResult(text=self.text, confidence=DIGITAL_TEXT_CONFIDENCE)


def is_pdf(path: Path) -> bool:
    return Path(path).suffix.lower() == '.pdf'


def extract_pdf_text(pdf_path: Path) -> PdfTextResult:
    """
    Extract the embedded text layer of a PDF.

    Args:
        pdf_path: Path to PDF file

    Returns:
        PdfTextResult; has_text is False for scanned PDFs and on read errors
    """
    try:
        from pdfminer.high_level import extract_pages
        from pdfminer.layout import LTTextContainer

        pages = []
        for page_layout in extract_pages(str(pdf_path)):
            page_text = ''.join(
                element.get_text() for element in page_layout if isinstance(element, LTTextContainer)
            )
            pages.append(page_text.strip())
    except Exception as e:
        logger.error(f"Failed to extract embedded text from {pdf_path}: {e}")
        return PdfTextResult(text='', page_count=0)

    text = '\n'.join(pages).strip()
    has_text = len(text) > MIN_TEXT_LAYER_CHARS
    if has_text:
        logger.info(f"{Path(pdf_path).name} has embedded text ({len(pages)} page(s)), extracting directly")
    else:
        logger.info(f"{Path(pdf_path).name} has no usable text layer, OCR required")
    return PdfTextResult(text=text, page_count=len(pages), pages=tuple(pages), has_text=has_text)


def combine_pages(pages: Sequence[Optional[RecognitionResult]]) -> Optional[RecognitionResult]:
    """
    Merge per-page recognition results into one.

    Page texts are joined with newlines and confidences averaged; a failed
    page (None) counts as empty text with confidence 0.

    Returns:
        Combined result, or None when there are no pages or every page failed
    """
    if not pages or all(page is None for page in pages):
        return None

    texts = [page.text if page is not None else '' for page in pages]
    confidences = [page.confidence if page is not None else 0.0 for page in pages]
    return RecognitionResult(
        text='\n'.join(texts),
        confidence=sum(confidences) / len(confidences),
    )
