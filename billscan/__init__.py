"""billscan - Extract amount, date, description and category from receipt text."""

__version__ = "1.0.0"

from .models import Category, Language, ParsedReceipt, LANGUAGE_CURRENCY
from .parse import ReceiptParser, parse_receipt_text, DIGITAL_TEXT_CONFIDENCE
from .classify import CategoryClassifier
from .sources import RecognitionResult, PdfTextResult, extract_pdf_text, combine_pages
from .review import ReviewQueue, ReviewItem

__all__ = [
    'Category',
    'Language',
    'ParsedReceipt',
    'LANGUAGE_CURRENCY',
    'ReceiptParser',
    'parse_receipt_text',
    'DIGITAL_TEXT_CONFIDENCE',
    'CategoryClassifier',
    'RecognitionResult',
    'PdfTextResult',
    'extract_pdf_text',
    'combine_pages',
    'ReviewQueue',
    'ReviewItem',
]
