"""Receipt field extraction: runs the field parsers and assembles a ParsedReceipt."""

import logging
from datetime import date
from typing import Any, Optional

from .classify import CategoryClassifier
from .models import (
    LANGUAGE_CURRENCY,
    Category,
    Language,
    ParsedReceipt,
    clamp_confidence,
)
from .parsers import AmountParser, DateParser, DescriptionParser
from .parsers.base import ReceiptContext
from .sources import DIGITAL_TEXT_CONFIDENCE, RecognitionResult

logger = logging.getLogger(__name__)

__all__ = [
    'DEFAULT_PARSER',
    'DIGITAL_TEXT_CONFIDENCE',
    'ReceiptParser',
    'parse_receipt_text',
    'resolve_language',
]


def resolve_language(language: Any) -> Language:
    """Resolve a language tag, falling back to English for unknown tags."""
    try:
        return Language.from_tag(language)
    except ValueError:
        logger.warning(f"Unsupported language {language!r}, falling back to English")
        return Language.ENGLISH


class ReceiptParser:
    """
    Turns recognized receipt text into a ParsedReceipt.

    Holds only stateless parsers and a read-only classifier, so one
    instance can be shared across threads.
    """

    def __init__(self, classifier: Optional[CategoryClassifier] = None):
        """Initialize with the field parsers and a category classifier."""
        self.date_parser = DateParser()
        self.amount_parser = AmountParser()
        self.description_parser = DescriptionParser()
        self.classifier = classifier or CategoryClassifier()

    def parse_receipt(self,
                      text: Optional[str],
                      confidence: float,
                      language: Any = Language.ENGLISH,
                      today: Optional[date] = None) -> ParsedReceipt:
        """
        Parse receipt text into a structured record.

        Args:
            text: Raw recognized text; None means recognition produced nothing
            confidence: Recognition confidence in [0, 100]
            language: Language tag selecting currency and pattern tiers
            today: Reference date for the date fallback and year rules

        Returns:
            ParsedReceipt; this method never raises
        """
        lang = resolve_language(language)
        if text is None:
            logger.warning("No text from recognition, returning default receipt")
            return self.parse_failure(lang, today=today)

        raw_text = str(text)
        confidence = clamp_confidence(confidence)
        try:
            context = ReceiptContext(full_text=raw_text, language=lang, today=today)

            amount_result = self.amount_parser.parse(context)
            date_result = self.date_parser.parse(context)
            description_result = self.description_parser.parse(context)
            category = self.classifier.classify(context.normalized_text)

            receipt = self._build(
                lang,
                amount=amount_result.value if amount_result else None,
                date_str=date_result.value,
                description=description_result.value if description_result else None,
                category=category,
                raw_text=raw_text,
                confidence=confidence,
            )
        except Exception as e:
            logger.exception(f"Receipt parsing failed: {e}")
            receipt = self._build(
                lang,
                amount=None,
                date_str=(today or date.today()).isoformat(),
                description=None,
                category=Category.MISCELLANEOUS,
                raw_text=raw_text,
                confidence=confidence,
            )

        logger.info(f"Parsed receipt: date={receipt.date}, "
                    f"amount={receipt.currency_symbol}{receipt.amount}, category={receipt.category.value}")
        return receipt

    def parse_failure(self, language: Any = Language.ENGLISH,
                      today: Optional[date] = None) -> ParsedReceipt:
        """Default receipt for when the recognition step itself failed."""
        return self._build(
            resolve_language(language),
            amount=None,
            date_str=(today or date.today()).isoformat(),
            description=None,
            category=Category.MISCELLANEOUS,
            raw_text="",
            confidence=0.0,
        )

    def parse_recognition(self,
                          result: Optional[RecognitionResult],
                          language: Any = Language.ENGLISH,
                          today: Optional[date] = None) -> ParsedReceipt:
        """Parse the output of an OCR or text-layer step; None signals failure."""
        if result is None:
            return self.parse_failure(language, today=today)
        return self.parse_receipt(result.text, result.confidence, language, today=today)

    def _build(self, language: Language, amount, date_str: str, description: Optional[str],
               category: Category, raw_text: str, confidence: float) -> ParsedReceipt:
        currency = LANGUAGE_CURRENCY[language]
        return ParsedReceipt(
            amount=amount,
            date=date_str,
            description=description,
            category=category,
            raw_text=raw_text,
            confidence=confidence,
            currency=currency.code,
            currency_symbol=currency.symbol,
            language=language,
        )


DEFAULT_PARSER = ReceiptParser()


def parse_receipt_text(text: Optional[str],
                       confidence: float,
                       language: Any = Language.ENGLISH,
                       today: Optional[date] = None) -> ParsedReceipt:
    """Parse receipt text with the shared default parser."""
    return DEFAULT_PARSER.parse_receipt(text, confidence, language, today=today)
