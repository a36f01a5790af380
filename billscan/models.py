"""Core data types shared by the extractors and the orchestrator."""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Spend categories. Declaration order is the classifier tie-break order."""
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    GROCERIES = "Groceries"
    TRANSPORTATION = "Transportation"
    DINING_OUT = "Dining Out"
    ENTERTAINMENT = "Entertainment"
    TRAVEL = "Travel"
    CLOTHING_AND_PERSONAL_CARE = "Clothing & Personal Care"
    MISCELLANEOUS = "Miscellaneous"

    @classmethod
    def from_name(cls, name: str) -> "Category":
        """Look up a category by display value or member name."""
        for category in cls:
            if name in (category.value, category.name):
                return category
        raise ValueError(f"Unknown category: {name!r}")


class Language(str, Enum):
    """Supported receipt languages, valued by their OCR language code."""
    ENGLISH = "eng"
    CHINESE_SIMPLIFIED = "chi_sim"
    GERMAN = "deu"

    @classmethod
    def from_tag(cls, tag: Any) -> "Language":
        """
        Resolve a language tag.

        Accepts a Language, its code ('eng'), its member name ('GERMAN')
        or a common alias ('en', 'zh-cn', 'de').

        Raises:
            ValueError: if the tag is not recognised
        """
        if isinstance(tag, Language):
            return tag
        key = str(tag).strip().lower().replace('_', '-')
        for language in cls:
            if key in (language.value.replace('_', '-'), language.name.lower().replace('_', '-')):
                return language
        if key in _LANGUAGE_ALIASES:
            return _LANGUAGE_ALIASES[key]
        raise ValueError(f"Unsupported language tag: {tag!r}")


_LANGUAGE_ALIASES = {
    'en': Language.ENGLISH,
    'en-us': Language.ENGLISH,
    'english': Language.ENGLISH,
    'zh': Language.CHINESE_SIMPLIFIED,
    'zh-cn': Language.CHINESE_SIMPLIFIED,
    'zh-hans': Language.CHINESE_SIMPLIFIED,
    'chinese': Language.CHINESE_SIMPLIFIED,
    'de': Language.GERMAN,
    'de-de': Language.GERMAN,
    'german': Language.GERMAN,
}


@dataclass(frozen=True)
class CurrencyInfo:
    """ISO currency code and display symbol."""
    code: str
    symbol: str


LANGUAGE_CURRENCY = MappingProxyType({
    Language.CHINESE_SIMPLIFIED: CurrencyInfo('CNY', '¥'),
    Language.ENGLISH: CurrencyInfo('USD', '$'),
    Language.GERMAN: CurrencyInfo('EUR', '€'),
})


def clamp_confidence(confidence: Any) -> float:
    """Clamp a caller-supplied confidence into [0, 100]; NaN and junk become 0."""
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric confidence {confidence!r}, using 0")
        return 0.0
    if math.isnan(value):
        logger.warning("NaN confidence, using 0")
        return 0.0
    if value < 0.0 or value > 100.0:
        clamped = min(100.0, max(0.0, value))
        logger.warning(f"Confidence {value} outside [0, 100], clamped to {clamped}")
        return clamped
    return value


@dataclass(frozen=True)
class ParsedReceipt:
    """Structured result of interpreting one receipt's text."""
    amount: Optional[Decimal]
    date: str
    description: Optional[str]
    category: Category
    raw_text: str
    confidence: float
    currency: str
    currency_symbol: str
    language: Language = Language.ENGLISH

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation; the amount is kept as a decimal string."""
        return {
            'amount': str(self.amount) if self.amount is not None else None,
            'date': self.date,
            'description': self.description,
            'category': self.category.value,
            'raw_text': self.raw_text,
            'confidence': self.confidence,
            'currency': self.currency,
            'currency_symbol': self.currency_symbol,
            'language': self.language.value,
        }
