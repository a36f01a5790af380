"""Base classes for receipt field parsers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar
import logging

from ..models import Language

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class ParseResult:
    """Value produced by a parser plus where it came from."""
    value: Any
    source_text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ReceiptContext:
    """Normalized views of one receipt's text, shared by all parsers."""
    full_text: str
    language: Language = Language.ENGLISH
    today: Optional[date] = None
    lines: Tuple[str, ...] = None
    normalized_text: str = None

    def __post_init__(self):
        # frozen dataclass: derived fields are filled through object.__setattr__
        if self.today is None:
            object.__setattr__(self, 'today', date.today())
        if self.lines is None:
            lines = [line.strip() for line in self.full_text.split('\n')] if self.full_text else []
            object.__setattr__(self, 'lines', tuple(line for line in lines if line))
        if self.normalized_text is None:
            object.__setattr__(self, 'normalized_text', self.full_text.lower())


def first_match(matchers: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Evaluate matchers in order and return the first non-None result."""
    for matcher in matchers:
        result = matcher()
        if result is not None:
            return result
    return None


class BaseParser(ABC):
    """Base class for all receipt field parsers."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Parse the specific field from receipt context.

        Args:
            context: Receipt context with text, lines and language

        Returns:
            ParseResult with the extracted value, or None if nothing qualified
        """
        pass

    def _log_result(self, result: Optional[ParseResult]):
        """Log parsing result for debugging."""
        if result:
            self.logger.info(f"Parsed: {result.value} ({result.metadata.get('pattern', '-')})")
        else:
            self.logger.warning("Parsing failed - no result")
