"""Receipt field parsers - one focused parser per extracted field."""

from .date_parser import DateParser
from .amount_parser import AmountParser
from .description_parser import DescriptionParser

__all__ = ['DateParser', 'AmountParser', 'DescriptionParser']
