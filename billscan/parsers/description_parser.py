"""Merchant/title extraction from the first lines of a receipt."""

import re
import logging
from typing import Optional

from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

MAX_LINES = 5
MIN_LENGTH = 2

DIGITS_ONLY = re.compile(r'\d+')
PUNCTUATION_ONLY = re.compile(r'[\W_]+')
SEPARATOR_GLYPHS = re.compile(r'[*#=\-_~|]+')
WHITESPACE = re.compile(r'\s+')
CJK_IDEOGRAPH = re.compile(r'[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]')


def title_case(text: str) -> str:
    """Capitalize the first letter of each space-delimited word, lowercase the rest."""
    return ' '.join(word[:1].upper() + word[1:] for word in text.lower().split(' '))


class DescriptionParser(BaseParser):
    """Picks the first plausible merchant or title line."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        for index, line in enumerate(context.lines[:MAX_LINES]):
            if DIGITS_ONLY.fullmatch(line) or PUNCTUATION_ONLY.fullmatch(line):
                continue

            cleaned = WHITESPACE.sub(' ', SEPARATOR_GLYPHS.sub('', line)).strip()
            if len(cleaned) < MIN_LENGTH:
                continue

            if CJK_IDEOGRAPH.search(cleaned):
                description = cleaned
            else:
                description = title_case(cleaned)

            result = ParseResult(value=description, source_text=line, metadata={'line': index})
            self._log_result(result)
            return result

        self.logger.warning(f"No description candidate in the first {MAX_LINES} lines")
        return None
