"""Amount parsing with language-specific keyword tiers and fallbacks."""

import logging
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Optional

from .base import BaseParser, ParseResult, ReceiptContext, first_match
from .patterns import (
    AMOUNT_TIERS,
    LARGEST_DECIMAL_PATTERN,
    LARGEST_DECIMAL_UPPER,
    AmountTier,
)

logger = logging.getLogger(__name__)


class AmountParser(BaseParser):
    """Extract the receipt total from English, Chinese and German text."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the total amount.

        Tiers for the context language are tried top-down; the first tier
        with a validated match wins. When no tier matches, the largest
        bare decimal in the text is used.

        Args:
            context: Receipt context with full text and language

        Returns:
            ParseResult with a positive Decimal, or None
        """
        text = context.full_text
        matchers = [partial(self._match_tier, tier, text) for tier in AMOUNT_TIERS[context.language]]
        matchers.append(partial(self._largest_decimal, text))

        result = first_match(matchers)
        if result is None:
            self.logger.warning("No amount candidates found")
            return None

        self._log_result(result)
        return result

    def _match_tier(self, tier: AmountTier, text: str) -> Optional[ParseResult]:
        """First pattern in the tier with a candidate inside the tier's range."""
        for pattern in tier.patterns:
            for match in pattern.regex.finditer(text):
                raw = match.group('amount')
                amount = self._to_decimal(pattern.number_format.normalize(raw))
                if amount is None or not tier.accepts(amount):
                    self.logger.debug(f"Rejected {raw!r} from {tier.name}/{pattern.name}")
                    continue
                return ParseResult(
                    value=amount,
                    source_text=match.group(),
                    metadata={'tier': tier.name, 'pattern': pattern.name},
                )
        return None

    def _largest_decimal(self, text: str) -> Optional[ParseResult]:
        """
        Largest decimal in (0, 100000) anywhere in the text.

        Receipts list many sub-amounts and the grand total is usually the
        biggest. Item counts, phone numbers and loyalty IDs written with a
        decimal point can win here too.
        """
        candidates = []
        for match in LARGEST_DECIMAL_PATTERN.finditer(text):
            amount = self._to_decimal(match.group().replace(',', '.'))
            if amount is not None and Decimal('0') < amount < LARGEST_DECIMAL_UPPER:
                candidates.append((amount, match.group()))

        if not candidates:
            return None

        amount, source = max(candidates, key=lambda x: x[0])
        return ParseResult(
            value=amount,
            source_text=source,
            metadata={'tier': 'largest_decimal', 'pattern': 'largest_decimal', 'candidates': len(candidates)},
        )

    def _to_decimal(self, value: str) -> Optional[Decimal]:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            self.logger.debug(f"Unparseable amount: {value!r}")
            return None
        return amount if amount.is_finite() else None
