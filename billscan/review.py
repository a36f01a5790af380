"""Review queue for parsed receipts that a person should double-check."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .models import Category, ParsedReceipt

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 200


@dataclass
class ReviewItem:
    """Represents a receipt that needs manual review."""
    source: str
    reason: str
    suggested_date: Optional[str] = None
    suggested_amount: Optional[str] = None
    suggested_category: Optional[str] = None
    raw_snippet: str = ""
    confidence: float = 0.0


class ReviewQueue:
    """Collects receipts whose extraction looks incomplete or unreliable."""

    def __init__(self, confidence_threshold: float = 60.0):
        """
        Initialize review queue.

        Args:
            confidence_threshold: Recognition confidence (0-100) below which
                a receipt is flagged
        """
        self.items: List[ReviewItem] = []
        self.confidence_threshold = confidence_threshold

    def review_reasons(self, receipt: ParsedReceipt) -> List[str]:
        """List the reasons a receipt should be reviewed; empty when it looks fine."""
        reasons = []
        if receipt.amount is None:
            reasons.append("missing amount")
        if receipt.description is None:
            reasons.append("missing description")
        if receipt.category == Category.MISCELLANEOUS:
            reasons.append("unknown category")
        if receipt.confidence < self.confidence_threshold:
            reasons.append(f"low confidence ({receipt.confidence:.0f})")
        return reasons

    def should_review(self, receipt: ParsedReceipt) -> bool:
        return bool(self.review_reasons(receipt))

    def add_from_receipt(self, source: str, receipt: ParsedReceipt) -> Optional[ReviewItem]:
        """
        Add a receipt to the queue if it needs review.

        Args:
            source: File name or other identifier of the receipt
            receipt: Parsed receipt

        Returns:
            The queued ReviewItem, or None if the receipt was not flagged
        """
        reasons = self.review_reasons(receipt)
        if not reasons:
            return None

        snippet = ' '.join(receipt.raw_text.split())[:SNIPPET_LENGTH]
        if len(receipt.raw_text) > SNIPPET_LENGTH:
            snippet += "..."

        item = ReviewItem(
            source=source,
            reason="; ".join(reasons),
            suggested_date=receipt.date,
            suggested_amount=str(receipt.amount) if receipt.amount is not None else None,
            suggested_category=receipt.category.value,
            raw_snippet=snippet,
            confidence=receipt.confidence,
        )
        self.items.append(item)
        logger.info(f"Sending {source} to review: {item.reason}")
        return item

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the review queue."""
        if not self.items:
            return {"total": 0}

        reason_counts: Dict[str, int] = {}
        for item in self.items:
            for reason in item.reason.split(';'):
                reason = reason.strip()
                if reason.startswith("low confidence"):
                    reason = "low confidence"
                reason_counts[reason] = reason_counts.get(reason, 0) + 1

        return {
            "total": len(self.items),
            "reason_breakdown": reason_counts,
        }

    def clear(self):
        """Clear all items from the review queue."""
        self.items.clear()
