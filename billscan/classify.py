"""Category classification by length-weighted keyword matching."""

import yaml
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from .models import Category

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "categories.yml"

CategoryDictionary = Mapping[Category, FrozenSet[str]]


def load_category_dictionary(rules_path: Path) -> CategoryDictionary:
    """
    Load category keyword rules from a YAML file.

    Args:
        rules_path: Path to a YAML mapping of category name -> {any: [keywords]}

    Returns:
        Read-only mapping of Category to lowercase keywords, in Category order
    """
    try:
        with open(rules_path, 'r', encoding='utf-8') as f:
            rules = yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Failed to load category rules from {rules_path}: {e}")
        raise

    keywords: Dict[Category, FrozenSet[str]] = {}
    for name, rule in rules.items():
        category = Category.from_name(name)
        if category == Category.MISCELLANEOUS:
            continue
        keywords[category] = frozenset(
            str(keyword).lower() for keyword in (rule or {}).get('any', []) if keyword
        )

    ordered = {category: keywords[category] for category in Category if category in keywords}
    logger.debug(f"Loaded {len(ordered)} category rules from {rules_path}")
    return MappingProxyType(ordered)


CATEGORY_KEYWORDS = load_category_dictionary(DEFAULT_RULES_PATH)


class CategoryClassifier:
    """Classify receipt text into a spend category."""

    def __init__(self, rules_path: Optional[Path] = None):
        """
        Initialize classifier with category rules.

        Args:
            rules_path: Alternative categories.yml; the packaged dictionary by default
        """
        self.rules_path = Path(rules_path) if rules_path else DEFAULT_RULES_PATH
        if rules_path is None:
            self.categories = CATEGORY_KEYWORDS
        else:
            self.categories = load_category_dictionary(self.rules_path)

    def score(self, text: str) -> Dict[Category, int]:
        """Sum of matched keyword lengths per category, in Category order."""
        text_lower = text.lower()
        return {
            category: sum(len(keyword) for keyword in keywords if keyword in text_lower)
            for category, keywords in self.categories.items()
        }

    def classify(self, text: str) -> Category:
        """
        Classify receipt text into a category.

        Args:
            text: Full receipt text (lowercased or not)

        Returns:
            Category with the strictly highest score; earlier categories win
            ties and Miscellaneous is returned when nothing matches
        """
        best_category = Category.MISCELLANEOUS
        best_score = 0
        for category, score in self.score(text).items():
            if score > best_score:
                best_category, best_score = category, score

        if best_category == Category.MISCELLANEOUS:
            logger.info("No category match found, defaulting to 'Miscellaneous'")
        else:
            logger.info(f"Classified as '{best_category.value}' with score {best_score}")
        return best_category

    def get_category_suggestions(self, text: str, top_n: int = 3) -> List[Tuple[Category, int]]:
        """
        Get top N category suggestions for review purposes.

        Args:
            text: Full text to analyze
            top_n: Number of suggestions to return

        Returns:
            List of (category, score) tuples sorted by score
        """
        scored = [(category, score) for category, score in self.score(text).items() if score > 0]
        # sorted() is stable, so equal scores keep Category order
        return sorted(scored, key=lambda x: x[1], reverse=True)[:top_n]
