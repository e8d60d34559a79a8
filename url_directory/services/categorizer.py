from typing import Dict, Iterable, List, Optional, Set
import logging
import re

from ..models.weblink import CategoryDefinition

logger = logging.getLogger(__name__)


class KeywordIndex:
    """Lowercase keyword -> category names that list it, built once from config."""

    def __init__(self, definitions: Iterable[CategoryDefinition]):
        self._keywords: Dict[str, List[str]] = {}
        # first-registration rank of each category, used to break ties
        self._rank: Dict[str, int] = {}

        for definition in definitions:
            for keyword in definition.keywords:
                keyword = keyword.lower()
                if not keyword:
                    continue
                categories = self._keywords.setdefault(keyword, [])
                if definition.name not in categories:
                    categories.append(definition.name)
                self._rank.setdefault(definition.name, len(self._rank))

    def items(self):
        return self._keywords.items()

    def categories_for(self, keyword: str) -> List[str]:
        return list(self._keywords.get(keyword.lower(), []))

    def rank(self, category: str) -> int:
        return self._rank[category]


class Categorizer:
    """Suggests a category for a URL by keyword containment in URL and title tokens."""

    def __init__(self, definitions: Iterable[CategoryDefinition]):
        self.keyword_index = KeywordIndex(definitions)

    @staticmethod
    def tokenize(url: str, title: str = '') -> Set[str]:
        url_tokens = [token for token in re.split(r'[/-]', url.lower()) if token]
        title_tokens = (title or '').lower().split()
        return set(url_tokens) | set(title_tokens)

    def calculate_scores(self, url: str, title: str = '') -> Dict[str, int]:
        scores: Dict[str, int] = {}
        for word in self.tokenize(url, title):
            for keyword, categories in self.keyword_index.items():
                # substring containment: "go" also matches "google"
                if keyword in word:
                    for category in categories:
                        scores[category] = scores.get(category, 0) + 1
        return scores

    def suggest_category(self, url: str, title: str = '') -> Optional[str]:
        """Best scoring category, or None when no keyword matched."""
        scores = self.calculate_scores(url, title)
        if not scores:
            logger.debug(f"No keyword matched for {url}")
            return None

        best = max(scores, key=lambda name: (scores[name], -self.keyword_index.rank(name)))
        logger.debug(f"Suggested '{best}' for {url} (scores: {scores})")
        return best
