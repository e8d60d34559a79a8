from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple
import logging

from ..models.weblink import LinkRecord, Statistics, URLEntry

logger = logging.getLogger(__name__)

UNCATEGORIZED = 'Uncategorized'


class CategoryIndex:
    """Insertion-ordered mapping of category name to its URL entries."""

    def __init__(self):
        self._categories: Dict[str, List[URLEntry]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._categories

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def items(self) -> Iterator[Tuple[str, List[URLEntry]]]:
        for name, entries in self._categories.items():
            yield name, list(entries)

    def entries(self, name: str) -> List[URLEntry]:
        return list(self._categories.get(name, []))

    def append(self, name: str, entry: URLEntry):
        self._categories.setdefault(name, []).append(entry)

    def reset(self, name: str) -> List[URLEntry]:
        """Start `name` over with an empty list, returning whatever it held."""
        discarded = self._categories.get(name, [])
        self._categories[name] = []
        return discarded

    def replace(self, name: str, entries: Iterable[URLEntry]):
        self._categories[name] = list(entries)

    def entry_count(self) -> int:
        return sum(len(entries) for entries in self._categories.values())

    def as_dict(self) -> Dict[str, List[URLEntry]]:
        return {name: list(entries) for name, entries in self._categories.items()}


class URLRegistry:
    """Deduplicating insertion path into a CategoryIndex plus the special lists.

    Counters are derived from the lists on every read, so `stats` can never
    drift from the data it describes.
    """

    def __init__(self):
        self.index = CategoryIndex()
        self.duplicates: List[LinkRecord] = []
        self.invalid_links: List[LinkRecord] = []
        self.auth_links: List[LinkRecord] = []
        self.original_total = 0
        # mirrors every URL currently stored in the index
        self._known_urls: Set[str] = set()

    @property
    def stats(self) -> Statistics:
        return Statistics(
            total=self.index.entry_count(),
            invalid=len(self.invalid_links),
            auth=len(self.auth_links),
            duplicates=len(self.duplicates),
            original_total=self.original_total,
        )

    @property
    def known_urls(self) -> frozenset:
        return frozenset(self._known_urls)

    def urls(self) -> Iterator[str]:
        """Every stored URL, in index order."""
        for _, entries in self.index.items():
            for entry in entries:
                yield entry.url

    def is_duplicate(self, url: str) -> bool:
        return url in self._known_urls

    def category_of(self, url: str) -> Optional[str]:
        for category, entries in self.index.items():
            if any(entry.url == url for entry in entries):
                return category
        return None

    def add(self, category: str, url: str, description: str = '') -> bool:
        """Store `url` under `category` unless it is already stored anywhere.

        Returns False when the URL was recorded as a duplicate instead.
        """
        if self.is_duplicate(url):
            self.duplicates.append(LinkRecord(url=url, description=description, category=category))
            logger.debug(f"Duplicate URL {url} (submitted under '{category}')")
            return False

        self.index.append(category, URLEntry(url=url, description=description))
        self._known_urls.add(url)
        # a stored URL leaves the invalid and auth lists
        self.invalid_links = [record for record in self.invalid_links if record.url != url]
        self.auth_links = [record for record in self.auth_links if record.url != url]
        logger.debug(f"Added {url} to '{category}'")
        return True

    def reset_category(self, category: str) -> List[URLEntry]:
        discarded = self.index.reset(category)
        for entry in discarded:
            self._known_urls.discard(entry.url)
        return discarded

    def replace_category(self, category: str, kept: Iterable[URLEntry],
                         auth: Iterable[URLEntry] = (), invalid: Iterable[URLEntry] = ()):
        """Commit one category's validation results in a single step."""
        kept = list(kept)
        auth_records = [LinkRecord.from_entry(entry, category) for entry in auth]
        invalid_records = [LinkRecord.from_entry(entry, category) for entry in invalid]

        for entry in self.index.entries(category):
            self._known_urls.discard(entry.url)
        self.index.replace(category, kept)
        self._known_urls.update(entry.url for entry in kept)
        self.auth_links.extend(auth_records)
        self.invalid_links.extend(invalid_records)

    def find_invalid(self, url: str) -> Optional[LinkRecord]:
        return next((record for record in self.invalid_links if record.url == url), None)

    def remove_invalid(self, url: str) -> int:
        """Drop every invalid-list record for `url`; returns how many were removed."""
        before = len(self.invalid_links)
        self.invalid_links = [record for record in self.invalid_links if record.url != url]
        return before - len(self.invalid_links)
