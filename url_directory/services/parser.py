from dataclasses import dataclass
from typing import Iterator, Union
import logging
import re

from .registry import UNCATEGORIZED, URLRegistry

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'https?://[^\s\'"<]+')


@dataclass(frozen=True)
class CategoryHeader:
    name: str


@dataclass(frozen=True)
class ParsedLink:
    category: str
    url: str
    description: str


class ContentParser:
    """Turns line-oriented text into category headers and (category, url, description) triples.

    A line with a colon and no "http" in it is a header; the text before the
    first colon names the category for the lines that follow. Every other line
    is scanned for URLs, and each URL's description is the line with that URL
    removed. Lines that are neither are skipped.
    """

    def __init__(self, default_category: str = UNCATEGORIZED):
        self.default_category = default_category

    @staticmethod
    def is_header(line: str) -> bool:
        return ':' in line and 'http' not in line

    def parse(self, content: str) -> Iterator[Union[CategoryHeader, ParsedLink]]:
        current_category = self.default_category

        for line in content.split('\n'):
            if self.is_header(line):
                current_category = line.split(':', 1)[0].strip()
                yield CategoryHeader(current_category)
                continue

            for url in URL_PATTERN.findall(line):
                description = line.replace(url, '', 1).strip()
                yield ParsedLink(current_category, url, description)

    def load_into(self, registry: URLRegistry, content: str) -> int:
        """Feed `content` into `registry`; returns the number of URLs submitted."""
        submitted = 0
        for item in self.parse(content):
            if isinstance(item, CategoryHeader):
                discarded = registry.reset_category(item.name)
                if discarded:
                    logger.warning(
                        f"Header '{item.name}' repeats; discarding {len(discarded)} "
                        f"link(s) collected under it earlier")
                continue
            registry.add(item.category, item.url, item.description)
            submitted += 1

        logger.debug(f"Parsed {submitted} URLs into {len(registry.index)} categories")
        return submitted
