from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Union
import asyncio
import logging

from tqdm import tqdm

from ..errors import CategorizationFailure, FileReadError
from ..models.weblink import URLEntry, ValidationOutcome
from ..utils.url_validator import CheckFunc, URLValidator, ValidatorAdapter
from ..writers.markdown_writer import MarkdownWriter
from .categorizer import Categorizer
from .parser import ContentParser
from .registry import URLRegistry

logger = logging.getLogger(__name__)

TitleFunc = Callable[[str], Awaitable[str]]


class RepairStatus(Enum):
    REPAIRED = 'repaired'
    NO_ALTERNATE = 'no_alternate'
    ALTERNATE_INVALID = 'alternate_invalid'
    UNCATEGORIZED = 'uncategorized'
    ALREADY_LISTED = 'already_listed'


@dataclass(frozen=True)
class RepairResult:
    status: RepairStatus
    message: str
    category: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is RepairStatus.REPAIRED


@dataclass(frozen=True)
class AddResult:
    category: str
    title: str
    added: bool


class WebLinkOrganizer:
    """Sequences parse -> validate -> render and the single-URL mutations.

    Every network round trip is awaited before the next one starts.
    """

    def __init__(self, categorizer: Categorizer, settings: Optional[Dict] = None,
                 check: Optional[CheckFunc] = None, fetch_title: Optional[TitleFunc] = None):
        self.settings = settings or {}
        self.categorizer = categorizer
        self.registry = URLRegistry()
        self.parser = ContentParser()
        self.writer = MarkdownWriter(page_size=self.settings.get('page_size', 16))

        if check is None or fetch_title is None:
            validator = URLValidator(
                timeout=self.settings.get('timeout', 10),
                user_agent=self.settings.get('user_agent'),
            )
            check = check or validator.check
            fetch_title = fetch_title or validator.fetch_title
        self.validator = ValidatorAdapter(check)
        self.fetch_title = fetch_title

    def read_file(self, file_path: Union[str, Path]) -> int:
        """Parse an input file into the registry; returns the number of URLs submitted."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"Failed to read input file {file_path}: {e}") from e

        self.registry.original_total = sum(1 for line in content.split('\n') if line.strip())
        return self.parse_content(content)

    def parse_content(self, content: str) -> int:
        return self.parser.load_into(self.registry, content)

    def generate_statistics(self) -> str:
        stats = self.registry.stats
        return (
            f"Original URLs: {stats.original_total}\n"
            f"Total URLs: {stats.total}\n"
            f"Invalid URLs: {stats.invalid}\n"
            f"Auth Required URLs: {stats.auth}\n"
            f"Duplicate URLs: {stats.duplicates}"
        )

    def generate_markdown(self) -> str:
        return self.writer.render(self.registry)

    async def validate_all_links(self, cancel_event: Optional[asyncio.Event] = None) -> bool:
        """Check every stored URL, moving unreachable and auth-gated ones out of the index.

        Categories are committed one at a time once fully scanned. Returns
        False if `cancel_event` stopped the run; the category in progress is
        then left as it was.
        """
        total_urls = self.registry.stats.total

        with tqdm(total=total_urls,
                  desc="Validating URLs",
                  unit="url",
                  disable=not self.settings.get('show_progress', True)) as pbar:
            for category, entries in list(self.registry.index.items()):
                kept: List[URLEntry] = []
                auth: List[URLEntry] = []
                invalid: List[URLEntry] = []

                for entry in entries:
                    if cancel_event is not None and cancel_event.is_set():
                        logger.warning(f"Validation cancelled while checking '{category}'")
                        return False

                    outcome = await self.validator.validate(entry.url)
                    if outcome is ValidationOutcome.REACHABLE:
                        kept.append(entry)
                    elif outcome is ValidationOutcome.REQUIRES_AUTH:
                        auth.append(entry)
                    else:
                        invalid.append(entry)
                    pbar.update(1)

                self.registry.replace_category(category, kept, auth=auth, invalid=invalid)

        stats = self.registry.stats
        logger.info(f"Validation complete: {stats.total} valid, {stats.invalid} invalid, "
                    f"{stats.auth} requiring authentication")
        return True

    async def process_file(self, file_path: Union[str, Path]) -> str:
        logger.info(f"Reading {file_path}...")
        self.read_file(file_path)
        logger.info(f"Initial statistics:\n{self.generate_statistics()}")

        logger.info("Validating URLs...")
        await self.validate_all_links()

        logger.info("Generating markdown...")
        markdown = self.generate_markdown()
        logger.info(f"Final statistics:\n{self.generate_statistics()}")
        return markdown

    async def add_new_url(self, url: str, category: Optional[str] = None) -> AddResult:
        """Add one URL, suggesting a category from its title when none is given."""
        title = await self.fetch_title(url)
        chosen = category or self.categorizer.suggest_category(url, title)
        if not chosen:
            raise CategorizationFailure(f"Could not determine appropriate category for {url}")

        added = self.registry.add(chosen, url, title)
        if not added:
            logger.info(f"{url} is already listed; recorded as duplicate")
        return AddResult(category=chosen, title=title, added=added)

    async def handle_invalid_link(self, url: str, alternate_url: Optional[str] = None) -> RepairResult:
        """Drop `url` from the invalid list and, if possible, file a working alternate."""
        removed = self.registry.remove_invalid(url)
        if not removed:
            logger.debug(f"{url} was not in the invalid list")

        if not alternate_url:
            return RepairResult(RepairStatus.NO_ALTERNATE, 'No alternate URL provided')

        outcome = await self.validator.validate(alternate_url)
        if outcome is not ValidationOutcome.REACHABLE:
            return RepairResult(RepairStatus.ALTERNATE_INVALID, 'Alternate URL is also invalid')

        title = await self.fetch_title(alternate_url)
        category = self.categorizer.suggest_category(alternate_url, title)
        if not category:
            return RepairResult(RepairStatus.UNCATEGORIZED,
                                f"Could not categorize alternate URL {alternate_url}")

        if not self.registry.add(category, alternate_url, title):
            listed_under = self.registry.category_of(alternate_url)
            return RepairResult(RepairStatus.ALREADY_LISTED,
                                f"Alternate URL is already listed in category: {listed_under}",
                                category=listed_under)
        return RepairResult(RepairStatus.REPAIRED,
                            f"Added alternate URL to category: {category}", category=category)
