from pathlib import Path
from typing import List, Sequence, Union
import logging
import re

from ..errors import SaveError
from ..models.weblink import LinkRecord, URLEntry
from ..services.registry import URLRegistry

logger = logging.getLogger(__name__)

PAGE_SIZE = 16

AUTH_SECTION = 'Links Requiring Authentication'
INVALID_SECTION = 'Invalid Links'
DUPLICATE_SECTION = 'Duplicate Links'


def chunk(entries: Sequence, size: int) -> List[list]:
    return [list(entries[i:i + size]) for i in range(0, len(entries), size)]


class MarkdownWriter:
    """Renders a URLRegistry as a Markdown directory.

    Output depends only on the registry's contents: statistics, table of
    contents, one section per category (split into "Part N" subsections past
    `page_size` entries), then the authentication, invalid and duplicate lists
    when they are non-empty.
    """

    def __init__(self, page_size: int = PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size

    @staticmethod
    def make_anchor(text: str) -> str:
        """Lowercase, with each run of whitespace replaced by a single hyphen."""
        return re.sub(r'\s+', '-', text.lower())

    @staticmethod
    def part_heading(category: str, number: int) -> str:
        return f"{category} Part {number}"

    @staticmethod
    def format_entry(entry: Union[URLEntry, LinkRecord]) -> str:
        return f"- [{entry.label}]({entry.url})"

    def format_record(self, record: LinkRecord) -> str:
        return f"{self.format_entry(record)} (from {record.category})"

    @classmethod
    def assign_anchors(cls, headings) -> dict:
        """Map each (key, heading text) to an anchor, in document order.

        A slug already taken gets a numeric suffix (-1, -2, ...), the way
        rendered Markdown disambiguates repeated heading ids.
        """
        anchors = {}
        used = set()
        for key, text in headings:
            base = anchor = cls.make_anchor(text)
            number = 0
            while anchor in used:
                number += 1
                anchor = f"{base}-{number}"
            used.add(anchor)
            anchors[key] = anchor
        return anchors

    def render(self, registry: URLRegistry) -> str:
        stats = registry.stats
        special_sections = [
            (title, records) for title, records in (
                (AUTH_SECTION, registry.auth_links),
                (INVALID_SECTION, registry.invalid_links),
                (DUPLICATE_SECTION, registry.duplicates),
            ) if records
        ]
        categories = [
            (category, chunk(entries, self.page_size) if len(entries) > self.page_size else None, entries)
            for category, entries in registry.index.items()
        ]

        headings = [(('section', 'URL Directory'), 'URL Directory'),
                    (('section', 'Statistics'), 'Statistics'),
                    (('section', 'Table of Contents'), 'Table of Contents')]
        for category, parts, _ in categories:
            headings.append((('category', category), category))
            for number in range(1, len(parts or []) + 1):
                headings.append((('part', category, number), self.part_heading(category, number)))
        headings.extend((('section', title), title) for title, _ in special_sections)
        anchors = self.assign_anchors(headings)

        lines = ['# URL Directory', '']

        lines.append('## Statistics')
        lines.append(f"- Total Links: {stats.total}")
        lines.append(f"- Invalid Links: {stats.invalid}")
        lines.append(f"- Links Requiring Authentication: {stats.auth}")
        lines.append(f"- Duplicate Links: {stats.duplicates}")
        lines.append('')

        lines.append('## Table of Contents')
        for category, parts, entries in categories:
            lines.append(f"- [{category}](#{anchors[('category', category)]}) ({len(entries)} links)")
            for number in range(1, len(parts or []) + 1):
                lines.append(f"  - [Part {number}](#{anchors[('part', category, number)]})")
        for title, records in special_sections:
            lines.append(f"- [{title}](#{anchors[('section', title)]}) ({len(records)} links)")
        lines.append('')

        for category, parts, entries in categories:
            lines.append(f"## {category}")
            lines.append('')
            if parts:
                for number, part in enumerate(parts, start=1):
                    lines.append(f"### {self.part_heading(category, number)}")
                    lines.append('')
                    lines.extend(self.format_entry(entry) for entry in part)
                    lines.append('')
            else:
                lines.extend(self.format_entry(entry) for entry in entries)
                lines.append('')

        for title, records in special_sections:
            lines.append(f"## {title}")
            lines.append('')
            lines.extend(self.format_record(record) for record in records)
            lines.append('')

        return '\n'.join(lines)


def write_markdown(content: str, output_file: Union[str, Path]):
    """Write the rendered document, raising SaveError when the file can't be written."""
    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise SaveError(f"Failed to save output file {output_file}: {e}") from e
    logger.info(f"Wrote {output_file}")
