from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class URLEntry:
    url: str
    description: str = ''

    @property
    def label(self) -> str:
        """Text shown for the link; falls back to the URL itself."""
        return self.description or self.url


@dataclass(frozen=True)
class LinkRecord:
    """An entry tagged with the category it came from (invalid/auth/duplicate lists)."""
    url: str
    description: str
    category: str

    @classmethod
    def from_entry(cls, entry: URLEntry, category: str) -> 'LinkRecord':
        return cls(url=entry.url, description=entry.description, category=category)

    @property
    def label(self) -> str:
        return self.description or self.url


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    description: str = ''
    tags: tuple = ()
    keywords: tuple = ()


class ValidationOutcome(Enum):
    REACHABLE = 'reachable'
    UNREACHABLE = 'unreachable'
    REQUIRES_AUTH = 'requires_auth'


@dataclass(frozen=True)
class CheckResult:
    """Raw answer of the network check: status code or "error" on failure."""
    ok: bool
    status_code: Union[int, str]


@dataclass(frozen=True)
class Statistics:
    total: int = 0
    invalid: int = 0
    auth: int = 0
    duplicates: int = 0
    original_total: int = 0
