from typing import Dict, List, Optional, Union

import pytest

from url_directory.models.weblink import CategoryDefinition, CheckResult
from url_directory.services.categorizer import Categorizer
from url_directory.services.organizer import WebLinkOrganizer


class FakeNetwork:
    """In-memory stand-in for the HEAD check and title fetch."""

    def __init__(self, statuses: Optional[Dict[str, Union[int, str]]] = None,
                 titles: Optional[Dict[str, str]] = None, default_status: Union[int, str] = 200):
        self.statuses = statuses or {}
        self.titles = titles or {}
        self.default_status = default_status
        self.checked: List[str] = []
        self.title_requests: List[str] = []

    async def check(self, url: str) -> CheckResult:
        self.checked.append(url)
        status = self.statuses.get(url, self.default_status)
        if status == 'error':
            return CheckResult(ok=False, status_code='error')
        return CheckResult(ok=200 <= status < 300, status_code=status)

    async def fetch_title(self, url: str) -> str:
        self.title_requests.append(url)
        return self.titles.get(url, '')


@pytest.fixture
def definitions() -> List[CategoryDefinition]:
    return [
        CategoryDefinition(name='Development', keywords=('github', 'api', 'python')),
        CategoryDefinition(name='DevOps', keywords=('docker', 'kubernetes', 'deploy')),
        CategoryDefinition(name='Learning', keywords=('tutorial', 'course', 'python')),
    ]


@pytest.fixture
def categorizer(definitions) -> Categorizer:
    return Categorizer(definitions)


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def organizer(categorizer, network) -> WebLinkOrganizer:
    return WebLinkOrganizer(
        categorizer,
        settings={'show_progress': False},
        check=network.check,
        fetch_title=network.fetch_title,
    )
