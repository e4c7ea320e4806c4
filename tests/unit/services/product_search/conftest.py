"""Fixtures faking the retailer websites."""

from types import SimpleNamespace
from typing import Dict, List, Union

import pytest
import requests

from makeup_comparator.models.search_models import SearchConfiguration

Page = Union[SimpleNamespace, Exception]


def make_response(url: str, text: str = "", status_code: int = 200) -> SimpleNamespace:
    """Minimal stand-in for ``requests.Response``."""
    return SimpleNamespace(url=url, text=text, status_code=status_code)


class FakeWeb:
    """Map of URL to the response (or exception) ``requests.get`` returns."""

    def __init__(self) -> None:
        self.pages: Dict[str, Page] = {}
        self.requested: List[str] = []

    def add(self, url: str, text: str, status_code: int = 200, final_url: str = "") -> None:
        self.pages[url] = make_response(final_url or url, text, status_code)

    def fail(self, url: str, error: Exception) -> None:
        self.pages[url] = error

    def get(self, url, headers=None, timeout=None):
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise requests.ConnectionError(f"unexpected request to {url}")
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture()
def fake_web(monkeypatch) -> FakeWeb:
    web = FakeWeb()
    monkeypatch.setattr(requests, "get", web.get)
    return web


@pytest.fixture()
def config() -> SearchConfiguration:
    return SearchConfiguration(min_similarity=0.0, max_results=50)
