import pytest

from fasel.config import Settings
from fasel.errors import FetchError
from fasel.scraper import FaselScraper

BASE = "https://www.faselhds.xyz"


class FakeFetcher:
    """Serves canned pages by URL; unknown URLs answer 404."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def get(self, url, headers=None):
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(404, url)
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FASEL_BASE_URL", "FASEL_PROXY_URL", "FASEL_USE_PROXY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    return Settings(base_url=BASE)


@pytest.fixture
def make_scraper(settings):
    def _make(pages=None, **overrides):
        conf = settings.model_copy(update=overrides) if overrides else settings
        fetcher = FakeFetcher(pages)
        return FaselScraper(conf, fetcher=fetcher), fetcher
    return _make
