import logging
from typing import Callable, List, Optional
from urllib.parse import quote

from .config import Settings
from .errors import FetchError, TransportError
from .extractor import MarkupExtractor
from .fetcher import Fetcher
from .models import SearchHit, DetailRecord, Episode, StreamSource, Lookup
from .resolver import StreamResolver

logger = logging.getLogger(__name__)


class FaselScraper:

    def __init__(self, settings: Optional[Settings] = None, fetcher: Optional[Fetcher] = None):
        self.settings = settings or Settings()
        self.base_url = self.settings.base_url
        self.fetcher = fetcher or Fetcher(self.settings)
        self.extractor = MarkupExtractor(self.base_url)
        self.resolver = StreamResolver(self.fetcher, self.extractor)

    def search_url(self, query: str, page: int = 1) -> str:
        quoted = quote(query.strip(), safe="")
        if page <= 1:
            return f"{self.base_url}/?s={quoted}"
        return f"{self.base_url}/page/{page}/?s={quoted}"

    def _guard(self, label: str, operation: Callable, default) -> Lookup:
        try:
            return Lookup.ok(operation())
        except (FetchError, TransportError) as e:
            logger.warning("%s failed: %s", label, e)
            return Lookup.failed(e, default)

    # --- Search ---

    def _search_pages(self, query: str) -> List[SearchHit]:
        results = []
        seen_urls = set()

        for page in range(1, self.settings.max_search_pages + 1):
            try:
                html = self.fetcher.get(self.search_url(query, page))
            except (FetchError, TransportError):
                if page == 1:
                    raise
                # past the last page the site answers 404
                break

            new_hits = [hit for hit in self.extractor.search_results(html) if hit.href not in seen_urls]
            if not new_hits:
                break

            for hit in new_hits:
                seen_urls.add(hit.href)
            results.extend(new_hits)

        return results

    def lookup_search(self, query: str) -> Lookup:
        if not query or not query.strip():
            return Lookup.ok([])
        return self._guard(f"Search '{query}'", lambda: self._search_pages(query), [])

    def search(self, query: str) -> List[SearchHit]:
        return self.lookup_search(query).value

    # --- Details ---

    def _details(self, url: str) -> Optional[DetailRecord]:
        record = self.extractor.details(self.fetcher.get(url))
        if not (record.title or record.description):
            return None
        return record

    def lookup_details(self, url: str) -> Lookup:
        return self._guard(f"Details {url}", lambda: self._details(url), None)

    def get_details(self, url: str) -> Optional[DetailRecord]:
        return self.lookup_details(url).value

    # --- Episodes ---

    def lookup_episodes(self, url: str) -> Lookup:
        return self._guard(
            f"Episodes {url}",
            lambda: self.extractor.episodes(self.fetcher.get(url)),
            [],
        )

    def get_episodes(self, url: str) -> List[Episode]:
        return self.lookup_episodes(url).value

    # --- Streams ---

    def lookup_stream(self, url_or_markup: str) -> Lookup:
        return self._guard("Stream resolution", lambda: self.resolver.resolve(url_or_markup), [])

    def get_stream_url(self, url_or_markup: str) -> List[StreamSource]:
        return self.lookup_stream(url_or_markup).value
