import logging
from typing import List

from .extractor import MarkupExtractor
from .fetcher import Fetcher
from .models import StreamSource

logger = logging.getLogger(__name__)


class StreamResolver:
    """Turns a detail page (URL or markup) into playable stream sources.

    Detail pages list several mirror servers as tabs; only the first one
    carrying a player URL is fetched. Markup that already embeds a player
    `file:` token is read directly.
    """

    def __init__(self, fetcher: Fetcher, extractor: MarkupExtractor):
        self.fetcher = fetcher
        self.extractor = extractor

    def resolve(self, url_or_markup: str) -> List[StreamSource]:
        if not url_or_markup:
            return []

        markup = url_or_markup
        if url_or_markup.strip().startswith(("http://", "https://")):
            markup = self.fetcher.get(url_or_markup.strip())

        if not self.extractor.has_player_token(markup):
            player_url = self.extractor.player_url(markup)
            if player_url:
                logger.debug("Fetching player page %s", player_url)
                markup = self.fetcher.get(player_url)
            else:
                logger.debug("No server tab with a player URL")

        sources = self.extractor.player_sources(markup)
        if not sources:
            logger.info("No stream source found")
        return sources
