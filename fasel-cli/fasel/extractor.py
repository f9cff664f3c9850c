import html
import re
import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .models import SearchHit, DetailRecord, Episode, StreamSource

logger = logging.getLogger(__name__)

EPISODE_WORD = "الحلقة"
MOVIE_PREFIX = "فيلم"
TRANSLATED_SUFFIXES = ("مترجم", "مدبلج")
RELEASE_DATE_LABELS = ("موعد الصدور", "تاريخ الصدور", "تاريخ الإصدار", "تاريخ الاصدار")

EPISODE_TEXT_RE = re.compile(rf"{EPISODE_WORD}\s*([0-9]+)")
YEAR_RE = re.compile(r"[0-9]{4}")
BACKGROUND_RE = re.compile(r"background-image\s*:\s*url\(\s*['\"]?([^'\")]+?)['\"]?\s*\)", re.IGNORECASE)
FILE_TOKEN_RE = re.compile(r"file\s*:\s*[\"']([^\"']+?\.m3u8[^\"']*)[\"']")
VIDEO_PLAYER_RE = re.compile(r"(?:https?://[^'\"\s]+)?/video_player[^'\"\s]*")
HREF_ASSIGN_RE = re.compile(r"(?:location\.)?href\s*=\s*['\"]([^'\"]+)['\"]")
ANCHOR_TRIPLE_RE = re.compile(
    r"<a\s[^>]*href=[\"']([^\"']+)[\"'][^>]*>"
    r"(?:(?!</a>).)*?<img\s[^>]*src=[\"']([^\"']+)[\"'][^>]*>"
    r"(?:(?!</a>).)*?<h3[^>]*>(.*?)</h3>",
    re.DOTALL | re.IGNORECASE,
)


def clean_text(text: str) -> str:
    if not text:
        return ""
    return " ".join(text.strip().split())


def clean_title(text: str) -> str:
    text = clean_text(text)
    if text.startswith(MOVIE_PREFIX + " "):
        text = text[len(MOVIE_PREFIX):].strip()
    for suffix in TRANSLATED_SUFFIXES:
        if text.endswith(" " + suffix):
            text = text[: -len(suffix)].strip()
            break
    return text


def site_origin(base_url: str) -> str:
    parts = urlsplit(base_url)
    return f"{parts.scheme}://{parts.netloc}"


def absolute_url(href: Optional[str], base_url: str) -> str:
    if not href:
        return ""
    href = href.strip()
    if not href or href.startswith("#"):
        return ""
    scheme = urlsplit(href).scheme.lower()
    if scheme and scheme not in ("http", "https"):
        # data:, javascript:, blob: and friends are not fetchable pages
        return ""
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"{urlsplit(base_url).scheme}:{href}"
    origin = site_origin(base_url)
    if href.startswith("/"):
        return origin + href
    return f"{origin}/{href}"


def background_image(style: Optional[str]) -> str:
    if not style:
        return ""
    match = BACKGROUND_RE.search(style)
    return match.group(1).strip() if match else ""


def _img_src(img) -> str:
    if not img:
        return ""
    return img.get("data-src") or img.get("src") or ""


# --- Search strategies ---

class PostCardStrategy:
    name = "post-card"

    def extract(self, soup: BeautifulSoup, markup: str) -> List[Dict]:
        cards = []
        for item in soup.select("div.postDiv"):
            link = item.find("a", href=True)
            title_elem = item.select_one("div.h1")
            cards.append({
                "href": link["href"] if link else "",
                "title": title_elem.get_text() if title_elem else "",
                "image": _img_src(item.find("img")),
            })
        return cards


class GridColumnStrategy:
    name = "grid-column"

    def extract(self, soup: BeautifulSoup, markup: str) -> List[Dict]:
        cards = []
        for item in soup.select('div[class*="col-"]'):
            # only innermost columns are cards
            if item.select_one('div[class*="col-"]'):
                continue
            link = item.find("a", href=True)
            if not link:
                continue

            title_elem = item.select_one(".h1, .h3, .h4, h3, h4")
            title = title_elem.get_text() if title_elem else link.get("title", "")

            image = _img_src(item.find("img"))
            if not image:
                styled = item.find(style=BACKGROUND_RE)
                image = background_image(styled.get("style")) if styled else ""

            cards.append({"href": link["href"], "title": title, "image": image})
        return cards


class AnchorTripleStrategy:
    name = "anchor-triple"

    def extract(self, soup: BeautifulSoup, markup: str) -> List[Dict]:
        cards = []
        for href, image, title in ANCHOR_TRIPLE_RE.findall(markup):
            title = html.unescape(re.sub(r"<[^>]+>", "", title))
            cards.append({"href": html.unescape(href), "title": title, "image": html.unescape(image)})
        return cards


# --- Episode strategies ---

class NumberedAnchorStrategy:
    """Anchors whose whole text is the episode word followed by a number."""

    name = "numbered-anchor"

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[Episode]:
        found = []
        for link in soup.find_all("a", href=True):
            match = EPISODE_TEXT_RE.fullmatch(link.get_text().strip())
            if not match or int(match.group(1)) <= 0:
                continue
            href = absolute_url(link["href"], base_url)
            if not href:
                continue
            found.append(Episode(href=href, number=match.group(1)))

        # site lists newest first
        found.reverse()
        found.sort(key=lambda ep: int(ep.number))

        episodes = []
        seen_numbers = set()
        for ep in found:
            if int(ep.number) in seen_numbers:
                continue
            seen_numbers.add(int(ep.number))
            episodes.append(ep)
        return episodes


class CardEpisodeStrategy:
    name = "episode-card"

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[Episode]:
        episodes = []
        seen_urls = set()
        for card in soup.select("div.epAll, div.epDivHome, div.episode-card"):
            link = card.find("a", href=True)
            heading = card.find(["h2", "h3", "h4", "h5"]) or card.select_one(".h4, .h5")
            if not link or not heading:
                continue
            href = absolute_url(link["href"], base_url)
            label = clean_text(heading.get_text())
            if not label or not href or href in seen_urls:
                continue
            seen_urls.add(href)
            episodes.append(Episode(href=href, number=label))
        return episodes


SEARCH_STRATEGIES = (PostCardStrategy(), GridColumnStrategy(), AnchorTripleStrategy())
EPISODE_STRATEGIES = (NumberedAnchorStrategy(), CardEpisodeStrategy())


class MarkupExtractor:

    def __init__(
        self,
        base_url: str,
        search_strategies: Optional[Sequence] = None,
        episode_strategies: Optional[Sequence] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.search_strategies = tuple(search_strategies or SEARCH_STRATEGIES)
        self.episode_strategies = tuple(episode_strategies or EPISODE_STRATEGIES)

    def _soup(self, markup: str) -> BeautifulSoup:
        return BeautifulSoup(markup or "", "html.parser")

    # --- Search view ---

    def search_results(self, markup: str) -> List[SearchHit]:
        soup = self._soup(markup)
        for strategy in self.search_strategies:
            hits = self._normalize_cards(strategy.extract(soup, markup or ""))
            if hits:
                logger.debug("Search strategy %s matched %d cards", strategy.name, len(hits))
                return hits
        return []

    def _normalize_cards(self, cards: List[Dict]) -> List[SearchHit]:
        hits = []
        seen_urls = set()
        for card in cards:
            title = clean_title(card.get("title", ""))
            href = absolute_url(card.get("href"), self.base_url)
            if not title or not href or href in seen_urls:
                continue
            seen_urls.add(href)
            hits.append(SearchHit(
                title=title,
                href=href,
                image=absolute_url(card.get("image"), self.base_url),
            ))
        return hits

    # --- Detail view ---

    def details(self, markup: str) -> DetailRecord:
        soup = self._soup(markup)
        return DetailRecord(
            title=self._detail_title(soup),
            description=self._detail_description(soup),
            image=self._detail_image(soup),
            airdate=self._detail_airdate(soup),
            aliases=self._detail_aliases(soup),
        )

    def _meta_content(self, soup: BeautifulSoup, **attrs) -> str:
        meta = soup.find("meta", attrs=attrs)
        return clean_text(meta.get("content", "")) if meta else ""

    def _detail_title(self, soup: BeautifulSoup) -> str:
        title_elem = soup.select_one("div.singleInfo div.title, div.h1, h1")
        if title_elem:
            return clean_title(title_elem.get_text())
        return clean_title(self._meta_content(soup, property="og:title"))

    def _detail_description(self, soup: BeautifulSoup) -> str:
        desc_elem = soup.select_one("div.singleDesc")
        if desc_elem:
            return clean_text(desc_elem.get_text())
        description = self._meta_content(soup, name="description")
        if description:
            return description
        paragraph = soup.find("p")
        return clean_text(paragraph.get_text()) if paragraph else ""

    def _detail_image(self, soup: BeautifulSoup) -> str:
        image = self._meta_content(soup, property="og:image")
        if not image:
            image = _img_src(soup.select_one(".posterImg img"))
        return absolute_url(image, self.base_url)

    def _detail_airdate(self, soup: BeautifulSoup) -> str:
        for icon in soup.select("i.fa-calendar-alt"):
            if icon.parent is None:
                continue
            match = YEAR_RE.search(icon.parent.get_text())
            if match:
                return match.group(0)
        return ""

    def _detail_aliases(self, soup: BeautifulSoup) -> str:
        """Taxonomy rows (genre, duration, quality, ...) joined with " | ".

        The site has no dedicated alternate-title row, so the whole taxonomy
        list is carried, minus the release-date row that feeds `airdate`.
        """
        rows = soup.select("#singleList .col-xl-6, #singleList li, ul.RightTaxContent li")
        values = []
        for row in rows:
            text = clean_text(row.get_text())
            if not text or row.select_one("i.fa-calendar-alt"):
                continue
            if any(label in text for label in RELEASE_DATE_LABELS):
                continue
            values.append(text)
        return " | ".join(values)

    # --- Episode view ---

    def episodes(self, markup: str) -> List[Episode]:
        soup = self._soup(markup)
        for strategy in self.episode_strategies:
            episodes = strategy.extract(soup, self.base_url)
            if episodes:
                logger.debug("Episode strategy %s matched %d episodes", strategy.name, len(episodes))
                return episodes
        return []

    # --- Player / server views ---

    def has_player_token(self, markup: str) -> bool:
        return bool(markup and FILE_TOKEN_RE.search(markup))

    def player_url(self, markup: str) -> str:
        """First server tab whose onclick handler points at a player page."""
        soup = self._soup(markup)
        for tab in soup.select("ul.tabs-ul li, .signleWatch li"):
            onclick = tab.get("onclick") or ""
            match = VIDEO_PLAYER_RE.search(onclick)
            if match:
                return absolute_url(match.group(0), self.base_url)
            match = HREF_ASSIGN_RE.search(onclick)
            url = absolute_url(match.group(1), self.base_url) if match else ""
            if url:
                return url
        return ""

    def player_sources(self, markup: str) -> List[StreamSource]:
        if not markup:
            return []

        urls = []
        for url in FILE_TOKEN_RE.findall(markup):
            url = absolute_url(url, self.base_url)
            if url and url not in urls:
                urls.append(url)

        if not urls:
            soup = self._soup(markup)
            for video in soup.find_all("video"):
                candidates = [video.get("src")] + [s.get("src") for s in video.find_all("source")]
                for src in candidates:
                    if not src or src.strip().lower().startswith("blob:"):
                        continue
                    url = absolute_url(src, self.base_url)
                    if url and url not in urls:
                        urls.append(url)

        return [
            StreamSource(url=url, is_m3u8=urlsplit(url).path.endswith(".m3u8"))
            for url in urls
        ]
