from .config import __version__, __author__, __license__, Settings, load_settings
from .errors import FaselError, FetchError, TransportError, ConfigurationError
from .models import SearchHit, DetailRecord, Episode, StreamSource, Lookup, LookupStatus
from .scraper import FaselScraper

__all__ = [
    "FaselScraper",
    "Settings",
    "load_settings",
    "SearchHit",
    "DetailRecord",
    "Episode",
    "StreamSource",
    "Lookup",
    "LookupStatus",
    "FaselError",
    "FetchError",
    "TransportError",
    "ConfigurationError",
    "__version__",
    "__author__",
    "__license__",
]
