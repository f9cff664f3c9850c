import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

# --- Version & Metadata ---
__version__ = "0.1"
__author__ = "fasel-cli contributors"
__license__ = "GPL-3.0"

# --- Directories ---
CONFIG_DIR = Path.home() / ".config" / "fasel-cli"
CONFIG_FILE = CONFIG_DIR / "config.json"

# --- Scraper Configuration ---
BASE_URL = "https://www.faselhds.xyz"

# Target URL is appended percent-encoded
PROXY_URL = "https://api.allorigins.win/raw?url="

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ar,en-US;q=0.9,en;q=0.8",
    "Referer": BASE_URL,
}

REQUEST_TIMEOUT = 15
MAX_SEARCH_PAGES = 5
IMPERSONATE = "chrome120"

# --- Themes (cli) ---
THEMES = {
    "cyan": {"primary": "#7ebfbf", "secondary": "#9bd3d3", "accent": "#5fa3a3", "error": "#d97979"},
    "blue": {"primary": "#7eb3d4", "secondary": "#9ac9e3", "accent": "#5a9bc7", "error": "#d97979"},
    "green": {"primary": "#8ba87f", "secondary": "#a3ba98", "accent": "#6d8a62", "error": "#d97979"},
    "gold": {"primary": "#c9b87f", "secondary": "#d9ca98", "accent": "#ab9a61", "error": "#d97979"},
}

DEFAULT_THEME = "cyan"


class Settings(BaseModel):
    base_url: str = BASE_URL
    proxy_url: str = PROXY_URL
    use_proxy: bool = False
    timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    max_search_pages: int = Field(default=MAX_SEARCH_PAGES, ge=1)
    impersonate: str = IMPERSONATE
    theme: str = DEFAULT_THEME

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an absolute http(s) URL")
        return value

    @property
    def headers(self) -> dict:
        headers = HEADERS.copy()
        headers["Referer"] = self.base_url + "/"
        return headers

    def get_theme(self) -> dict:
        return THEMES.get(self.theme, THEMES[DEFAULT_THEME])


def _env_overrides() -> dict:
    overrides = {}
    if os.environ.get("FASEL_BASE_URL"):
        overrides["base_url"] = os.environ["FASEL_BASE_URL"]
    if os.environ.get("FASEL_PROXY_URL"):
        overrides["proxy_url"] = os.environ["FASEL_PROXY_URL"]
    if os.environ.get("FASEL_USE_PROXY"):
        overrides["use_proxy"] = os.environ["FASEL_USE_PROXY"].strip().lower() in ("1", "true", "yes", "on")
    return overrides


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from the JSON config file, then apply FASEL_* env vars."""
    path = Path(path) if path else CONFIG_FILE
    data = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config: {e}", config_path=str(path))
        if not isinstance(data, dict):
            raise ConfigurationError("Config root must be an object", config_path=str(path))

    data.update(_env_overrides())
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config: {e}", config_path=str(path), details=e.errors())


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    path = Path(path) if path else CONFIG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings.model_dump(), indent=2), encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write config: {e}", config_path=str(path))
