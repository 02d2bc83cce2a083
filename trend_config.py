# settings for the trends scraper
# every value can be overridden from the environment

import os, json
from typing import Dict, Tuple


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_aliases(name: str, default: Dict[str, Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
    # {"NY Rangers": ["Rangers"], ...}; bad json keeps the defaults
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return default
    if not isinstance(data, dict):
        return default
    out = {}
    for canon, subs in data.items():
        if isinstance(subs, str):
            subs = [subs]
        if isinstance(canon, str) and isinstance(subs, list) and all(isinstance(s, str) for s in subs):
            out[canon] = tuple(subs)
    return out or default


TRENDS_URL = os.getenv("TRENDS_URL", "https://www.oddsshark.com/nhl/trends")

OUTPUT_PATH = os.getenv("OUTPUT_PATH", "nhl_trends.json")
DEBUG_SCREENSHOT = os.getenv("DEBUG_SCREENSHOT", "debug_screenshot.png")
EXTRACT_MODE = os.getenv("EXTRACT_MODE", "games").lower()   # games | trends

# browser
BROWSER_HEADLESS = _env_bool("BROWSER_HEADLESS", True)
PAGE_TIMEOUT_MS = _env_int("PAGE_TIMEOUT_MS", 60000)
READY_TIMEOUT_MS = _env_int("READY_TIMEOUT_MS", 15000)
VIEWPORT = {"width": _env_int("VIEWPORT_WIDTH", 1366), "height": _env_int("VIEWPORT_HEIGHT", 960)}
LOCALE = os.getenv("BROWSER_LOCALE", "en-US")
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
# page counts as ready once its text matches this (a W-L record)
CONTENT_MARKER = os.getenv("CONTENT_MARKER", r"\d+-\d+")

# parsing / output limits
MAX_TRENDS = _env_int("MAX_TRENDS", 20)
MAX_GAMES = _env_int("MAX_GAMES", 50)
MIN_TREND_LENGTH = _env_int("MIN_TREND_LENGTH", 20)

# logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

# canonical name -> substrings that identify it; first hit wins
TEAM_ALIASES = _env_aliases("TEAM_ALIASES_JSON", {
    "NY Rangers": ("Rangers",),
    "Boston Bruins": ("Bruins",),
    "Toronto Maple Leafs": ("Maple Leafs",),
    "Edmonton Oilers": ("Oilers",),
    "Minnesota Wild": ("Wild",),
    "Vegas Golden Knights": ("Golden Knights",),
})
