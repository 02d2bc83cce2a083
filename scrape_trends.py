# scrape the trends page and write nhl_trends.json for the front end
# run this to install the libraries : pip install -e .
# run this: playwright install chromium
# then: python scrape_trends.py --mode games   (or --mode trends)

import os, sys, json, logging, argparse, tempfile, random
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Dict, Optional, Callable, Iterator

from playwright.sync_api import sync_playwright, Page, TimeoutError as PWTimeout

import trend_config as cfg
from trend_logging import setup_logging
from trend_parser import split_lines, classify_lines, is_trend_snippet, process_trend

logger = logging.getLogger("trends.scraper")

MODES = ("games", "trends")
COOKIE_BUTTONS = ["button:has-text('Accept all')", "button:has-text('Accept')", "text=Accept"]


# ---------------- browser ----------------

@contextmanager
def open_page(headless: bool = cfg.BROWSER_HEADLESS,
              timeout_ms: int = cfg.PAGE_TIMEOUT_MS) -> Iterator[Page]:
    """Yield a blank page; the browser is closed however the block exits."""
    with sync_playwright() as p:
        b = p.chromium.launch(headless=headless)
        try:
            ctx = b.new_context(viewport=cfg.VIEWPORT, locale=cfg.LOCALE, user_agent=cfg.USER_AGENT)
            page = ctx.new_page()
            page.set_default_timeout(timeout_ms)
            yield page
        finally:
            b.close()


def navigate(page: Page, url: str, timeout_ms: int = cfg.PAGE_TIMEOUT_MS) -> None:
    logger.info(f"[FETCH] {url}")
    page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    dismiss_cookies(page)


def dismiss_cookies(page: Page) -> None:
    for sel in COOKIE_BUTTONS:
        try:
            page.locator(sel).first.click(timeout=1500)
            logger.debug(f"[FETCH] clicked cookie banner via {sel}")
            break
        except Exception as e:
            logger.debug(f"[FETCH] no cookie banner at {sel}: {e}")


def wait_for_content(page: Page, marker: str = cfg.CONTENT_MARKER,
                     timeout_ms: int = cfg.READY_TIMEOUT_MS) -> bool:
    """Poll until the body text matches marker. False on timeout; the caller carries on with what is there."""
    try:
        page.wait_for_function(
            "re => new RegExp(re).test(document.body ? document.body.innerText : '')",
            arg=marker,
            timeout=timeout_ms,
        )
        return True
    except PWTimeout:
        logger.warning(f"[WARN] no content matching {marker!r} after {timeout_ms} ms")
        return False


def page_lines(page: Page) -> List[str]:
    try:
        txt = page.locator("body").inner_text(timeout=5000)
    except PWTimeout:
        txt = page.content()
    return split_lines(txt)


def cell_texts(page: Page) -> List[str]:
    # table cells, one snippet per cell
    cells = page.locator("table tr td").all_inner_texts()
    return [c.strip() for c in cells if c and c.strip()]


def save_screenshot(page: Page, path: str = cfg.DEBUG_SCREENSHOT) -> Optional[str]:
    try:
        page.screenshot(path=path, full_page=True)
        logger.info(f"[FILE] debug screenshot saved to {path}")
        return path
    except Exception as e:
        logger.debug(f"[FILE] screenshot failed: {e}")
        return None


# ---------------- documents ----------------

def display_date(now: Optional[datetime] = None) -> str:
    # "Monday, October 19"
    now = now or datetime.now()
    return f"{now:%A, %B} {now.day}"


def build_games_document(lines: List[str], now: Optional[datetime] = None,
                         max_games: int = cfg.MAX_GAMES) -> Dict:
    result = classify_lines(lines)
    return {
        "date": result.date or display_date(now),
        "generated_at": (now or datetime.now(timezone.utc)).isoformat(),
        "games": [b.to_dict() for b in result.blocks[:max_games]],
    }


def build_trends_document(snippets: List[str], now: Optional[datetime] = None,
                          max_trends: int = cfg.MAX_TRENDS, rng: Optional[random.Random] = None) -> Dict:
    raw = [s for s in snippets if is_trend_snippet(s)][:max_trends]
    return {
        "updated_at": (now or datetime.now(timezone.utc)).isoformat(),
        "date_display": display_date(now),
        "trends": [process_trend(s, rng=rng) for s in raw],
    }


def empty_document(mode: str) -> Dict:
    if mode == "games":
        return build_games_document([])
    return build_trends_document([])


def result_count(doc: Dict) -> int:
    return len(doc.get("games", doc.get("trends", [])))


def current_umask() -> int:
    old = os.umask(0)
    os.umask(old)
    return old


def write_json_atomic(path: str, doc: Dict) -> None:
    """Write doc to path in one step: temp file in the same folder, then rename over the target."""
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".trends-", suffix=".json", dir=folder)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
        # mkstemp creates 0600; give the file the usual umask-based mode
        os.chmod(tmp, 0o666 & ~current_umask())
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


# ---------------- run ----------------

def extract(page: Page, mode: str) -> Dict:
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}, expected one of {MODES}")
    wait_for_content(page)
    lines = page_lines(page)
    logger.info(f"[DATA] {len(lines)} text lines on page")
    if mode == "games":
        return build_games_document(lines)
    cells = cell_texts(page)
    return build_trends_document(cells or lines)


def scrape(mode: str = cfg.EXTRACT_MODE, url: str = cfg.TRENDS_URL, output: str = cfg.OUTPUT_PATH,
           headless: bool = cfg.BROWSER_HEADLESS, screenshot: str = cfg.DEBUG_SCREENSHOT,
           opener: Callable = open_page) -> Dict:
    """One full run: load, parse, write. Errors propagate after the debug screenshot."""
    with opener(headless=headless) as page:
        try:
            navigate(page, url)
            doc = extract(page, mode)
        except Exception:
            save_screenshot(page, screenshot)
            raise
        if not result_count(doc):
            logger.warning("[WARN] no trends found; page layout may have changed")
            save_screenshot(page, screenshot)
    write_json_atomic(output, doc)
    logger.info(f"[OK] {result_count(doc)} {mode} saved to {output}")
    return doc


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scrape betting trends into a JSON file.")
    parser.add_argument("--mode", choices=MODES, default=cfg.EXTRACT_MODE if cfg.EXTRACT_MODE in MODES else "games",
                        help="games: trends grouped per matchup; trends: one reworded record per trend.")
    parser.add_argument("--url", default=cfg.TRENDS_URL, help="Trends page to load.")
    parser.add_argument("--output", default=cfg.OUTPUT_PATH, help="JSON file to overwrite.")
    parser.add_argument("--headed", action="store_true", help="Show the browser window.")
    parser.add_argument("--print", dest="echo", action="store_true", help="Also print the JSON to stdout.")
    parser.add_argument("--placeholder-on-error", action="store_true",
                        help="On failure, write an empty document so the front end still finds a file.")
    return parser.parse_args(argv)


def main(argv=None, opener: Callable = open_page) -> int:
    args = parse_args(argv)
    setup_logging()
    logger.info(f"[START] trends scraper (mode={args.mode})")
    try:
        doc = scrape(mode=args.mode, url=args.url, output=args.output,
                     headless=not args.headed, opener=opener)
    except Exception as e:
        logger.exception(f"[ERROR] scrape failed: {e}")
        if args.placeholder_on_error:
            write_json_atomic(args.output, empty_document(args.mode))
            logger.info(f"[FILE] empty placeholder written to {args.output}")
        return 1
    if args.echo:
        print(json.dumps(doc, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
