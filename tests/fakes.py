"""Stand-ins for playwright objects so the scraper runs without a browser."""

from contextlib import contextmanager

from playwright.sync_api import TimeoutError as PWTimeout


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    def click(self, timeout=None):
        self.page.clicks.append(self.selector)
        if self.selector not in self.page.clickable:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {self.selector}")

    def inner_text(self, timeout=None):
        if self.page.body_error:
            raise self.page.body_error
        return self.page.body

    def all_inner_texts(self):
        return list(self.page.cells)


class FakePage:
    """Just enough of playwright's Page for the scraper."""

    def __init__(self, body="", cells=(), ready=True, body_error=None, goto_error=None, clickable=()):
        self.body = body
        self.cells = cells
        self.ready = ready
        self.body_error = body_error
        self.goto_error = goto_error
        self.clickable = set(clickable)
        self.clicks = []
        self.screenshots = []
        self.closed = False
        self.opened_url = None

    def goto(self, url, wait_until=None, timeout=None):
        self.opened_url = url
        if self.goto_error:
            raise self.goto_error

    def locator(self, selector):
        return FakeLocator(self, selector)

    def wait_for_function(self, expression, arg=None, timeout=None):
        if not self.ready:
            raise PWTimeout(f"Timeout {timeout}ms exceeded.")

    def content(self):
        return f"<html><body>{self.body}</body></html>"

    def screenshot(self, path=None, full_page=False):
        self.screenshots.append(path)


def make_opener(page):
    @contextmanager
    def opener(headless=True):
        try:
            yield page
        finally:
            page.closed = True
    return opener
