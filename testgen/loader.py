"""Page loading against the rendering backend.

The live strategy drives a Playwright page, either connected to a remote
Browserless instance over CDP or on a locally launched Chromium. The
static strategy asks Browserless' ``/content`` API for rendered HTML.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from .errors import ConfigurationError, NavigationError
from .models import AnalyzerConfig

log = logging.getLogger(__name__)

CONNECTION_TEST_URL = 'https://example.com'


@dataclass
class PageLoad:
    """Outcome of navigating to one URL."""
    url: str
    final_url: str
    navigation_succeeded: bool
    error: str = ''


@dataclass
class ScriptResult:
    """Outcome of evaluating a script in the page."""
    result: Any = None
    error: str = ''

    @property
    def ok(self) -> bool:
        return not self.error


def require_backend(config: AnalyzerConfig) -> None:
    """Reject the request before any page load if the backend is unusable."""
    if config.browser_mode not in ('remote', 'local'):
        raise ConfigurationError(f'Unknown browser mode: {config.browser_mode}')
    needs_token = config.browser_mode == 'remote' or config.strategy == 'static'
    if needs_token and not config.browserless_token:
        raise ConfigurationError('BROWSERLESS_TOKEN not configured')


@contextmanager
def open_browser_page(config: AnalyzerConfig) -> Iterator[Page]:
    """Yield a fresh page on the configured browser backend."""
    require_backend(config)
    with sync_playwright() as p:
        if config.browser_mode == 'remote':
            log.info('Connecting to remote browser at %s', config.browserless_url)
            browser = p.chromium.connect_over_cdp(config.cdp_endpoint, timeout=config.navigation_timeout_ms)
        else:
            browser = p.chromium.launch(headless=config.headless)
        try:
            context = browser.new_context()
            page = context.new_page()
            page.set_default_timeout(config.navigation_timeout_ms)
            yield page
        finally:
            browser.close()


class PageLoader:
    """Navigate and evaluate on a single shared page.

    Reusing one page keeps the authenticated session established by the
    login orchestrator.
    """

    def __init__(self, page: Page, config: AnalyzerConfig):
        self.page = page
        self.config = config

    def load(self, url: str) -> PageLoad:
        try:
            self.page.goto(url, wait_until=self.config.wait_until, timeout=self.config.navigation_timeout_ms)
        except PlaywrightTimeout as exc:
            log.warning('Navigation timed out for %s', url)
            return PageLoad(url, self.page.url, False, f'Navigation timed out: {exc}')
        except PlaywrightError as exc:
            log.warning('Navigation failed for %s: %s', url, exc)
            return PageLoad(url, self.page.url, False, str(exc))

        if self.config.page_settle_ms:
            time.sleep(self.config.page_settle_ms / 1000)
        return PageLoad(url, self.page.url, True)

    def load_or_raise(self, url: str) -> PageLoad:
        result = self.load(url)
        if not result.navigation_succeeded:
            raise NavigationError(f'Failed to load {url}: {result.error}')
        return result

    def run_script(self, source: str, arg: Any = None) -> ScriptResult:
        """Evaluate ``source`` in the page, capturing errors instead of raising."""
        try:
            return ScriptResult(result=self.page.evaluate(source, arg))
        except PlaywrightError as exc:
            log.debug('Script evaluation failed on %s: %s', self.page.url, exc)
            return ScriptResult(error=str(exc))


def fetch_rendered_html(url: str, config: AnalyzerConfig) -> str:
    """Fetch JavaScript-rendered HTML through Browserless' /content API."""
    endpoint = config.browserless_url.rstrip('/') + '/content'
    payload = {
        'url': url,
        'gotoOptions': {'waitUntil': 'networkidle0', 'timeout': config.navigation_timeout_ms},
    }
    try:
        response = requests.post(
            endpoint,
            params={'token': config.browserless_token},
            json=payload,
            timeout=config.navigation_timeout_ms / 1000 + 15,
        )
    except requests.RequestException as exc:
        raise NavigationError(f'Failed to fetch {url}: {exc}') from exc

    if not response.ok:
        raise NavigationError(f'Failed to fetch {url}: {response.status_code} {response.text[:200]}')
    log.info('Fetched %d bytes from %s', len(response.text), url)
    return response.text


def check_connection(config: AnalyzerConfig) -> dict:
    """Render a known page through the backend and report what came back."""
    with open_browser_page(config) as page:
        page.goto(CONNECTION_TEST_URL, timeout=config.navigation_timeout_ms)
        content = page.content()
        return {'title': page.title(), 'contentLength': len(content)}
