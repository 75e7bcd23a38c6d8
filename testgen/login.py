"""Best-effort password-form login.

``LoginOrchestrator`` walks IDLE -> NAVIGATED_TO_LOGIN -> FIELDS_LOCATED
-> SUBMITTED -> VERIFIED. Credential fields and the submit control are
found by probing ordered selector lists (see ``patterns``); the first
match wins. There are no retries.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from .errors import LoginError
from .loader import PageLoader
from .models import AnalyzerConfig, LoginConfig, LoginResult
from .patterns import (
    ERROR_SELECTORS,
    FAILURE_KEYWORDS,
    GENERIC_CLICKABLE_SELECTOR,
    PASSWORD_SELECTORS,
    SUBMIT_SELECTORS,
    SUBMIT_TEXT_KEYWORDS,
    USERNAME_SELECTORS,
)
from .url_utils import is_login_route

log = logging.getLogger(__name__)


class LoginState:
    IDLE = 'idle'
    NAVIGATED_TO_LOGIN = 'navigated_to_login'
    FIELDS_LOCATED = 'fields_located'
    SUBMITTED = 'submitted'
    VERIFIED = 'verified'


@dataclass
class ProbeResult:
    """First matching locator from a probe, or an empty result."""
    selector: str = ''
    handle: Any = None

    @property
    def found(self) -> bool:
        return self.handle is not None


def probe_selectors(page: Page, selectors: list, label: str) -> ProbeResult:
    """Try ``selectors`` in order and return the first match."""
    for selector in selectors:
        try:
            handle = page.query_selector(selector)
        except PlaywrightError as exc:
            log.debug('%s probe %s raised: %s', label, selector, exc)
            continue
        if handle:
            log.info('Found %s field: %s', label, selector)
            return ProbeResult(selector=selector, handle=handle)
        log.debug('%s probe %s: no match', label, selector)
    return ProbeResult()


# ---------------------------------------------------------------------------
# JS snippets
# ---------------------------------------------------------------------------

_CLICK_BY_TEXT_JS = '''
(opts) => {
    const nodes = document.querySelectorAll(opts.selector);
    for (const el of nodes) {
        const text = (el.textContent || '').toLowerCase();
        if (opts.keywords.some(k => text.includes(k))) {
            el.click();
            return true;
        }
    }
    return false;
}
'''

_ERROR_TEXT_JS = '''
(opts) => {
    for (const selector of opts.selectors) {
        let nodes;
        try { nodes = document.querySelectorAll(selector); } catch (e) { continue; }
        for (const el of nodes) {
            const visible = !!(el.offsetWidth || el.offsetHeight || el.getClientRects().length);
            if (!visible) continue;
            const text = (el.textContent || '').toLowerCase();
            if (opts.keywords.some(k => text.includes(k))) {
                return (el.textContent || '').trim().substring(0, 200) || 'Login failed';
            }
        }
    }
    return '';
}
'''


class LoginOrchestrator:
    """Drive one login attempt on a shared page."""

    def __init__(self, page: Page, login: LoginConfig, config: AnalyzerConfig):
        self.page = page
        self.login = login
        self.config = config
        self.loader = PageLoader(page, config)
        self.state = LoginState.IDLE

    # -- selector lists ----------------------------------------------------

    def username_selectors(self) -> list:
        hints = [f'input[name="{self.login.username_field}"]'] if self.login.username_field else []
        return hints + USERNAME_SELECTORS

    def password_selectors(self) -> list:
        hints = [f'input[name="{self.login.password_field}"]'] if self.login.password_field else []
        return hints + PASSWORD_SELECTORS

    def submit_selectors(self) -> list:
        hints = [self.login.submit_selector] if self.login.submit_selector else []
        return hints + SUBMIT_SELECTORS

    # -- transitions -------------------------------------------------------

    def navigate(self) -> None:
        """IDLE -> NAVIGATED_TO_LOGIN. Raises LoginError if the page won't load."""
        log.info('Navigating to login page: %s', self.login.login_url)
        result = self.loader.load(self.login.login_url)
        if not result.navigation_succeeded:
            raise LoginError(
                f'Could not load login page {self.login.login_url}: {result.error}',
                debug={'loginState': self.state},
            )
        self.state = LoginState.NAVIGATED_TO_LOGIN

    def submit(self, password_handle) -> str:
        """FIELDS_LOCATED -> SUBMITTED. Returns how the form was submitted."""
        submit = probe_selectors(self.page, self.submit_selectors(), 'submit')
        if submit.found:
            log.info('Clicking login button...')
            try:
                with self.page.expect_navigation(
                    wait_until=self.config.wait_until,
                    timeout=self.config.submit_navigation_timeout_ms,
                ):
                    submit.handle.click()
            except PlaywrightTimeout:
                log.debug('No navigation followed the login click')
            method = f'click:{submit.selector}'
        elif self._click_by_text():
            log.info('Login submitted via generic clickable element')
            method = 'generic-text'
        else:
            log.info('No submit button found, pressing Enter...')
            password_handle.press('Enter')
            method = 'enter'

        self.state = LoginState.SUBMITTED
        return method

    def _click_by_text(self) -> bool:
        script = self.loader.run_script(_CLICK_BY_TEXT_JS, {
            'selector': GENERIC_CLICKABLE_SELECTOR,
            'keywords': SUBMIT_TEXT_KEYWORDS,
        })
        return script.ok and bool(script.result)

    def verify(self) -> tuple[bool, str]:
        """Inspect the settled page. Returns (success, failure message)."""
        script = self.loader.run_script(_ERROR_TEXT_JS, {
            'selectors': ERROR_SELECTORS,
            'keywords': FAILURE_KEYWORDS,
        })
        if script.ok and script.result:
            return False, str(script.result)

        try:
            password_present = self.page.query_selector('input[type="password"]') is not None
        except PlaywrightError as exc:
            log.debug('Password field check failed: %s', exc)
            password_present = False
        if password_present and is_login_route(self.page.url):
            return False, 'Still on login page - credentials may be incorrect'
        return True, ''

    # -- driver ------------------------------------------------------------

    def _finish(self, success: bool, message: str, **kwargs) -> LoginResult:
        self.state = LoginState.VERIFIED
        if success:
            log.info('Login completed successfully')
        else:
            log.warning('Login failed: %s', message)
        return LoginResult(success=success, state=self.state, message=message, **kwargs)

    def run(self) -> LoginResult:
        """Run the full attempt. Navigation failure raises LoginError."""
        self.navigate()

        username = probe_selectors(self.page, self.username_selectors(), 'username')
        password = probe_selectors(self.page, self.password_selectors(), 'password')
        if not (username.found and password.found):
            log.info('Login form not found - username: %s, password: %s', username.found, password.found)
            return self._finish(False, 'Login form not found on the page')
        self.state = LoginState.FIELDS_LOCATED

        log.info('Filling login credentials...')
        try:
            username.handle.fill(self.login.username)
            password.handle.fill(self.login.password)
            method = self.submit(password.handle)
        except PlaywrightError as exc:
            log.debug('Login interaction failed in state %s: %s', self.state, exc)
            return self._finish(False, f'Could not fill the login form: {exc}')
        if self.config.login_settle_ms:
            time.sleep(self.config.login_settle_ms / 1000)

        success, message = self.verify()
        return self._finish(
            success,
            message,
            username_selector=username.selector,
            password_selector=password.selector,
            submit_method=method,
        )


def apply_login(page: Page, login: LoginConfig, config: AnalyzerConfig) -> LoginResult:
    """Run a login attempt and return its result."""
    return LoginOrchestrator(page, login, config).run()
