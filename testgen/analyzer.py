"""Analysis orchestrator: drives login, the page loop, reconciliation and synthesis."""

import logging
import time

from .classifier import classify_feature
from .errors import (
    AnalysisTimeoutError,
    ConfigurationError,
    EmptyResultError,
    ExtractionError,
    InputError,
    LoginError,
    NavigationError,
)
from .extractor import extract_from_html, extract_from_page
from .loader import PageLoader, fetch_rendered_html, open_browser_page, require_backend
from .login import apply_login
from .models import AnalysisRequest, AnalysisResult, AnalyzerConfig
from .reconciler import reconcile_pages
from .synthesizer import synthesize_test_cases

log = logging.getLogger(__name__)


class _Deadline:
    """Outer request timeout, checked between pages and before synthesis."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds

    def check(self) -> None:
        if time.monotonic() > self.expires_at:
            raise AnalysisTimeoutError(f'Analysis exceeded the {self.seconds:g}s request timeout')


def _login(page, request: AnalysisRequest, config: AnalyzerConfig) -> bool:
    """Log in if the request asks for it. Failed verification is fatal."""
    if request.login is None:
        return False
    try:
        result = apply_login(page, request.login, config)
    except LoginError as exc:
        if config.login_required:
            raise
        log.warning('Continuing unauthenticated: %s', exc.message)
        return False

    if not result.success:
        message = f'Login failed: {result.message}'
        if result.username_selector:
            message += '. Please verify your credentials.'
        raise LoginError(
            message,
            debug={'loginState': result.state, 'submitMethod': result.submit_method},
        )
    return True


def _collect_live(request: AnalysisRequest, config: AnalyzerConfig, deadline: _Deadline, progress) -> tuple:
    pages, failed = [], []
    with open_browser_page(config) as page:
        if request.login is not None:
            progress(f'LOGGING IN AT {request.login.login_url}')
        login_success = _login(page, request, config)

        loader = PageLoader(page, config)
        for idx, url in enumerate(request.urls, start=1):
            deadline.check()
            progress(f'ANALYSING PAGE {idx}/{len(request.urls)}: {url}')
            log.info('Analysing page %d/%d: %s', idx, len(request.urls), url)
            try:
                loader.load_or_raise(url)
                features = extract_from_page(page, url, config.limits.extraction)
            except (NavigationError, ExtractionError) as exc:
                log.warning('Failed to analyse %s: %s', url, exc.message)
                progress(f'FAILED: {url}')
                failed.append({'url': url, 'error': exc.message})
                continue
            log.info('Found %d features on %s', len(features), url)
            pages.append([classify_feature(f) for f in features])

    return pages, failed, login_success


def _collect_static(request: AnalysisRequest, config: AnalyzerConfig, deadline: _Deadline, progress) -> tuple:
    if request.login is not None:
        log.warning('Login is not supported by the static strategy; analysing unauthenticated')

    pages, failed = [], []
    for idx, url in enumerate(request.urls, start=1):
        deadline.check()
        progress(f'FETCHING PAGE {idx}/{len(request.urls)}: {url}')
        try:
            html = fetch_rendered_html(url, config)
        except NavigationError as exc:
            log.warning('Failed to fetch %s: %s', url, exc.message)
            failed.append({'url': url, 'error': exc.message})
            continue
        features = extract_from_html(html, url, config.limits.extraction)
        log.info('Found %d features on %s', len(features), url)
        pages.append([classify_feature(f) for f in features])

    return pages, failed, False


def run_analysis(request: AnalysisRequest, config: AnalyzerConfig, progress_callback=None) -> AnalysisResult:
    """Run a full analysis and return structured results.

    Args:
        request: Pages to analyse and optional login configuration.
        config: Analyzer configuration (backend, strategy, limits, timeouts).
        progress_callback: Optional callable(str) receiving human-readable
            progress messages.

    Raises:
        InputError, ConfigurationError, LoginError, AnalysisTimeoutError,
        EmptyResultError. Single-page failures are logged and skipped.
    """
    progress = progress_callback or (lambda msg: None)
    if not request.urls:
        raise InputError('URL or URLs array is required')
    require_backend(config)

    deadline = _Deadline(config.request_timeout_s)
    log.info('Analysing %d page(s) with the %s strategy', len(request.urls), config.strategy)

    if config.strategy == 'live':
        pages, failed, login_success = _collect_live(request, config, deadline, progress)
    elif config.strategy == 'static':
        pages, failed, login_success = _collect_static(request, config, deadline, progress)
    else:
        raise ConfigurationError(f'Unknown extraction strategy: {config.strategy}')

    deadline.check()

    total_features = sum(len(p) for p in pages)
    features = reconcile_pages(pages)
    log.info('Total features found: %d (%d unique)', total_features, len(features))

    if not features:
        raise EmptyResultError(
            'No functional elements detected after JavaScript execution.',
            debug={'loginSuccess': login_success, 'pagesAnalyzed': len(pages), 'failedPages': failed},
        )

    progress('GENERATING TEST CASES...')
    tests = synthesize_test_cases(features, config.limits.synthesis, authenticated=login_success)
    log.info('Generated %d test cases', len(tests))
    progress('ANALYSIS COMPLETE')

    return AnalysisResult(
        urls=list(request.urls),
        tests=tests,
        features=features,
        total_features=total_features,
        pages_analyzed=len(pages),
        login_success=login_success,
        failed_pages=failed,
    )
