"""Tests for page loading and the /content fetch."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

from testgen import AnalyzerConfig, ConfigurationError, NavigationError, PageLoader, fetch_rendered_html
from testgen.loader import require_backend


class TestRequireBackend:
    """Tests for backend configuration checks."""

    def test_remote_without_token(self):
        with pytest.raises(ConfigurationError, match='BROWSERLESS_TOKEN not configured'):
            require_backend(AnalyzerConfig(browser_mode='remote', browserless_token=''))

    def test_local_without_token(self):
        require_backend(AnalyzerConfig(browser_mode='local', browserless_token=''))

    def test_static_needs_token_even_locally(self):
        with pytest.raises(ConfigurationError):
            require_backend(AnalyzerConfig(browser_mode='local', strategy='static', browserless_token=''))

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError, match='Unknown browser mode'):
            require_backend(AnalyzerConfig(browser_mode='firefox', browserless_token='t'))


class TestPageLoader:
    """Tests for navigation and script evaluation."""

    def test_load_success(self, mock_page, analyzer_config):
        result = PageLoader(mock_page, analyzer_config).load('https://shop.test/')

        assert result.navigation_succeeded is True
        mock_page.goto.assert_called_once_with(
            'https://shop.test/', wait_until='networkidle', timeout=analyzer_config.navigation_timeout_ms,
        )

    def test_load_timeout(self, mock_page, analyzer_config):
        mock_page.goto.side_effect = PlaywrightTimeout('Timeout 30000ms exceeded')

        result = PageLoader(mock_page, analyzer_config).load('https://shop.test/slow')

        assert result.navigation_succeeded is False
        assert result.error.startswith('Navigation timed out')

    def test_load_or_raise(self, mock_page, analyzer_config):
        mock_page.goto.side_effect = PlaywrightError('net::ERR_CONNECTION_REFUSED')

        with pytest.raises(NavigationError, match='Failed to load https://shop.test/'):
            PageLoader(mock_page, analyzer_config).load_or_raise('https://shop.test/')

    def test_run_script_captures_error(self, mock_page, analyzer_config):
        mock_page.evaluate.side_effect = PlaywrightError('ReferenceError: foo is not defined')

        script = PageLoader(mock_page, analyzer_config).run_script('() => foo')

        assert not script.ok
        assert 'ReferenceError' in script.error

    def test_run_script_result(self, mock_page, analyzer_config):
        mock_page.evaluate.return_value = 42

        script = PageLoader(mock_page, analyzer_config).run_script('() => 42')

        assert script.ok
        assert script.result == 42


class TestFetchRenderedHtml:
    """Tests for the Browserless /content call."""

    def test_posts_to_content_endpoint(self, analyzer_config):
        response = MagicMock(ok=True, text='<html></html>')
        with patch('testgen.loader.requests.post', return_value=response) as post:
            html = fetch_rendered_html('https://shop.test/', analyzer_config)

        assert html == '<html></html>'
        args, kwargs = post.call_args
        assert args[0] == 'https://production-sfo.browserless.io/content'
        assert kwargs['params'] == {'token': 'test-token'}
        assert kwargs['json']['url'] == 'https://shop.test/'

    def test_http_error(self, analyzer_config):
        response = MagicMock(ok=False, status_code=401, text='Unauthorized')
        with patch('testgen.loader.requests.post', return_value=response):
            with pytest.raises(NavigationError, match='401'):
                fetch_rendered_html('https://shop.test/', analyzer_config)

    def test_connection_error(self, analyzer_config):
        with patch('testgen.loader.requests.post', side_effect=requests.ConnectionError('refused')):
            with pytest.raises(NavigationError, match='refused'):
                fetch_rendered_html('https://shop.test/', analyzer_config)
