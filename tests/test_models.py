"""Tests for data classes and limit profiles."""

import pytest

from testgen import AnalyzerConfig, LoginConfig, PipelineLimits, Scope, TestCase


class TestLoginConfig:
    """Tests for LoginConfig.from_payload."""

    def test_plain_credentials(self):
        login = LoginConfig.from_payload({'loginUrl': 'https://a.test/login', 'username': 'u', 'password': 'p'})
        assert (login.username, login.password) == ('u', 'p')

    def test_test_prefixed_credentials(self):
        login = LoginConfig.from_payload({
            'loginUrl': 'https://a.test/login',
            'testUsername': 'u',
            'testPassword': 'p',
            'usernameField': 'user_email',
        })
        assert login.username == 'u'
        assert login.username_field == 'user_email'

    @pytest.mark.parametrize('payload', [
        None,
        {},
        {'loginUrl': 'https://a.test/login', 'username': 'u'},
        {'username': 'u', 'password': 'p'},
    ])
    def test_incomplete_returns_none(self, payload):
        assert LoginConfig.from_payload(payload) is None

    def test_repr_hides_credentials(self):
        login = LoginConfig(login_url='https://a.test/login', username='alice', password='hunter2')
        assert 'alice' not in repr(login)
        assert 'hunter2' not in repr(login)


class TestPipelineLimits:
    """Tests for named limit profiles."""

    def test_standard_defaults(self):
        limits = PipelineLimits.for_profile('standard')
        assert (limits.extraction.buttons, limits.extraction.links) == (15, 15)
        assert limits.synthesis.total == 50

    def test_extended(self):
        limits = PipelineLimits.for_profile('extended')
        assert (limits.extraction.buttons, limits.extraction.links) == (30, 25)

    def test_unknown_profile(self):
        with pytest.raises(ValueError):
            PipelineLimits.for_profile('huge')


class TestAnalyzerConfig:
    """Tests for derived config values."""

    def test_cdp_endpoint(self):
        config = AnalyzerConfig(browserless_url='https://production-sfo.browserless.io/', browserless_token='abc')
        assert config.cdp_endpoint == 'wss://production-sfo.browserless.io?token=abc'

    def test_cdp_endpoint_plain_http(self):
        config = AnalyzerConfig(browserless_url='http://localhost:3000', browserless_token='abc')
        assert config.cdp_endpoint == 'ws://localhost:3000?token=abc'


class TestTestCase:
    """Tests for TestCase serialisation."""

    def test_to_dict_camel_case(self):
        case = TestCase(
            title='Test Search Form',
            preconditions='User is on /',
            steps=['Navigate to https://shop.test/'],
            expected_results='Results shown',
            priority='Medium',
            category='Search',
            affected_pages=['https://shop.test/'],
        )

        data = case.to_dict()

        assert data['expectedResults'] == 'Results shown'
        assert data['affectedPages'] == ['https://shop.test/']
        assert data['scope'] == Scope.PAGE_SPECIFIC
