"""Tests for the command-line entry point."""

import json
from unittest.mock import patch

import pytest

import playwright_testgen
from testgen import AnalysisResult, EmptyResultError, FeatureKind, LoginError, reconcile, synthesize_test_cases


@pytest.fixture
def analysis_result(make_feature):
    features = reconcile([make_feature(FeatureKind.BUTTON, subtype='delete', text='Delete')])
    return AnalysisResult(
        urls=['https://shop.test/products'],
        tests=synthesize_test_cases(features),
        features=features,
        total_features=1,
        pages_analyzed=1,
        login_success=False,
    )


class TestScanCommand:
    """Tests for `scan`."""

    def test_text_report(self, analysis_result, capsys):
        with patch('playwright_testgen.run_analysis', return_value=analysis_result):
            code = playwright_testgen.main(['scan', 'shop.test/products'])

        assert code == 0
        assert 'Test "Delete" button functionality' in capsys.readouterr().out

    def test_json_report(self, analysis_result, capsys):
        with patch('playwright_testgen.run_analysis', return_value=analysis_result):
            playwright_testgen.main(['scan', 'https://shop.test/products', '--json'])

        data = json.loads(capsys.readouterr().out)
        assert data['success'] is True
        assert data['tests'][0]['category'] == 'delete'

    def test_options_reach_analysis(self, analysis_result):
        argv = [
            'scan', 'https://shop.test/a', 'https://shop.test/b',
            '--login-url', 'https://shop.test/login', '--username', 'qa', '--password', 'pw',
            '--static', '--profile', 'compact',
        ]
        with patch('playwright_testgen.run_analysis', return_value=analysis_result) as run:
            playwright_testgen.main(argv)

        request, config = run.call_args[0]
        assert request.urls == ['https://shop.test/a', 'https://shop.test/b']
        assert request.login.login_url == 'https://shop.test/login'
        assert config.strategy == 'static'
        assert config.limits.extraction.buttons == 10

    def test_empty_result_exit_code(self):
        error = EmptyResultError('No functional elements detected after JavaScript execution.',
                                 debug={'pagesAnalyzed': 1})
        with patch('playwright_testgen.run_analysis', side_effect=error):
            assert playwright_testgen.main(['scan', 'https://shop.test/']) == 2

    def test_analysis_error_exit_code(self):
        with patch('playwright_testgen.run_analysis', side_effect=LoginError('Login failed')):
            assert playwright_testgen.main(['scan', 'https://shop.test/']) == 1
