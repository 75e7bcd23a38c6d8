"""Report generation: human-readable text and JSON response payloads.

The text report is meant for reading in a terminal or pasting into a test
plan. The JSON payloads are what the HTTP API returns.
"""

from datetime import datetime

from .errors import AnalysisError, EmptyResultError
from .models import AnalysisResult, Priority, TestCase


# ---------------------------------------------------------------------------
# JSON payloads
# ---------------------------------------------------------------------------

def build_response(result: AnalysisResult) -> dict:
    """Success payload for a completed analysis."""
    payload = {
        'success': True,
        'tests': [t.to_dict() for t in result.tests],
        'pagesAnalyzed': result.pages_analyzed,
        'loginSuccess': result.login_success,
        'stats': {
            'totalFeatures': result.total_features,
            'uniqueFeatures': len(result.features),
            'globalFeatures': sum(1 for f in result.features if f.is_global),
            'tests': len(result.tests),
        },
    }
    if result.failed_pages:
        payload['debug'] = {'failedPages': result.failed_pages}
    return payload


def build_error_response(exc: Exception) -> dict:
    """Failure payload. Never carries a stack trace."""
    if isinstance(exc, AnalysisError):
        payload = {'success': False, 'message': exc.message, 'tests': []}
        if exc.debug:
            payload['debug'] = exc.debug
        return payload
    return {'success': False, 'message': str(exc) or 'Analysis failed', 'tests': []}


def generate_json_report(result: AnalysisResult) -> dict:
    """JSON report with feature detail, for offline inspection."""
    report = build_response(result)
    report['urls'] = list(result.urls)
    report['features'] = [
        {
            'kind': f.kind,
            'subtype': f.subtype,
            'text': f.display_text,
            'fingerprint': f.fingerprint,
            'isGlobal': f.is_global,
            'appearsOnPages': list(f.appears_on_pages),
        }
        for f in result.features
    ]
    return report


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------

def _section_header(result: AnalysisResult, timestamp: str) -> list[str]:
    return [
        '=' * 65,
        '              GENERATED TEST CASES',
        '=' * 65,
        f'Pages Requested: {len(result.urls)}',
        f'Pages Analysed: {result.pages_analyzed}',
        f'Login: {"succeeded" if result.login_success else "not used"}',
        f'Date: {timestamp}',
        '',
        f'Features: {result.total_features} found, {len(result.features)} unique',
        f'Test Cases: {len(result.tests)}',
        '',
    ]


def _section_failed_pages(result: AnalysisResult) -> list[str]:
    if not result.failed_pages:
        return []
    lines = ['PAGES SKIPPED', '-' * 65]
    for failure in result.failed_pages:
        lines.append(f'  {failure["url"]}')
        lines.append(f'     -> {failure["error"]}')
    lines.append('')
    return lines


def _format_case(index: int, case: TestCase) -> list[str]:
    lines = [
        f'{index}. {case.title}',
        f'   Priority: {case.priority}   Scope: {case.scope}',
        f'   Preconditions: {case.preconditions}',
        '   Steps:',
    ]
    lines += [f'     {n}. {step}' for n, step in enumerate(case.steps, start=1)]
    lines.append(f'   Expected: {case.expected_results}')
    if len(case.affected_pages) > 1:
        lines.append(f'   Pages: {len(case.affected_pages)}')
    lines.append('')
    return lines


def _section_cases(tests: list) -> list[str]:
    by_category: dict[str, list] = {}
    for case in tests:
        by_category.setdefault(case.category, []).append(case)

    lines = []
    index = 1
    for category, cases in by_category.items():
        lines += [category.upper(), '-' * 65]
        for case in cases:
            lines += _format_case(index, case)
            index += 1
    return lines


def _section_priority_summary(tests: list) -> list[str]:
    counts = {p: sum(1 for t in tests if t.priority == p) for p in Priority.ORDER}
    summary = ', '.join(f'{p}: {n}' for p, n in counts.items() if n)
    return ['=' * 65, f'By priority: {summary or "none"}', '=' * 65]


def generate_report(result: AnalysisResult) -> str:
    """Build the plain-text report for an analysis."""
    timestamp = datetime.now().strftime('%Y-%m-%d %H:%M')
    lines = _section_header(result, timestamp)
    lines += _section_failed_pages(result)
    lines += _section_cases(result.tests)
    lines += _section_priority_summary(result.tests)
    return '\n'.join(lines)


def describe_empty_result(exc: EmptyResultError) -> str:
    """One-line explanation used by the CLI when nothing was found."""
    pages = exc.debug.get('pagesAnalyzed', 0)
    return f'{exc.message} ({pages} page(s) analysed)'
