#!/usr/bin/env python3
"""
Playwright Test Generator
Renders pages through a headless browser, detects forms, buttons, links,
tables, navigation and dialogs, and writes test cases for them.
Requires: pip install -e . && playwright install chromium (for --local)

Usage:
    playwright_testgen.py serve [--port 3001]
    playwright_testgen.py scan URL [URL ...] [--login-url ... --username ... --password ...]
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from urllib.parse import urlparse

from testgen import (
    AnalysisError,
    AnalysisRequest,
    EmptyResultError,
    LIMIT_PROFILES,
    LoginConfig,
    generate_json_report,
    generate_report,
    resolve_target_urls,
    run_analysis,
)
from testgen.reporting import describe_empty_result

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='[%(levelname)s] %(message)s',
)
log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate test cases from rendered web pages.')
    sub = parser.add_subparsers(dest='command', required=True)

    serve = sub.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', default='0.0.0.0')
    serve.add_argument('--port', type=int, default=None)

    scan = sub.add_parser('scan', help='Analyse pages and print test cases')
    scan.add_argument('urls', nargs='+')
    scan.add_argument('--login-url', default='')
    scan.add_argument('--username', default='')
    scan.add_argument('--password', default='')
    scan.add_argument('--static', action='store_true', help='Use the /content HTML strategy')
    scan.add_argument('--local', action='store_true', help='Launch a local Chromium instead of Browserless')
    scan.add_argument('--profile', choices=sorted(LIMIT_PROFILES), default=None)
    scan.add_argument('--json', action='store_true', help='Print the JSON report')
    scan.add_argument('--save', action='store_true', help='Also write .txt and .json reports')
    return parser


def _serve(args) -> None:
    import uvicorn
    from server.config import settings

    uvicorn.run('server.app:app', host=args.host, port=args.port or settings.port,
                log_level=settings.log_level.lower())


def _save_reports(result) -> None:
    domain = urlparse(result.urls[0]).netloc.replace('.', '_').replace(':', '_')
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    filename = f'testcases_{domain}_{timestamp}.txt'
    json_filename = f'testcases_{domain}_{timestamp}.json'

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(generate_report(result))
    with open(json_filename, 'w', encoding='utf-8') as f:
        json.dump(generate_json_report(result), f, indent=2)

    log.info('Report saved to: %s', filename)
    log.info('JSON saved to: %s', json_filename)


def _scan(args) -> int:
    from server.config import settings

    config = settings.analyzer_config(strategy='static' if args.static else 'live', profile=args.profile or '')
    if args.local:
        config.browser_mode = 'local'
        config.headless = True

    try:
        request = AnalysisRequest(
            urls=resolve_target_urls(urls=args.urls),
            login=LoginConfig.from_payload({
                'loginUrl': args.login_url,
                'username': args.username,
                'password': args.password,
            }),
        )
        result = run_analysis(request, config, progress_callback=lambda msg: log.info(msg))
    except EmptyResultError as exc:
        log.warning(describe_empty_result(exc))
        return 2
    except AnalysisError as exc:
        log.error(exc.message)
        return 1

    if args.json:
        print(json.dumps(generate_json_report(result), indent=2))
    else:
        print('\n' + generate_report(result))
    if args.save:
        _save_reports(result)
    return 0


def main(argv=None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    if args.command == 'serve':
        _serve(args)
        return 0
    return _scan(args)


if __name__ == '__main__':
    sys.exit(main())
