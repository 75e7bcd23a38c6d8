"""FastAPI app for generating test cases from live pages."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from testgen import (
    AnalysisError,
    AnalysisTimeoutError,
    ConfigurationError,
    EmptyResultError,
    InputError,
    LoginError,
    __version__,
    build_error_response,
    build_response,
    check_connection,
    run_analysis,
)

from .config import settings
from .schemas import AnalyzeRequest

log = logging.getLogger(__name__)

SERVICE_NAME = 'Playwright Test Generator'

# HTTP status per error type; anything else is a 500.
_ERROR_STATUS = [
    (InputError, 400),
    (ConfigurationError, 500),
    (LoginError, 500),
    (AnalysisTimeoutError, 504),
    (EmptyResultError, 200),
]

app = FastAPI(title=SERVICE_NAME, version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=['*'],
    allow_headers=['*'],
)


def _error_status(exc: Exception) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(build_error_response(exc), status_code=_error_status(exc))


@app.on_event('startup')
def on_startup() -> None:
    """Configure logging and report the backend."""
    logging.basicConfig(level=settings.log_level.upper(), format='[%(levelname)s] %(message)s')
    log.info('%s running on port %s', SERVICE_NAME, settings.port)
    log.info('Browser backend configured: %s', 'Yes' if settings.backend_configured else 'No')


@app.get('/')
def index() -> dict:
    """Service status."""
    return {
        'status': 'ok',
        'service': SERVICE_NAME,
        'version': __version__,
        'browserlessConfigured': bool(settings.browserless_token),
        'browserMode': settings.browser_mode,
        'method': 'Playwright over CDP' if settings.browser_mode == 'remote' else 'Local Chromium',
    }


@app.get('/health')
def health() -> dict:
    """Health check."""
    return {'status': 'ok'}


@app.get('/test-connection')
def test_connection():
    """Render a known page through the browser backend."""
    try:
        result = check_connection(settings.analyzer_config())
    except ConfigurationError as exc:
        return _error_response(exc)
    except Exception as exc:
        log.error('Connection test failed: %s', exc)
        return JSONResponse(
            {'success': False, 'message': f'Connection test failed: {exc}'},
            status_code=500,
        )
    log.info('Loaded test page, title: %s', result['title'])
    return {'success': True, 'message': 'Browser backend connection successful', 'result': result}


@app.post('/analyze')
def analyze(payload: AnalyzeRequest):
    """Analyse one or more pages and return generated test cases."""
    try:
        request = payload.to_analysis_request()
        if payload.login_config and request.login is None:
            log.info('Login config incomplete, analysing unauthenticated')
        config = settings.analyzer_config(strategy=payload.strategy, profile=payload.profile or '')
        result = run_analysis(request, config)
    except EmptyResultError as exc:
        log.info('No features found: %s', exc.debug)
        return _error_response(exc)
    except AnalysisError as exc:
        log.error('Analysis failed: %s', exc.message)
        return _error_response(exc)
    except Exception as exc:
        log.exception('Analysis error')
        return _error_response(exc)

    return build_response(result)
