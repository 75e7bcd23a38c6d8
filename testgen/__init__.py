"""Playwright Test Generator - core package.

Re-exports all public symbols so consumers can do:
    from testgen import run_analysis, AnalyzerConfig, AnalysisRequest
"""

__version__ = '3.1.0'

# Models
from .models import (  # noqa: F401
    FeatureKind,
    Priority,
    Scope,
    FormField,
    Feature,
    TestCase,
    LoginConfig,
    LoginResult,
    ExtractionLimits,
    SynthesisLimits,
    PipelineLimits,
    LIMIT_PROFILES,
    AnalyzerConfig,
    AnalysisRequest,
    AnalysisResult,
)

# Errors
from .errors import (  # noqa: F401
    AnalysisError,
    ConfigurationError,
    InputError,
    NavigationError,
    LoginError,
    ExtractionError,
    EmptyResultError,
    AnalysisTimeoutError,
)

# Classification
from .classifier import (  # noqa: F401
    FORM_RULES,
    classify_form,
    classify_form_text,
    classify_button,
    classify_feature,
)

# Extraction
from .extractor import (  # noqa: F401
    build_features,
    extract_from_html,
    extract_from_page,
    parse_html,
)

# Reconciliation
from .reconciler import (  # noqa: F401
    compute_fingerprint,
    reconcile,
    reconcile_pages,
)

# Synthesis
from .synthesizer import (  # noqa: F401
    build_crud_workflow,
    synthesize_test_cases,
)

# URL utilities
from .url_utils import (  # noqa: F401
    resolve_target_urls,
    get_path,
    is_login_route,
)

# Page loading
from .loader import (  # noqa: F401
    PageLoad,
    PageLoader,
    ScriptResult,
    check_connection,
    fetch_rendered_html,
    open_browser_page,
)

# Login
from .login import LoginOrchestrator, LoginState, apply_login  # noqa: F401

# Reporting
from .reporting import (  # noqa: F401
    build_error_response,
    build_response,
    generate_json_report,
    generate_report,
)

# Analyzer
from .analyzer import run_analysis  # noqa: F401
