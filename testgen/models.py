"""Data classes used throughout the test generator.

All structured types for extracted features, synthesized test cases,
login input, limits and configuration live here so they can be imported
cleanly by every other module.
"""

from dataclasses import dataclass, field
from typing import Optional


class FeatureKind:
    """Structural element kinds produced by the extractor."""
    FORM = 'form'
    BUTTON = 'button'
    LINK = 'link'
    TABLE = 'table'
    NAVIGATION = 'navigation'
    MODAL = 'modal'

    ALL = (FORM, BUTTON, LINK, TABLE, NAVIGATION, MODAL)


class Priority:
    """Test case priorities, highest first."""
    CRITICAL = 'Critical'
    HIGH = 'High'
    MEDIUM = 'Medium'
    LOW = 'Low'

    ORDER = (CRITICAL, HIGH, MEDIUM, LOW)


class Scope:
    GLOBAL = 'Global'
    PAGE_SPECIFIC = 'Page-specific'


@dataclass
class FormField:
    """A single input-capable control inside a form."""
    name: str = ''
    input_type: str = ''
    placeholder: str = ''
    label: str = ''

    @property
    def display_name(self) -> str:
        return self.name or self.label or self.placeholder or self.input_type

    def signal_text(self) -> str:
        """Lowercase text used for keyword classification."""
        return f'{self.name} {self.placeholder} {self.label}'.lower()


@dataclass
class Feature:
    """A detected structural element plus its classification.

    ``in_global_region`` is the raw extraction signal (nested in page
    chrome). ``is_global`` and ``appears_on_pages`` are filled in by the
    reconciler.
    """
    kind: str
    origin_page: str
    subtype: Optional[str] = None
    attributes: dict = field(default_factory=dict)
    in_global_region: bool = False
    fingerprint: str = ''
    is_global: bool = False
    appears_on_pages: list = field(default_factory=list)

    @property
    def display_text(self) -> str:
        """Human-readable identity used in titles and dedup keys."""
        attrs = self.attributes
        if self.kind == FeatureKind.FORM:
            return attrs.get('purpose', 'Form')
        if self.kind in (FeatureKind.BUTTON, FeatureKind.LINK):
            return attrs.get('text', '')
        if self.kind == FeatureKind.TABLE:
            return attrs.get('caption') or ', '.join(attrs.get('headers', []))
        if self.kind == FeatureKind.NAVIGATION:
            return attrs.get('label') or ' | '.join(t for t, _ in attrs.get('links', []))
        if self.kind == FeatureKind.MODAL:
            return attrs.get('title', '')
        return ''

    @property
    def pages(self) -> list:
        return self.appears_on_pages or [self.origin_page]


@dataclass
class TestCase:
    """A synthesized manual/automated test-case record."""
    __test__ = False  # keep pytest from collecting this class

    title: str
    preconditions: str
    steps: list
    expected_results: str
    priority: str
    category: str
    scope: str = Scope.PAGE_SPECIFIC
    affected_pages: list = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialise with the camelCase keys the API returns."""
        return {
            'title': self.title,
            'preconditions': self.preconditions,
            'steps': list(self.steps),
            'expectedResults': self.expected_results,
            'priority': self.priority,
            'category': self.category,
            'scope': self.scope,
            'affectedPages': list(self.affected_pages),
        }


@dataclass
class LoginConfig:
    """Credentials and hints for the best-effort login."""
    login_url: str
    username: str
    password: str
    username_field: str = ''
    password_field: str = ''
    submit_selector: str = ''

    @classmethod
    def from_payload(cls, payload: Optional[dict]) -> Optional['LoginConfig']:
        """Build from a request payload.

        Accepts ``username``/``password`` or ``testUsername``/``testPassword``.
        Returns None when the login URL or either credential is missing.
        """
        if not payload:
            return None
        login_url = payload.get('loginUrl') or payload.get('login_url') or ''
        username = payload.get('username') or payload.get('testUsername') or ''
        password = payload.get('password') or payload.get('testPassword') or ''
        if not (login_url and username and password):
            return None
        return cls(
            login_url=login_url,
            username=username,
            password=password,
            username_field=payload.get('usernameField') or payload.get('username_field') or '',
            password_field=payload.get('passwordField') or payload.get('password_field') or '',
            submit_selector=payload.get('submitSelector') or payload.get('submit_selector') or '',
        )

    def __repr__(self) -> str:
        return f'LoginConfig(login_url={self.login_url!r}, username=***, password=***)'


@dataclass
class LoginResult:
    """Outcome of a login attempt."""
    success: bool
    state: str
    message: str = ''
    username_selector: str = ''
    password_selector: str = ''
    submit_method: str = ''


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

@dataclass
class ExtractionLimits:
    """Per-kind caps applied while extracting one page."""
    forms: int = 5
    buttons: int = 15
    links: int = 15
    tables: int = 3
    navigation: int = 2
    modals: int = 3
    nav_links: int = 15
    form_fields: int = 20


@dataclass
class SynthesisLimits:
    """Caps applied to synthesized test cases."""
    buttons: int = 30
    links: int = 40
    total: int = 50
    form_fill_steps: int = 5


@dataclass
class PipelineLimits:
    """Every cap in the pipeline, tunable from one place."""
    extraction: ExtractionLimits = field(default_factory=ExtractionLimits)
    synthesis: SynthesisLimits = field(default_factory=SynthesisLimits)

    @classmethod
    def for_profile(cls, profile: str) -> 'PipelineLimits':
        """Return limits for a named profile (compact, standard, extended)."""
        if profile not in LIMIT_PROFILES:
            raise ValueError(f'Unknown extraction profile: {profile}')
        buttons, links = LIMIT_PROFILES[profile]
        return cls(extraction=ExtractionLimits(buttons=buttons, links=links))


# profile -> (buttons per page, links per page)
LIMIT_PROFILES = {
    'compact': (10, 10),
    'standard': (15, 15),
    'extended': (30, 25),
}


# ---------------------------------------------------------------------------
# Configuration and results
# ---------------------------------------------------------------------------

@dataclass
class AnalyzerConfig:
    """Config for running an analysis."""
    browser_mode: str = 'remote'  # remote|local
    browserless_token: str = ''
    browserless_url: str = 'https://production-sfo.browserless.io'
    strategy: str = 'live'  # live|static
    headless: bool = True
    wait_until: str = 'networkidle'
    navigation_timeout_ms: int = 30000
    page_settle_ms: int = 2000
    login_settle_ms: int = 3000
    submit_navigation_timeout_ms: int = 15000
    request_timeout_s: float = 120.0
    login_required: bool = True
    limits: PipelineLimits = field(default_factory=PipelineLimits)

    @property
    def cdp_endpoint(self) -> str:
        """WebSocket endpoint for Playwright's connect_over_cdp."""
        base = self.browserless_url.rstrip('/')
        if base.startswith('https://'):
            base = 'wss://' + base[len('https://'):]
        elif base.startswith('http://'):
            base = 'ws://' + base[len('http://'):]
        return f'{base}?token={self.browserless_token}'


@dataclass
class AnalysisRequest:
    """One analysis request: target pages plus optional login."""
    urls: list
    login: Optional[LoginConfig] = None


@dataclass
class AnalysisResult:
    """Results for an analysis run."""
    urls: list
    tests: list
    features: list
    total_features: int
    pages_analyzed: int
    login_success: bool
    failed_pages: list = field(default_factory=list)
