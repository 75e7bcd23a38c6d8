"""Pre-compiled pattern tables used by extraction, classification and login.

Keyword rules, page-chrome region signals, and the ordered selector lists
probed by the login orchestrator all live here so they can be tuned
without touching the code that applies them.
"""

import re


# ---------------------------------------------------------------------------
# Button keyword rules, evaluated in order (first match wins).
# Each entry: (compiled_regex, subtype)
# ---------------------------------------------------------------------------

_BUTTON_RULES_RAW = [
    (r'\b(add|create|new)\b', 'create'),
    (r'\b(edit|update|modify)\b', 'update'),
    (r'\b(delete|remove)\b', 'delete'),
    (r'\b(export|download)\b', 'export'),
    (r'\b(filter|sort)\b', 'filter'),
]

BUTTON_RULES = [
    (re.compile(pattern, re.IGNORECASE), subtype)
    for pattern, subtype in _BUTTON_RULES_RAW
]

DEFAULT_BUTTON_SUBTYPE = 'action'
CRUD_BUTTON_SUBTYPES = frozenset(['create', 'update', 'delete'])


# ---------------------------------------------------------------------------
# Form keyword tables (substring matches against name/placeholder/label)
# ---------------------------------------------------------------------------

EMAIL_KEYWORDS = ('email', 'e-mail', 'username')
PASSWORD_KEYWORDS = ('password', 'passwd', 'pwd')
CONFIRM_KEYWORDS = ('confirm',)
SEARCH_KEYWORDS = ('search', 'query')
SEARCH_FIELD_NAMES = frozenset(['q', 's', 'k'])
PAYMENT_KEYWORDS = ('card', 'payment', 'cvv')
REGISTRATION_KEYWORDS = ('register', 'signup', 'sign_up', 'sign-up')
FEEDBACK_KEYWORDS = ('comment', 'message', 'feedback')

DEFAULT_FORM_SUBTYPE = 'data-entry'

FORM_PURPOSES = {
    'login': 'Login Form',
    'search': 'Search Form',
    'payment': 'Payment Form',
    'registration': 'Registration Form',
    'feedback': 'Feedback Form',
    'data-entry': 'Data Entry Form',
}

# Input types that carry user-typed text (virtual form detection).
CREDENTIAL_INPUT_TYPES = frozenset(['text', 'email', 'password', 'tel', 'input', ''])

# Input types never worth a "fill in" step.
NON_FILLABLE_INPUT_TYPES = frozenset(['hidden', 'submit', 'button', 'reset', 'image'])


# ---------------------------------------------------------------------------
# Page-chrome (global) region signals
# ---------------------------------------------------------------------------

GLOBAL_REGION_TAGS = ('header', 'footer', 'nav')
GLOBAL_REGION_ROLES = ('banner', 'contentinfo', 'navigation')

# Token-level match against class and id values, e.g. "site-header",
# "navbar", "main_footer". Shared verbatim with the live extraction script.
GLOBAL_REGION_TOKEN_PATTERN = r'(^|[\s_-])(header|footer|nav|navbar|navigation|topbar|masthead|site-menu)($|[\s_-])'

GLOBAL_REGION_RE = re.compile(GLOBAL_REGION_TOKEN_PATTERN, re.IGNORECASE)


# ---------------------------------------------------------------------------
# Link filtering
# ---------------------------------------------------------------------------

SKIPPED_HREF_PREFIXES = ('#', 'javascript:', 'mailto:', 'tel:')

MAX_DISPLAY_TEXT = 50


# ---------------------------------------------------------------------------
# Login probing. Order matters: attribute-name matches first, then
# placeholder/aria-label/id substrings, then generic type fallbacks.
# ---------------------------------------------------------------------------

USERNAME_SELECTORS = [
    'input[name="username"]',
    'input[name="email"]',
    'input[name="login"]',
    'input[name="user"]',
    'input[name="nom"]',
    'input[type="text"][name*="email" i]',
    'input[type="text"][name*="user" i]',
    'input[placeholder*="username" i]',
    'input[placeholder*="email" i]',
    'input[placeholder*="nom" i]',
    'input[placeholder*="utilisateur" i]',
    'input[placeholder*="identifiant" i]',
    'input[aria-label*="email" i]',
    'input[aria-label*="username" i]',
    'input[aria-label*="nom" i]',
    'input[id*="username" i]',
    'input[id*="email" i]',
    'input[id*="login" i]',
    'input[id*="user" i]',
    'input[type="email"]',
    'input[type="text"]',
]

PASSWORD_SELECTORS = [
    'input[name="password"]',
    'input[name="passwd"]',
    'input[name="pwd"]',
    'input[name="motdepasse"]',
    'input[name="mot_de_passe"]',
    'input[placeholder*="password" i]',
    'input[placeholder*="mot de passe" i]',
    'input[placeholder*="motdepasse" i]',
    'input[aria-label*="password" i]',
    'input[aria-label*="mot de passe" i]',
    'input[id*="password" i]',
    'input[id*="passwd" i]',
    'input[id*="pwd" i]',
    'input[id*="motdepasse" i]',
    'input[type="password"]',
]

_SUBMIT_TEXTS = ['Login', 'Log in', 'Sign in', 'Se connecter', 'Connexion', 'Entrer', 'Valider']

SUBMIT_SELECTORS = (
    ['button[type="submit"]', 'input[type="submit"]']
    + [f'button:has-text("{text}")' for text in _SUBMIT_TEXTS]
    + [
        'button[value*="login" i]',
        'button[value*="connexion" i]',
        'input[value*="login" i]',
        'input[value*="connexion" i]',
    ]
    # role="button" containers used by React Native Web, Vue and friends
    + [f'div[role="button"]:has-text("{text}")' for text in ('Se connecter', 'Connexion', 'Login', 'Sign in')]
    + [f'div[tabindex="0"]:has-text("{text}")' for text in ('Se connecter', 'Connexion', 'Login', 'Sign in')]
    + [f'span[role="button"]:has-text("{text}")' for text in ('Se connecter', 'Login')]
    + [
        'div[class*="btn"]:has-text("Se connecter")',
        'div[class*="btn"]:has-text("Login")',
        'div[class*="button"]:has-text("Se connecter")',
        'div[class*="button"]:has-text("Login")',
    ]
)

GENERIC_CLICKABLE_SELECTOR = (
    'button, div[role="button"], div[tabindex="0"], span[role="button"], '
    'a, div[class*="btn"], div[class*="button"]'
)

SUBMIT_TEXT_KEYWORDS = ['connect', 'login', 'log in', 'sign in', 'entrer', 'valider']


# ---------------------------------------------------------------------------
# Login verification
# ---------------------------------------------------------------------------

ERROR_SELECTORS = [
    'div[class*="error"]',
    'span[class*="error"]',
    'p[class*="error"]',
    'div[class*="alert"]',
    'div[class*="danger"]',
    'div[class*="invalid"]',
    'div[role="alert"]',
    '[aria-invalid="true"]',
]

FAILURE_KEYWORDS = [
    'incorrect', 'invalid', 'wrong', 'failed',
    'erreur', 'incorrecte', 'invalide', 'échoué', 'échec', 'echec',
]

LOGIN_ROUTE_TOKENS = ('login', 'auth', 'signin', 'sign-in', 'connexion')
