"""Element extraction: turn a rendered page into raw, unclassified Features.

Two strategies produce the same raw record shape:

* live: one batched ``page.evaluate()`` call against the rendered DOM
  (single browser round-trip), see ``extract_from_page``;
* static: BeautifulSoup over rendered HTML, see ``extract_from_html``.

``build_features`` then applies per-kind caps, drops empty forms and
synthesizes virtual login forms. No classification happens here beyond
tagging virtual forms as login.
"""

import logging
import re

from bs4 import BeautifulSoup
from playwright.sync_api import Page

from .errors import ExtractionError
from .models import ExtractionLimits, Feature, FeatureKind, FormField
from .patterns import (
    CREDENTIAL_INPUT_TYPES,
    EMAIL_KEYWORDS,
    FORM_PURPOSES,
    GLOBAL_REGION_RE,
    GLOBAL_REGION_ROLES,
    GLOBAL_REGION_TAGS,
    GLOBAL_REGION_TOKEN_PATTERN,
    MAX_DISPLAY_TEXT,
    PASSWORD_KEYWORDS,
)
from .url_utils import absolute_href, is_skipped_href

log = logging.getLogger(__name__)

# Hard bound on raw records per kind, before caps are applied in Python.
RAW_RECORD_BOUND = 200

_BUTTON_SELECTOR = 'button, input[type="button"], input[type="submit"], [role="button"]'
_NAV_SELECTOR = 'nav, [role="navigation"]'
_MODAL_SELECTOR = 'dialog, [role="dialog"], [role="alertdialog"], [aria-modal="true"], .modal'


# ---------------------------------------------------------------------------
# Live strategy: batched JS (single browser round-trip)
# ---------------------------------------------------------------------------

_EXTRACT_ELEMENTS_JS = '''
(opts) => {
    const regionRe = new RegExp(opts.regionPattern, 'i');
    const regionTags = new Set(opts.regionTags.map(t => t.toUpperCase()));
    const regionRoles = new Set(opts.regionRoles);
    const max = opts.maxPerKind;
    const clean = (s) => (s || '').replace(/\\s+/g, ' ').trim();

    const inRegion = (el) => {
        for (let node = el; node && node.nodeType === 1; node = node.parentElement) {
            if (node.tagName === 'BODY' || node.tagName === 'HTML') break;
            if (regionTags.has(node.tagName)) return true;
            if (regionRoles.has(node.getAttribute('role') || '')) return true;
            const cls = typeof node.className === 'string' ? node.className : '';
            if (regionRe.test(cls) || regionRe.test(node.id || '')) return true;
        }
        return false;
    };

    const labelFor = (el) => {
        if (el.id) {
            const lbl = document.querySelector('label[for="' + CSS.escape(el.id) + '"]');
            if (lbl) return clean(lbl.textContent);
        }
        const wrap = el.closest('label');
        if (wrap) return clean(wrap.textContent);
        return clean(el.getAttribute('aria-label'));
    };

    const fieldInfo = (el) => ({
        name: el.getAttribute('name') || el.id || '',
        type: (el.getAttribute('type') || el.tagName).toLowerCase(),
        placeholder: el.getAttribute('placeholder') || '',
        label: labelFor(el)
    });

    const collect = (selector, build) => {
        const out = [];
        let nodes;
        try { nodes = document.querySelectorAll(selector); } catch (e) { return out; }
        for (const el of nodes) {
            if (out.length >= max) break;
            try {
                const rec = build(el);
                if (rec) out.push(rec);
            } catch (e) {
                // skip this element
            }
        }
        return out;
    };

    const modalTitle = (el) => {
        const aria = el.getAttribute('aria-label');
        if (aria) return clean(aria);
        const ref = el.getAttribute('aria-labelledby');
        const target = ref ? document.getElementById(ref) : null;
        if (target) return clean(target.textContent);
        const heading = el.querySelector('h1, h2, h3, h4, .modal-title');
        return heading ? clean(heading.textContent) : '';
    };

    const tableInfo = (t) => {
        let headers = Array.from(t.querySelectorAll('th')).map(th => clean(th.textContent)).filter(Boolean);
        let headerRow = headers.length > 0;
        if (!headerRow && t.rows.length > 0) {
            headers = Array.from(t.rows[0].cells).map(c => clean(c.textContent)).filter(Boolean);
            headerRow = headers.length > 0;
        }
        const bodyRows = t.querySelectorAll('tbody tr').length;
        const rowCount = t.tHead ? bodyRows : Math.max(t.rows.length - (headerRow ? 1 : 0), 0);
        return {
            headers,
            rowCount,
            caption: t.caption ? clean(t.caption.textContent) : '',
            inRegion: inRegion(t)
        };
    };

    return {
        forms: collect('form', f => ({
            id: f.id || '',
            action: f.getAttribute('action') || '',
            fields: Array.from(f.querySelectorAll('input, select, textarea')).map(fieldInfo),
            inRegion: inRegion(f)
        })),
        looseInputs: collect('input, select, textarea', el =>
            el.closest('form') ? null : Object.assign(fieldInfo(el), { inRegion: inRegion(el) })),
        buttons: collect(opts.buttonSelector, el => ({
            text: clean(el.textContent),
            value: el.getAttribute('value') || '',
            ariaLabel: el.getAttribute('aria-label') || '',
            inRegion: inRegion(el)
        })),
        links: collect('a[href]', a => ({
            text: clean(a.textContent) || clean(a.getAttribute('aria-label')),
            href: a.getAttribute('href') || '',
            inRegion: inRegion(a)
        })),
        tables: collect('table', tableInfo),
        navigation: collect(opts.navSelector, n => ({
            label: clean(n.getAttribute('aria-label')),
            links: Array.from(n.querySelectorAll('a[href]')).map(a => ({
                text: clean(a.textContent),
                href: a.getAttribute('href') || ''
            })),
            inRegion: true
        })),
        modals: collect(opts.modalSelector, m => ({
            title: modalTitle(m),
            inRegion: inRegion(m)
        }))
    };
}
'''


def _script_options() -> dict:
    return {
        'regionPattern': GLOBAL_REGION_TOKEN_PATTERN,
        'regionTags': list(GLOBAL_REGION_TAGS),
        'regionRoles': list(GLOBAL_REGION_ROLES),
        'maxPerKind': RAW_RECORD_BOUND,
        'buttonSelector': _BUTTON_SELECTOR,
        'navSelector': _NAV_SELECTOR,
        'modalSelector': _MODAL_SELECTOR,
    }


def extract_from_page(page: Page, page_url: str, limits: ExtractionLimits) -> list[Feature]:
    """Extract features from a live Playwright page."""
    try:
        raw = page.evaluate(_EXTRACT_ELEMENTS_JS, _script_options())
    except Exception as exc:
        raise ExtractionError(f'Element extraction failed on {page_url}: {exc}') from exc
    return build_features(raw or {}, page_url, limits)


# ---------------------------------------------------------------------------
# Static strategy: BeautifulSoup over rendered HTML
# ---------------------------------------------------------------------------

def _clean(text) -> str:
    return re.sub(r'\s+', ' ', text or '').strip()


def _attr(el, name: str) -> str:
    value = el.get(name, '')
    if isinstance(value, list):
        return ' '.join(value)
    return value or ''


def _soup_in_region(el) -> bool:
    for node in [el, *el.parents]:
        if node.name in (None, '[document]', 'body', 'html'):
            break
        if node.name in GLOBAL_REGION_TAGS:
            return True
        if _attr(node, 'role') in GLOBAL_REGION_ROLES:
            return True
        if GLOBAL_REGION_RE.search(_attr(node, 'class')) or GLOBAL_REGION_RE.search(_attr(node, 'id')):
            return True
    return False


def _soup_label(soup: BeautifulSoup, el) -> str:
    element_id = _attr(el, 'id')
    if element_id:
        label = soup.find('label', attrs={'for': element_id})
        if label:
            return _clean(label.get_text(' '))
    wrapper = el.find_parent('label')
    if wrapper:
        return _clean(wrapper.get_text(' '))
    return _clean(_attr(el, 'aria-label'))


def _soup_field(soup: BeautifulSoup, el) -> dict:
    return {
        'name': _attr(el, 'name') or _attr(el, 'id'),
        'type': (_attr(el, 'type') or el.name).lower(),
        'placeholder': _attr(el, 'placeholder'),
        'label': _soup_label(soup, el),
    }


def _soup_table(table) -> dict:
    headers = [_clean(th.get_text(' ')) for th in table.find_all('th')]
    headers = [h for h in headers if h]
    rows = table.find_all('tr')
    header_row = bool(headers)
    if not header_row and rows:
        headers = [_clean(td.get_text(' ')) for td in rows[0].find_all(['td', 'th'])]
        headers = [h for h in headers if h]
        header_row = bool(headers)
    if table.find('thead'):
        row_count = sum(len(body.find_all('tr')) for body in table.find_all('tbody'))
    else:
        row_count = max(len(rows) - (1 if header_row else 0), 0)
    caption = table.find('caption')
    return {
        'headers': headers,
        'rowCount': row_count,
        'caption': _clean(caption.get_text(' ')) if caption else '',
        'inRegion': _soup_in_region(table),
    }


def _soup_modal_title(soup: BeautifulSoup, el) -> str:
    if _attr(el, 'aria-label'):
        return _clean(_attr(el, 'aria-label'))
    ref = _attr(el, 'aria-labelledby')
    target = soup.find(id=ref) if ref else None
    if target:
        return _clean(target.get_text(' '))
    heading = el.select_one('h1, h2, h3, h4, .modal-title')
    return _clean(heading.get_text(' ')) if heading else ''


def _soup_collect(elements, build) -> list:
    out = []
    for el in elements:
        if len(out) >= RAW_RECORD_BOUND:
            break
        try:
            record = build(el)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            log.debug('Skipping element <%s>: %s', getattr(el, 'name', '?'), exc)
            continue
        if record:
            out.append(record)
    return out


def parse_html(html: str) -> dict:
    """Parse rendered HTML into the raw record shape of the live script."""
    soup = BeautifulSoup(html or '', 'html.parser')
    return {
        'forms': _soup_collect(soup.find_all('form'), lambda f: {
            'id': _attr(f, 'id'),
            'action': _attr(f, 'action'),
            'fields': [_soup_field(soup, el) for el in f.find_all(['input', 'select', 'textarea'])],
            'inRegion': _soup_in_region(f),
        }),
        'looseInputs': _soup_collect(soup.find_all(['input', 'select', 'textarea']), lambda el: (
            None if el.find_parent('form') else {**_soup_field(soup, el), 'inRegion': _soup_in_region(el)}
        )),
        'buttons': _soup_collect(soup.select(_BUTTON_SELECTOR), lambda el: {
            'text': _clean(el.get_text(' ')),
            'value': _attr(el, 'value'),
            'ariaLabel': _attr(el, 'aria-label'),
            'inRegion': _soup_in_region(el),
        }),
        'links': _soup_collect(soup.select('a[href]'), lambda a: {
            'text': _clean(a.get_text(' ')) or _clean(_attr(a, 'aria-label')),
            'href': _attr(a, 'href'),
            'inRegion': _soup_in_region(a),
        }),
        'tables': _soup_collect(soup.find_all('table'), _soup_table),
        'navigation': _soup_collect(soup.select(_NAV_SELECTOR), lambda n: {
            'label': _clean(_attr(n, 'aria-label')),
            'links': [
                {'text': _clean(a.get_text(' ')), 'href': _attr(a, 'href')}
                for a in n.select('a[href]')
            ],
            'inRegion': True,
        }),
        'modals': _soup_collect(soup.select(_MODAL_SELECTOR), lambda m: {
            'title': _soup_modal_title(soup, m),
            'inRegion': _soup_in_region(m),
        }),
    }


def extract_from_html(html: str, page_url: str, limits: ExtractionLimits) -> list[Feature]:
    """Extract features from rendered HTML (static strategy)."""
    return build_features(parse_html(html), page_url, limits)


# ---------------------------------------------------------------------------
# Shared builder: raw records -> Features
# ---------------------------------------------------------------------------

def _field(record: dict) -> FormField:
    return FormField(
        name=record.get('name', '') or '',
        input_type=record.get('type', '') or '',
        placeholder=record.get('placeholder', '') or '',
        label=record.get('label', '') or '',
    )


def _display_ok(text: str) -> bool:
    return 0 < len(text) < MAX_DISPLAY_TEXT


def _form_feature(record: dict, page_url: str, limits: ExtractionLimits):
    fields = [_field(r) for r in record['fields'][:limits.form_fields]]
    if not fields:
        return None
    return Feature(
        kind=FeatureKind.FORM,
        origin_page=page_url,
        attributes={'fields': fields, 'virtual': False},
        in_global_region=bool(record.get('inRegion')),
    )


def _is_email_shaped(f: FormField) -> bool:
    return f.input_type == 'email' or any(k in f.signal_text() for k in EMAIL_KEYWORDS)


def _is_password_shaped(f: FormField) -> bool:
    return f.input_type == 'password' or any(k in f.signal_text() for k in PASSWORD_KEYWORDS)


def _virtual_login_form(loose_inputs: list, page_url: str):
    """Synthesize a login form from credential inputs with no <form> around them."""
    records = [r for r in loose_inputs if (r.get('type') or '') in CREDENTIAL_INPUT_TYPES]
    fields = [_field(r) for r in records]
    if len(fields) < 2:
        return None
    passwords = [f for f in fields if _is_password_shaped(f)]
    emails = [f for f in fields if _is_email_shaped(f) and f not in passwords]
    if not (passwords and emails):
        return None
    return Feature(
        kind=FeatureKind.FORM,
        origin_page=page_url,
        subtype='login',
        attributes={'fields': fields, 'virtual': True, 'purpose': FORM_PURPOSES['login']},
        in_global_region=any(r.get('inRegion') for r in records),
    )


def _button_feature(record: dict, page_url: str, limits: ExtractionLimits):
    text = _clean(record.get('text')) or _clean(record.get('value')) or _clean(record.get('ariaLabel'))
    if not _display_ok(text):
        return None
    return Feature(
        kind=FeatureKind.BUTTON,
        origin_page=page_url,
        attributes={'text': text},
        in_global_region=bool(record.get('inRegion')),
    )


def _link_feature(record: dict, page_url: str, limits: ExtractionLimits):
    href = record.get('href', '') or ''
    text = _clean(record.get('text'))
    if is_skipped_href(href) or not _display_ok(text):
        return None
    return Feature(
        kind=FeatureKind.LINK,
        origin_page=page_url,
        attributes={'text': text, 'href': absolute_href(href, page_url)},
        in_global_region=bool(record.get('inRegion')),
    )


def _table_feature(record: dict, page_url: str, limits: ExtractionLimits):
    headers = [h for h in record.get('headers', []) if h]
    row_count = int(record.get('rowCount') or 0)
    if not headers and row_count == 0:
        return None
    return Feature(
        kind=FeatureKind.TABLE,
        origin_page=page_url,
        attributes={'headers': headers, 'row_count': row_count, 'caption': record.get('caption', '')},
        in_global_region=bool(record.get('inRegion')),
    )


def _navigation_feature(record: dict, page_url: str, limits: ExtractionLimits):
    links = []
    for link in record.get('links', []):
        href = link.get('href', '')
        text = _clean(link.get('text'))
        if is_skipped_href(href) or not text:
            continue
        links.append((text, absolute_href(href, page_url)))
        if len(links) >= limits.nav_links:
            break
    if not links:
        return None
    return Feature(
        kind=FeatureKind.NAVIGATION,
        origin_page=page_url,
        attributes={'label': record.get('label', ''), 'links': links},
        in_global_region=True,
    )


def _modal_feature(record: dict, page_url: str, limits: ExtractionLimits):
    return Feature(
        kind=FeatureKind.MODAL,
        origin_page=page_url,
        attributes={'title': _clean(record.get('title')) or 'Dialog'},
        in_global_region=bool(record.get('inRegion')),
    )


def _take(records: list, builder, cap: int, page_url: str, limits: ExtractionLimits) -> list:
    """Build features in document order until ``cap`` are emitted."""
    out = []
    for record in records or []:
        if len(out) >= cap:
            break
        try:
            feature = builder(record, page_url, limits)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            log.debug('Skipping malformed %s record on %s: %s', builder.__name__, page_url, exc)
            continue
        if feature is not None:
            out.append(feature)
    return out


def build_features(raw: dict, page_url: str, limits: ExtractionLimits) -> list[Feature]:
    """Apply caps and structural filters to raw element records."""
    forms = _take(raw.get('forms'), _form_feature, limits.forms, page_url, limits)
    if len(forms) < limits.forms:
        virtual = _virtual_login_form(raw.get('looseInputs') or [], page_url)
        if virtual is not None:
            forms.append(virtual)

    features = forms
    features += _take(raw.get('buttons'), _button_feature, limits.buttons, page_url, limits)
    features += _take(raw.get('links'), _link_feature, limits.links, page_url, limits)
    features += _take(raw.get('tables'), _table_feature, limits.tables, page_url, limits)
    features += _take(raw.get('navigation'), _navigation_feature, limits.navigation, page_url, limits)
    features += _take(raw.get('modals'), _modal_feature, limits.modals, page_url, limits)

    log.debug('Extracted %d features from %s', len(features), page_url)
    return features
