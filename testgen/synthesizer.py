"""Test-case synthesis: map reconciled features to TestCase records.

Each kind/subtype pair has a template. A composite CRUD workflow test is
added once when a data-entry form, a table and a create/update/delete
button co-occur. Output is bounded by ``SynthesisLimits``.
"""

import logging
import re

from .models import Feature, FeatureKind, Priority, Scope, SynthesisLimits, TestCase
from .patterns import CRUD_BUTTON_SUBTYPES, NON_FILLABLE_INPUT_TYPES
from .url_utils import get_path

log = logging.getLogger(__name__)


# subtype -> (category, priority, data hint, expected result)
_FORM_TEMPLATES = {
    'login': (
        'Authentication', Priority.HIGH, 'valid credentials',
        'User is signed in and taken to the authenticated area; invalid credentials show an error message',
    ),
    'registration': (
        'User Management', Priority.HIGH, 'new, unique account details',
        'Account is created and a confirmation is shown; mismatched or missing fields are rejected',
    ),
    'payment': (
        'Payment', Priority.HIGH, 'valid test card data',
        'Payment is accepted with a confirmation; invalid card data is rejected with a clear message',
    ),
    'search': (
        'Search', Priority.MEDIUM, 'a known search term',
        'Matching results are displayed; an empty result set shows a helpful message',
    ),
    'feedback': (
        'Feedback', Priority.MEDIUM, 'a sample message',
        'Message is sent and an acknowledgement is displayed',
    ),
    'data-entry': (
        'Forms', Priority.MEDIUM, 'valid test data',
        'Form should be submitted successfully and appropriate feedback should be displayed',
    ),
}

# subtype -> (priority, extra steps after clicking, expected result)
_BUTTON_TEMPLATES = {
    'create': (
        Priority.HIGH,
        ['Fill in the required details if a form or dialog appears', 'Save or confirm the new item'],
        'A new item is created and shown, with a success confirmation',
    ),
    'update': (
        Priority.HIGH,
        ['Change one or more values of the selected item', 'Save the changes'],
        'The item shows the updated values and a success confirmation',
    ),
    'delete': (
        Priority.HIGH,
        ['Confirm the deletion if prompted'],
        'The item is removed and no longer listed; deletion asks for confirmation first',
    ),
    'export': (
        Priority.MEDIUM,
        ['Wait for the download to complete', 'Open the downloaded file'],
        'A file downloads with the expected data and format',
    ),
    'filter': (
        Priority.MEDIUM,
        ['Choose a filter or sort option'],
        'Displayed results update to match the selected criteria',
    ),
    'action': (
        Priority.MEDIUM,
        ['Verify the action completes'],
        'Button should trigger appropriate action and provide user feedback',
    ),
}


# ---------------------------------------------------------------------------
# Shared wording
# ---------------------------------------------------------------------------

def _scope(feature: Feature) -> str:
    return Scope.GLOBAL if feature.is_global else Scope.PAGE_SPECIFIC


def _preconditions(feature: Feature, authenticated: bool, logged_out: bool = False) -> str:
    if logged_out:
        who = 'User is logged out and'
    elif authenticated:
        who = 'User is authenticated and'
    else:
        who = 'User is'
    if feature.is_global:
        return f'{who} on the website'
    return f'{who} on {get_path(feature.origin_page)}'


def _navigate_step(feature: Feature) -> str:
    if feature.is_global:
        return f'Navigate to any page of the website (e.g. {feature.pages[0]})'
    return f'Navigate to {feature.origin_page}'


def _case(feature: Feature, **kwargs) -> TestCase:
    return TestCase(scope=_scope(feature), affected_pages=list(feature.pages), **kwargs)


# ---------------------------------------------------------------------------
# Per-kind templates
# ---------------------------------------------------------------------------

def _form_case(feature: Feature, limits: SynthesisLimits, authenticated: bool) -> TestCase:
    subtype = feature.subtype or 'data-entry'
    category, priority, hint, expected = _FORM_TEMPLATES.get(subtype, _FORM_TEMPLATES['data-entry'])
    purpose = feature.attributes.get('purpose', 'Form')
    fields = [
        f for f in feature.attributes.get('fields', [])
        if f.input_type not in NON_FILLABLE_INPUT_TYPES
    ]
    steps = [_navigate_step(feature), f'Locate the {purpose.lower()}']
    steps += [
        f'Fill in "{f.display_name}" field with {hint}'
        for f in fields[:limits.form_fill_steps]
    ]
    steps.append('Submit the form')
    return _case(
        feature,
        title=f'Test {purpose}',
        preconditions=_preconditions(feature, authenticated, logged_out=subtype == 'login'),
        steps=steps,
        expected_results=expected,
        priority=priority,
        category=category,
    )


def _button_case(feature: Feature, authenticated: bool) -> TestCase:
    text = feature.attributes.get('text', '')
    subtype = feature.subtype or 'action'
    priority, extra_steps, expected = _BUTTON_TEMPLATES.get(subtype, _BUTTON_TEMPLATES['action'])
    steps = [_navigate_step(feature), f'Locate the "{text}" button', 'Click the button'] + extra_steps
    return _case(
        feature,
        title=f'Test "{text}" button functionality',
        preconditions=_preconditions(feature, authenticated),
        steps=steps,
        expected_results=expected,
        priority=priority,
        category=subtype,
    )


def _link_case(feature: Feature, authenticated: bool) -> TestCase:
    text = feature.attributes.get('text', '')
    href = feature.attributes.get('href', '')
    return _case(
        feature,
        title=f'Test "{text}" navigation',
        preconditions=_preconditions(feature, authenticated),
        steps=[
            _navigate_step(feature),
            f'Click on "{text}" link',
            'Verify navigation completes',
        ],
        expected_results=f'Should navigate to {href}' if href else 'Should navigate to the correct destination',
        priority=Priority.LOW,
        category='Navigation',
    )


def _table_case(feature: Feature, authenticated: bool) -> TestCase:
    headers = feature.attributes.get('headers', [])
    row_count = feature.attributes.get('row_count', 0)
    caption = feature.attributes.get('caption', '')
    steps = [_navigate_step(feature), 'Locate the data table']
    if headers:
        steps.append(f'Verify the column headers: {", ".join(headers)}')
    steps.append(f'Verify data rows are displayed ({row_count} observed during analysis)')
    steps.append('Check sorting, filtering and pagination controls if present')
    return _case(
        feature,
        title=f'Test "{caption}" data table' if caption else 'Test data table display',
        preconditions=_preconditions(feature, authenticated),
        steps=steps,
        expected_results='Table displays the expected headers and data rows without layout errors',
        priority=Priority.MEDIUM,
        category='Data Display',
    )


def _navigation_case(feature: Feature, authenticated: bool) -> TestCase:
    links = feature.attributes.get('links', [])
    label = feature.attributes.get('label', '')
    steps = [_navigate_step(feature), 'Locate the navigation menu']
    steps += [f'Click "{text}" and verify it opens {href}' for text, href in links[:5]]
    if len(links) > 5:
        steps.append(f'Repeat for the remaining {len(links) - 5} menu links')
    return _case(
        feature,
        title=f'Test "{label}" navigation menu' if label else f'Test navigation menu ({len(links)} links)',
        preconditions=_preconditions(feature, authenticated),
        steps=steps,
        expected_results='Every menu link leads to its destination and the menu stays available',
        priority=Priority.MEDIUM,
        category='Navigation',
    )


def _modal_case(feature: Feature, authenticated: bool) -> TestCase:
    title = feature.attributes.get('title', 'Dialog')
    return _case(
        feature,
        title=f'Test "{title}" modal dialog',
        preconditions=_preconditions(feature, authenticated),
        steps=[
            _navigate_step(feature),
            f'Trigger the action that opens the "{title}" dialog',
            'Verify the dialog content is displayed',
            'Close the dialog with its close button and with the Escape key',
        ],
        expected_results='Dialog opens, shows its content and closes cleanly, returning focus to the page',
        priority=Priority.LOW,
        category='UI Interaction',
    )


# ---------------------------------------------------------------------------
# Composite CRUD workflow
# ---------------------------------------------------------------------------

def build_crud_workflow(features: list, authenticated: bool = False):
    """Return the composite CRUD test, or None if its ingredients are missing.

    Needs a data-entry form, a table and at least one create/update/delete
    button in the reconciled set.
    """
    form = next((f for f in features if f.kind == FeatureKind.FORM and f.subtype == 'data-entry'), None)
    table = next((f for f in features if f.kind == FeatureKind.TABLE), None)
    buttons = {}
    for f in features:
        if f.kind == FeatureKind.BUTTON and f.subtype in CRUD_BUTTON_SUBTYPES:
            buttons.setdefault(f.subtype, f)
    if form is None or table is None or not buttons:
        return None

    def _label(subtype: str, fallback: str) -> str:
        button = buttons.get(subtype)
        return f'Click "{button.attributes["text"]}"' if button else fallback

    field_names = [
        f.display_name for f in form.attributes.get('fields', [])
        if f.input_type not in NON_FILLABLE_INPUT_TYPES
    ]
    affected = list(dict.fromkeys(
        page for f in (table, form, *buttons.values()) for page in f.pages
    ))
    who = 'User is authenticated and' if authenticated else 'User is'

    steps = [
        f'Navigate to {table.origin_page}',
        f'{_label("create", "Open the data entry form")} to start a new record',
        f'Fill in the form ({", ".join(field_names[:5]) or "all fields"}) with unique test data and submit',
        'Verify the new record appears in the table',
        f'{_label("update", "Open the new record for editing")}, change a value and save',
        'Verify the table shows the updated value',
        f'{_label("delete", "Delete the record")} and confirm the deletion',
        'Verify the record no longer appears in the table',
    ]
    return TestCase(
        title='End-to-end CRUD workflow',
        preconditions=f'{who} on {get_path(table.origin_page)} with permission to manage records',
        steps=steps,
        expected_results='A record can be created, updated and deleted end to end, with the table reflecting each change',
        priority=Priority.CRITICAL,
        category='CRUD Workflow',
        scope=Scope.GLOBAL if len(affected) > 1 else Scope.PAGE_SPECIFIC,
        affected_pages=affected,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _dedup_key(feature: Feature) -> tuple:
    identity = re.sub(r'\s+', ' ', feature.display_text).strip().lower()
    return feature.kind, identity, '*' if feature.is_global else feature.origin_page


def _priority_rank(case: TestCase) -> int:
    return Priority.ORDER.index(case.priority) if case.priority in Priority.ORDER else len(Priority.ORDER)


def synthesize_test_cases(features: list, limits: SynthesisLimits = None, authenticated: bool = False) -> list:
    """Generate test cases for reconciled features.

    Per-kind caps are applied in processing order. The final list is
    stable-sorted by priority and truncated to ``limits.total``.
    """
    limits = limits or SynthesisLimits()
    kind_caps = {FeatureKind.BUTTON: limits.buttons, FeatureKind.LINK: limits.links}
    kind_counts: dict[str, int] = {}
    seen: set = set()
    tests = []

    for feature in features:
        key = _dedup_key(feature)
        if key in seen:
            continue
        cap = kind_caps.get(feature.kind)
        if cap is not None and kind_counts.get(feature.kind, 0) >= cap:
            continue
        seen.add(key)

        if feature.kind == FeatureKind.FORM:
            case = _form_case(feature, limits, authenticated)
        elif feature.kind == FeatureKind.BUTTON:
            case = _button_case(feature, authenticated)
        elif feature.kind == FeatureKind.LINK:
            case = _link_case(feature, authenticated)
        elif feature.kind == FeatureKind.TABLE:
            case = _table_case(feature, authenticated)
        elif feature.kind == FeatureKind.NAVIGATION:
            case = _navigation_case(feature, authenticated)
        elif feature.kind == FeatureKind.MODAL:
            case = _modal_case(feature, authenticated)
        else:
            log.debug('No template for feature kind %s', feature.kind)
            continue

        kind_counts[feature.kind] = kind_counts.get(feature.kind, 0) + 1
        tests.append(case)

    workflow = build_crud_workflow(features, authenticated)
    if workflow is not None:
        tests.append(workflow)

    tests.sort(key=_priority_rank)
    if len(tests) > limits.total:
        log.info('Truncating %d test cases to %d', len(tests), limits.total)
    return tests[:limits.total]
