"""Feature classification: assign semantic subtypes to forms and buttons.

Rules are ordered ``(predicate, subtype)`` lists; the first predicate that
matches wins, so ambiguous text ("Add to filter") resolves to the
earlier-listed category. The lists are plain data so they can be tested
without a browser.
"""

from dataclasses import dataclass, replace
from typing import Callable

from .models import Feature, FeatureKind, FormField
from .patterns import (
    BUTTON_RULES,
    CONFIRM_KEYWORDS,
    DEFAULT_BUTTON_SUBTYPE,
    DEFAULT_FORM_SUBTYPE,
    EMAIL_KEYWORDS,
    FEEDBACK_KEYWORDS,
    FORM_PURPOSES,
    PASSWORD_KEYWORDS,
    PAYMENT_KEYWORDS,
    REGISTRATION_KEYWORDS,
    SEARCH_FIELD_NAMES,
    SEARCH_KEYWORDS,
)


@dataclass
class FormSignals:
    """Normalised text and attributes a form rule can inspect."""
    text: str
    names: frozenset
    types: frozenset

    @classmethod
    def from_fields(cls, fields: list) -> 'FormSignals':
        return cls(
            text=' '.join(f.signal_text() for f in fields),
            names=frozenset(f.name.lower() for f in fields if f.name),
            types=frozenset(f.input_type.lower() for f in fields if f.input_type),
        )

    def has_any(self, keywords) -> bool:
        return any(keyword in self.text for keyword in keywords)


def _is_login(s: FormSignals) -> bool:
    return s.has_any(EMAIL_KEYWORDS) and s.has_any(PASSWORD_KEYWORDS) and not s.has_any(CONFIRM_KEYWORDS)


def _is_search(s: FormSignals) -> bool:
    return s.has_any(SEARCH_KEYWORDS) or bool(s.names & SEARCH_FIELD_NAMES) or 'search' in s.types


def _is_payment(s: FormSignals) -> bool:
    return s.has_any(PAYMENT_KEYWORDS)


def _is_registration(s: FormSignals) -> bool:
    return s.has_any(REGISTRATION_KEYWORDS) or (s.has_any(EMAIL_KEYWORDS) and s.has_any(CONFIRM_KEYWORDS))


def _is_feedback(s: FormSignals) -> bool:
    return s.has_any(FEEDBACK_KEYWORDS)


FORM_RULES: list[tuple[Callable[[FormSignals], bool], str]] = [
    (_is_login, 'login'),
    (_is_search, 'search'),
    (_is_payment, 'payment'),
    (_is_registration, 'registration'),
    (_is_feedback, 'feedback'),
]


def classify_form(fields: list) -> tuple[str, str]:
    """Classify a form from its fields.

    Returns (subtype, purpose), e.g. ('search', 'Search Form').
    """
    signals = FormSignals.from_fields(fields)
    subtype = DEFAULT_FORM_SUBTYPE
    for predicate, candidate in FORM_RULES:
        if predicate(signals):
            subtype = candidate
            break
    return subtype, FORM_PURPOSES[subtype]


def classify_form_text(text: str) -> str:
    """Classify a bare field-text string such as ``"email password"``."""
    fields = [FormField(name=token) for token in text.split()]
    return classify_form(fields)[0]


def classify_button(text: str) -> str:
    """Classify a button from its display text."""
    for compiled, subtype in BUTTON_RULES:
        if compiled.search(text or ''):
            return subtype
    return DEFAULT_BUTTON_SUBTYPE


def classify_feature(feature: Feature) -> Feature:
    """Return a copy of ``feature`` with its subtype assigned.

    Virtual forms arrive pre-classified as login and keep that subtype.
    Tables, navigation blocks, modals and links are returned unchanged.
    """
    if feature.kind == FeatureKind.FORM:
        if feature.attributes.get('virtual'):
            return feature
        subtype, purpose = classify_form(feature.attributes.get('fields', []))
        attributes = {**feature.attributes, 'purpose': purpose}
        return replace(feature, subtype=subtype, attributes=attributes)

    if feature.kind == FeatureKind.BUTTON:
        return replace(feature, subtype=classify_button(feature.attributes.get('text', '')))

    return feature
