"""Cross-page reconciliation: fingerprint, merge and flag global features.

Reconciliation is a pure fold over the per-page feature lists. Input
features are never mutated; the output holds one copy per fingerprint
with the pages it was seen on, in first-seen order.
"""

import logging
import re
from dataclasses import replace
from itertools import chain

from .models import Feature, FeatureKind

log = logging.getLogger(__name__)


def _norm(text) -> str:
    return re.sub(r'\s+', ' ', str(text or '')).strip().lower()


def compute_fingerprint(feature: Feature) -> str:
    """Deterministic identity key for a feature.

    Made of the kind, the normalised display identity and a structural
    discriminator. Collections are sorted so DOM traversal order does
    not change the key.
    """
    attrs = feature.attributes
    kind = feature.kind

    if kind == FeatureKind.FORM:
        names = sorted({_norm(f.name or f.placeholder or f.label or f.input_type) for f in attrs.get('fields', [])})
        return f'form:{feature.subtype or ""}:{",".join(names)}'

    if kind == FeatureKind.BUTTON:
        return f'button:{_norm(attrs.get("text"))}'

    if kind == FeatureKind.LINK:
        return f'link:{_norm(attrs.get("text"))}:{attrs.get("href", "")}'

    if kind == FeatureKind.TABLE:
        headers = sorted(_norm(h) for h in attrs.get('headers', []))
        return f'table:{_norm(attrs.get("caption"))}:{",".join(headers)}'

    if kind == FeatureKind.NAVIGATION:
        hrefs = sorted({href for _text, href in attrs.get('links', [])})
        return f'navigation:{",".join(hrefs)}'

    if kind == FeatureKind.MODAL:
        return f'modal:{_norm(attrs.get("title"))}'

    return f'{kind}:{_norm(feature.display_text)}'


def reconcile(features) -> list[Feature]:
    """Deduplicate features by fingerprint.

    Merges ``appears_on_pages`` (no duplicates, insertion order) and ORs
    the region signal. ``is_global`` is computed in a finalisation pass
    once every feature has been seen, since the multi-page signal is only
    known at the end.
    """
    merged: dict[str, Feature] = {}

    for feature in features:
        fingerprint = compute_fingerprint(feature)
        pages = feature.appears_on_pages or [feature.origin_page]

        existing = merged.get(fingerprint)
        if existing is None:
            merged[fingerprint] = replace(
                feature,
                fingerprint=fingerprint,
                appears_on_pages=list(dict.fromkeys(pages)),
            )
            continue

        for page in pages:
            if page not in existing.appears_on_pages:
                existing.appears_on_pages.append(page)
        existing.in_global_region = existing.in_global_region or feature.in_global_region

    unique = [
        replace(f, is_global=f.in_global_region or len(f.appears_on_pages) > 1)
        for f in merged.values()
    ]
    log.debug('Reconciled into %d unique features', len(unique))
    return unique


def reconcile_pages(pages: list) -> list[Feature]:
    """Reconcile a list of per-page feature lists."""
    return reconcile(chain.from_iterable(pages))
