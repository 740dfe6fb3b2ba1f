"""Promotional code detection (e.g. "código: XYZ123", "!bonus")."""

import re

from sponsor_watch.models import ContentItem, PromoCode
from sponsor_watch.scanners.content_scanner import normalize_text

# --- Pre-compiled regexes (module-level for performance) ---
PROMO_PATTERNS = (
    re.compile(r"código[:\s]*([a-z0-9]{3,10})", re.IGNORECASE),
    re.compile(r"cupom[:\s]*([a-z0-9]{3,10})", re.IGNORECASE),
    re.compile(r"use[:\s]*([a-z0-9]{3,10})", re.IGNORECASE),
    re.compile(r"!([a-z0-9]{3,10})", re.IGNORECASE),
)


def detect_with_source(items: list[ContentItem]) -> list[PromoCode]:
    """Promo code matches together with the content they were found in."""
    found: list[PromoCode] = []
    for item in items:
        text = normalize_text(item)
        for pattern in PROMO_PATTERNS:
            for match in pattern.finditer(text):
                found.append(PromoCode(code=match.group(0), content_id=item.id, content_title=item.title))
    return found


def detect(items: list[ContentItem]) -> list[str]:
    """
    Every promo-code pattern match across the items, duplicates included
    (frequency feeds the risk score).
    """
    return [promo.code for promo in detect_with_source(items)]
