"""
Value normalizers for scraped product fields.

Takes the raw strings produced by the platform probes (price text lifted
from arbitrary markup, image references as written in the page) and turns
them into the canonical values stored on a ``ProductRecord``.

All functions are pure (no I/O) and operate on plain strings so they
are easy to unit-test independently of Playwright.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urljoin

# =====================================================================
# 1. Price normalization
# =====================================================================

# Everything that is not part of a number: currency symbols, spaces
# (including NBSP from "R$&nbsp;99,90"), labels like "à vista".
_RE_NON_NUMERIC = re.compile(r"[^\d.,]")

# "1.234" as pt-BR storefronts print one thousand: a lone dot followed by
# exactly three digits, with a one-to-three digit integer part.
_RE_DOT_THOUSANDS = re.compile(r"[1-9]\d{0,2}\.\d{3}")


def normalize_price(raw: str | None) -> str:
    """Return *raw* as a canonical decimal string, or ``""``.

    The canonical form uses ``.`` as the decimal mark and carries no
    currency symbol or thousands separator.  The number of decimals is
    left as found.

    >>> normalize_price("R$ 1.234,56")
    '1234.56'
    >>> normalize_price("$1,234.56")
    '1234.56'
    >>> normalize_price("199.9")
    '199.9'
    >>> normalize_price("R$ 1.234")
    '1234'
    >>> normalize_price("A partir de R$ 99,90.")
    '99.90'
    >>> normalize_price("sob consulta")
    ''
    """
    if raw is None:
        return ""
    cleaned = _RE_NON_NUMERIC.sub("", str(raw))
    if not any(ch.isdigit() for ch in cleaned):
        return ""

    # "R$ 10," / "R$ 99,90.": dangling marks and sentence punctuation
    cleaned = cleaned.rstrip(".,")

    has_dot = "." in cleaned
    has_comma = "," in cleaned

    if has_dot and has_comma:
        # Whichever separator comes last is the decimal mark.
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        if cleaned.count(",") > 1:
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    elif has_dot and (cleaned.count(".") > 1 or _RE_DOT_THOUSANDS.fullmatch(cleaned)):
        cleaned = cleaned.replace(".", "")

    try:
        float(cleaned)
    except ValueError:
        return ""
    return cleaned


# =====================================================================
# 2. Image URL resolution
# =====================================================================


def is_inline_image(ref: str) -> bool:
    """True for ``data:`` URIs (base64 thumbnails, placeholder pixels)."""
    return ref.strip().lower().startswith("data:")


def resolve_image_url(ref: str, base_url: str) -> str:
    """Resolve *ref* against *base_url*.

    Absolute URLs come back unchanged.  Malformed references that
    ``urljoin`` rejects are returned as-is rather than discarded.
    """
    try:
        return urljoin(base_url, ref.strip())
    except ValueError:
        return ref


def resolve_images(refs: Iterable[str] | None, base_url: str) -> list[str]:
    """Drop inline/blank references, resolve the rest, keep first-seen order."""
    resolved: list[str] = []
    seen: set[str] = set()
    for ref in refs or ():
        if not isinstance(ref, str) or not ref.strip() or is_inline_image(ref):
            continue
        url = resolve_image_url(ref, base_url)
        if url in seen:
            continue
        seen.add(url)
        resolved.append(url)
    return resolved
