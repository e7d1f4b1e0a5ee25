"""
Ordered fallback cascades over in-page probes.

A *probe* is one self-contained attempt to read a field from the loaded
document: a page script plus an optional string argument (usually one CSS
selector).  A *cascade* is an ordered list of probes for one field.

Rules enforced by ``run_cascade``:
  1. Probes run strictly in order, one ``page.evaluate`` each, never
     retried.
  2. The first probe that yields a non-empty value wins; later probes are
     not evaluated.
  3. A probe that raises (selector syntax error, execution context
     destroyed, script error) counts as a miss and the cascade moves on.
  4. If every probe misses, the field's zero value is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal

logger = logging.getLogger(__name__)

FieldKind = Literal["text", "html", "image-list"]


@dataclass(frozen=True)
class Probe:
    """One extraction attempt: ``page.evaluate(script, arg)``."""

    name: str
    script: str
    arg: str | None = None

    async def run(self, page: Any) -> Any:
        return await page.evaluate(self.script, self.arg)


def zero_value(kind: FieldKind) -> Any:
    return [] if kind == "image-list" else ""


def _coerce(value: Any, kind: FieldKind) -> Any:
    """Normalize a raw probe result to the field kind; falsy means miss."""
    if value is None:
        return zero_value(kind)
    if kind == "image-list":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [v.strip() for v in value if isinstance(v, str) and v.strip()]
    if kind == "html":
        text = str(value)
        return text if text.strip() else ""
    return str(value).strip()


async def run_cascade_with_source(
    page: Any,
    probes: Iterable[Probe],
    kind: FieldKind = "text",
    *,
    label: str = "",
) -> tuple[Any, str | None]:
    """Like ``run_cascade`` but also report which probe produced the value.

    The source is ``None`` when every probe missed.
    """
    for probe in probes:
        try:
            raw = await probe.run(page)
        except Exception as exc:
            logger.debug("%s probe %s failed: %s", label or kind, probe.name, exc)
            continue
        value = _coerce(raw, kind)
        if value:
            logger.debug("%s probe %s hit", label or kind, probe.name)
            return value, probe.name
    logger.debug("%s: all probes exhausted", label or kind)
    return zero_value(kind), None


async def run_cascade(
    page: Any,
    probes: Iterable[Probe],
    kind: FieldKind = "text",
    *,
    label: str = "",
) -> Any:
    """Evaluate *probes* in order and return the first non-empty value.

    Returns ``""`` (``text``/``html``) or ``[]`` (``image-list``) when
    nothing matched.  Never raises for probe errors.
    """
    value, _ = await run_cascade_with_source(page, probes, kind, label=label)
    return value


async def run_paired_cascade(
    page: Any,
    pairs: Iterable[tuple[Probe, Probe]],
    *,
    label: str = "",
) -> tuple[str, str]:
    """Return ``(text, html)`` read from the same source.

    *pairs* holds ``(text_probe, html_probe)`` tuples over one source each.
    The text probes cascade as usual; only the markup partner of the
    winning text probe is evaluated.  ``("", "")`` when no text is found,
    ``(text, "")`` when the winner has no markup.
    """
    pairs = list(pairs)
    partners = {text_probe.name: html_probe for text_probe, html_probe in pairs}
    text, source = await run_cascade_with_source(
        page, [text_probe for text_probe, _ in pairs], "text", label=label,
    )
    if source is None:
        return "", ""
    html = await run_cascade(page, [partners[source]], "html", label=f"{label or 'text'}:html")
    return text, html


# ---------------------------------------------------------------------------
# Shared DOM scripts
# ---------------------------------------------------------------------------

# First element matching the selector -> trimmed textContent.
JS_SELECTOR_TEXT = """sel => {
    const el = document.querySelector(sel);
    return el && el.textContent ? el.textContent.trim() : '';
}"""

# First element matching the selector -> innerHTML (markup preserved).
JS_SELECTOR_HTML = """sel => {
    const el = document.querySelector(sel);
    return el ? el.innerHTML : '';
}"""

# Every element matching the selector -> first candidate URL that is not an
# inline data: placeholder, lazy-load attributes included.
JS_SELECTOR_IMAGES = """sel => {
    const urls = [];
    for (const el of document.querySelectorAll(sel)) {
        const src = [
            el.currentSrc,
            el.getAttribute('src'),
            el.getAttribute('data-src'),
            el.getAttribute('data-lazy-src'),
            el.getAttribute('data-original'),
            el.getAttribute('content'),
        ].find(c => c && c.trim() && !c.trim().startsWith('data:'));
        if (src) urls.push(src.trim());
    }
    return urls;
}"""

# Microdata / data-attribute prices: data-price, then content, then text.
JS_PRICE_ATTRIBUTES = """() => {
    for (const el of document.querySelectorAll('[data-price], [itemprop="price"]')) {
        const dataPrice = el.getAttribute('data-price');
        if (dataPrice) return dataPrice;
        const content = el.getAttribute('content');
        if (content) return content;
        if (el.textContent && el.textContent.trim()) return el.textContent.trim();
    }
    return '';
}"""

# Last resort: first leaf node whose text holds a currency-prefixed number.
# Returns only the matched amount, never the rest of the leaf text
# ("10x de R$ 9,90 sem juros" -> "R$ 9,90").
JS_PRICE_PATTERN = """() => {
    const re = /(?:R\\$|US\\$|\\$|€|£)\\s*\\d(?:[\\d.,]*\\d)?/i;
    for (const el of document.querySelectorAll('body *')) {
        if (el.children.length !== 0 || !el.textContent) continue;
        if (el.closest('script, style, noscript')) continue;
        const m = el.textContent.trim().match(re);
        if (m) return m[0];
    }
    return '';
}"""


# ---------------------------------------------------------------------------
# Probe builders
# ---------------------------------------------------------------------------


def text_probes(selectors: Iterable[str]) -> list[Probe]:
    return [Probe(f"text:{sel}", JS_SELECTOR_TEXT, sel) for sel in selectors]


def html_probes(selectors: Iterable[str]) -> list[Probe]:
    return [Probe(f"html:{sel}", JS_SELECTOR_HTML, sel) for sel in selectors]


def text_html_pairs(selectors: Iterable[str]) -> list[tuple[Probe, Probe]]:
    """``(text, html)`` probe pairs, one per selector, for ``run_paired_cascade``."""
    selectors = list(selectors)
    return list(zip(text_probes(selectors), html_probes(selectors)))


def image_probes(selectors: Iterable[str]) -> list[Probe]:
    return [Probe(f"images:{sel}", JS_SELECTOR_IMAGES, sel) for sel in selectors]


PRICE_ATTRIBUTES_PROBE = Probe("price-attributes", JS_PRICE_ATTRIBUTES)
PRICE_PATTERN_PROBE = Probe("price-pattern", JS_PRICE_PATTERN)
