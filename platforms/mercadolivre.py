"""
Scraper for MercadoLivre / MercadoLibre listing pages.

Quirks handled here:

  * **Split prices**: the price renders as separate integer
    (``andes-money-amount__fraction``, with ``.`` thousands separators) and
    cents (``andes-money-amount__cents``) nodes, reconstructed into one
    comma-decimal string before the normalizer sees it.
  * **Pictures**: an inline script carries the full gallery as
    ``"picture":"…"`` entries next to a ``"thumbnail":`` key.  File names end
    in a size code (``…-F.jpg``, ``…-V.webp``); ``-O`` is the original
    upload, so every image is rewritten to that variant.
  * **Lazy description**: ``.ui-pdp-description__content`` is filled only
    after the section scrolls into view.  When the description is missing
    and the page is a real listing (product id resolvable), the section is
    scrolled into view and re-probed.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from handlers import Probe, image_probes, reveal_by_scroll, run_cascade
from handlers.cascade import PRICE_PATTERN_PROBE
from .base import BaseScraper

logger = logging.getLogger(__name__)

ML_PRICE_LINE = '.ui-pdp-price__second-line'

# Integer part + cents -> "1234,56".  Falls through (empty) when the
# integer node is missing.
JS_SPLIT_PRICE = """line => {
    const fraction = document.querySelector(line + ' .andes-money-amount__fraction');
    if (!fraction || !fraction.textContent || !fraction.textContent.trim()) return '';
    let price = fraction.textContent.trim().replace(/\\./g, '');
    const cents = document.querySelector(line + ' .andes-money-amount__cents');
    if (cents && cents.textContent && cents.textContent.trim()) {
        price += ',' + cents.textContent.trim();
    }
    return price;
}"""

# Integer-only price node; its dots are always thousands separators.
JS_FRACTION_TEXT = """sel => {
    const el = document.querySelector(sel);
    return el && el.textContent ? el.textContent.trim().replace(/\\./g, '') : '';
}"""

# Gallery pictures from the embedded product state script.
JS_SCRIPT_PICTURES = """() => {
    for (const script of document.querySelectorAll('script')) {
        const text = script.textContent || '';
        if (!text.includes('"thumbnail":')) continue;
        const urls = [];
        const re = /"picture":"([^"]+)"/g;
        let m;
        while ((m = re.exec(text)) !== null) {
            urls.push(m[1].replace(/\\\\u002F/gi, '/').replace(/\\\\\\//g, '/'));
        }
        if (urls.length) return urls;
    }
    return [];
}"""

# Gallery <img> tags: zoom variant first, then src, then lazy src.  A data:
# placeholder in src gives way to the lazy attribute.
JS_GALLERY_IMAGES = """sel => {
    const urls = [];
    for (const img of document.querySelectorAll(sel)) {
        const src = ['data-zoom', 'src', 'data-src']
            .map(name => img.getAttribute(name))
            .find(c => c && c.trim() && !c.trim().startsWith('data:'));
        if (src && !urls.includes(src.trim())) urls.push(src.trim());
    }
    return urls;
}"""

JS_ITEM_ID = """() => {
    for (const script of document.querySelectorAll('script')) {
        const m = (script.textContent || '').match(/"item_id":"([^"]+)"/);
        if (m) return m[1];
    }
    return '';
}"""

ML_PRICE_SELECTORS = [
    '.ui-pdp-price__second-line .andes-money-amount__fraction',
    '.price-tag-fraction',
    '.ui-pdp-price__part .andes-money-amount__fraction',
    '.ui-pdp-container .andes-money-amount__fraction',
]

ML_TITLE_SELECTORS = [
    '.ui-pdp-title',
    '.item-title h1',
    '.item-title',
    'h1.ui-pdp-title',
    'h1',
]

ML_DESCRIPTION_SELECTORS = [
    '.ui-pdp-description__content',
    '.item-description .content',
    '#description .content',
    '.description-content',
]

ML_GALLERY_SELECTORS = [
    '.ui-pdp-gallery__figure img',
    '.ui-pdp-image',
    '.ui-pdp-thumbnail__image',
    '.slick-slide img',
]

ML_DESCRIPTION_SECTION = '.ui-pdp-description'
ML_LAZY_DESCRIPTION_SELECTORS = ['.ui-pdp-description__content']

# MLB-1234567890 (Brazil), MLA/MLM/MLC… for the other sites; catalog
# pages use /p/MLB12345678.
_RE_ITEM_ID = re.compile(r"ML[A-Z]-?(\d+)", re.IGNORECASE)
_RE_CATALOG_ID = re.compile(r"/p/([^?/#]+)")

# Size code before the extension: "D_NQ_NP_2X_123-MLB456-F.webp"
_RE_SIZE_CODE = re.compile(r"-[A-Z]\.(jpe?g|png|webp)", re.IGNORECASE)


def upgrade_picture_url(url: str) -> str:
    """Rewrite the size-code token to ``-O`` (original resolution)."""
    return _RE_SIZE_CODE.sub(r"-O.\1", url, count=1)


def item_id_from_url(url: str) -> str:
    """Return the listing/catalog id embedded in *url*, or ``""``."""
    m = _RE_ITEM_ID.search(url or "") or _RE_CATALOG_ID.search(url or "")
    return m.group(1) if m else ""


class MercadoLivreScraper(BaseScraper):
    """Scraper for MercadoLivre / MercadoLibre product listings."""

    platform = "mercadolivre"

    title_selectors = ML_TITLE_SELECTORS
    description_selectors = ML_DESCRIPTION_SELECTORS

    def price_probes(self) -> list[Probe]:
        return (
            [Probe("split-price", JS_SPLIT_PRICE, ML_PRICE_LINE)]
            + [Probe(f"fraction:{sel}", JS_FRACTION_TEXT, sel) for sel in ML_PRICE_SELECTORS]
            + [PRICE_PATTERN_PROBE]
        )

    def image_probes(self) -> list[Probe]:
        return (
            [Probe("script-pictures", JS_SCRIPT_PICTURES)]
            + [Probe(f"gallery:{sel}", JS_GALLERY_IMAGES, sel) for sel in ML_GALLERY_SELECTORS]
            + image_probes(['[itemprop="image"]'])
        )

    def finalize_images(self, images: list[str]) -> list[str]:
        return [upgrade_picture_url(img) for img in images]

    async def follow_up(self, page: Any, url: str, fields: dict[str, Any]) -> dict[str, Any]:
        min_chars = self.settings["min_description_chars"]
        if len(fields["description"]) >= min_chars:
            return fields

        item_id = await self.resolve_item_id(page, url)
        if not item_id:
            logger.info("[%s] No item id: skipping lazy description", self.platform)
            return fields

        logger.info("[%s] Item %s: loading lazy description", self.platform, item_id)
        text, html = await reveal_by_scroll(
            page,
            ML_DESCRIPTION_SECTION,
            ML_LAZY_DESCRIPTION_SELECTORS,
            wait_ms=self.settings["lazy_description_wait_ms"],
            label=self.platform,
        )
        if text:
            fields["description"] = text
            fields["description_html"] = html
            logger.info("[%s] Lazy description loaded (%d chars)", self.platform, len(text))
        return fields

    async def resolve_item_id(self, page: Any, url: str) -> str:
        item_id = item_id_from_url(url)
        if item_id:
            return item_id
        return await run_cascade(
            page, [Probe("script-item-id", JS_ITEM_ID)], "text",
            label=f"{self.platform}:item_id",
        )
