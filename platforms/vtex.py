"""
Scraper for VTEX-powered stores (VTEX IO and the legacy CMS templates).

VTEX injects structured product data into the page independently of the
rendered markup, so those sources are read before any selector:

  * ``window.__RUNTIME__.route.product``: the IO render runtime; carries
    ``items[].sellers[].commertialOffer.Price`` and ``description``.
  * ``window.dataLayer``: Google Tag Manager events (``productView``,
    ``productDetail``, ``productImpression``) that mirror the product.

Price order: runtime → data layer → VTEX price components → microdata
attributes → currency-prefixed leaf text → broad price selectors.

Description order: runtime → data layer → specification attributes →
tab-heading heuristic → VTEX description components → broad selectors.
"""

from __future__ import annotations

import logging

from handlers import Probe, text_html_pairs, text_probes
from handlers.cascade import PRICE_ATTRIBUTES_PROBE, PRICE_PATTERN_PROBE
from .base import BaseScraper
from .generic import (
    GENERIC_DESCRIPTION_SELECTORS,
    GENERIC_IMAGE_SELECTORS,
    GENERIC_TITLE_SELECTORS,
)

logger = logging.getLogger(__name__)

# ``window.__RUNTIME__`` product price.  The misspelled ``commertialOffer``
# is VTEX's own key.
JS_RUNTIME_PRICE = """() => {
    const runtime = window.__RUNTIME__;
    const product = runtime && runtime.route && runtime.route.product;
    if (!product) return '';
    const items = product.items || [];
    if (!items.length) return '';
    const sellers = items[0].sellers || [];
    if (!sellers.length) return '';
    const offer = sellers[0].commertialOffer;
    return offer && offer.Price ? String(offer.Price) : '';
}"""

JS_DATALAYER_PRICE = """() => {
    const layer = window.dataLayer;
    if (!Array.isArray(layer)) return '';
    const events = ['productView', 'productDetail', 'productImpression'];
    for (const item of layer) {
        if (!item || !events.includes(item.event)) continue;
        const ecommerce = item.ecommerce || {};
        const detail = ecommerce.detail && ecommerce.detail.products && ecommerce.detail.products[0];
        if (detail && detail.price) return String(detail.price);
        const impression = ecommerce.impressions && ecommerce.impressions[0];
        if (impression && impression.price) return String(impression.price);
    }
    return '';
}"""

# Description scripts take a mode argument: 'text' strips markup,
# 'html' returns it verbatim.  Both modes pick the same source: the first
# one with text.
JS_RUNTIME_DESCRIPTION = """mode => {
    const runtime = window.__RUNTIME__;
    const product = runtime && runtime.route && runtime.route.product;
    const raw = product && product.description;
    if (!raw) return '';
    if (mode === 'html') return String(raw);
    const div = document.createElement('div');
    div.innerHTML = String(raw);
    return (div.textContent || '').trim();
}"""

JS_DATALAYER_DESCRIPTION = """mode => {
    const layer = window.dataLayer;
    if (!Array.isArray(layer)) return '';
    for (const item of layer) {
        if (!item || (item.event !== 'productView' && item.event !== 'productDetail')) continue;
        const ecommerce = item.ecommerce || {};
        const product = ecommerce.detail && ecommerce.detail.products && ecommerce.detail.products[0];
        const raw = product && product.description;
        if (!raw) continue;
        if (mode === 'html') return String(raw);
        const div = document.createElement('div');
        div.innerHTML = String(raw);
        return (div.textContent || '').trim();
    }
    return '';
}"""

JS_DESCRIPTION_ATTRIBUTES = """mode => {
    const els = document.querySelectorAll(
        '[data-specification="description"], [data-attribute="description"], [itemprop="description"]'
    );
    for (const el of els) {
        if (!el.textContent || !el.textContent.trim()) continue;
        return mode === 'html' ? el.innerHTML : el.textContent.trim();
    }
    return '';
}"""

# Tab containers whose heading reads like "Descrição" / "Detalhes" /
# "Sobre o produto" / "Description" -> the pane content.
JS_DESCRIPTION_TABS = """mode => {
    const words = ['descrição', 'descricao', 'detalhes', 'sobre', 'description', 'details', 'about'];
    for (const container of document.querySelectorAll('.tab-content, .product-tabs, .product-details')) {
        for (const tab of container.querySelectorAll('.tab, .tab-pane, .panel')) {
            const heading = tab.querySelector('h2, h3, .title, .tab-title');
            if (!heading || !heading.textContent) continue;
            const title = heading.textContent.toLowerCase();
            if (!words.some(w => title.includes(w))) continue;
            const content = tab.querySelector('.content, .tab-content, .panel-content');
            if (!content || !content.textContent || !content.textContent.trim()) continue;
            return mode === 'html' ? content.innerHTML : content.textContent.trim();
        }
    }
    return '';
}"""

VTEX_PRICE_SELECTORS = [
    '.vtex-product-price-1-x-sellingPrice .vtex-product-price-1-x-currencyContainer',
    '.vtex-product-price-1-x-sellingPriceValue',
    '.vtex-store-components-3-x-price_sellingPrice',
    '.vtex-product-price-1-x-sellingPrice',
    '.price-best-price',
    '.skuBestPrice',
    '#product-price .skuBestPrice',
    '.productPrice .skuBestPrice',
    '.valor-por .skuPrice',
    '.preco-a-vista .skuPrice',
]

# Broad selectors tried after the leaf-text pattern.
VTEX_FALLBACK_PRICE_SELECTORS = [
    '.product-price .best-price',
    '.product-price .price',
    '.price-box .price',
    '.product__price',
    '.price',
]

VTEX_TITLE_SELECTORS = [
    '.vtex-store-components-3-x-productNameContainer',
    '.productName',
] + GENERIC_TITLE_SELECTORS

VTEX_DESCRIPTION_SELECTORS = [
    '.vtex-store-components-3-x-productDescriptionText',
    '.vtex-store-components-3-x-productDescription',
    '.vtex-product-description-0-x-container',
    '.vtex-product-description-0-x-content',
    '.vtex-product-description-0-x-text',
    '.vtex-product-summary-2-x-description',
    '.productDescription',
    '.product-specification',
    '.product-specification-content',
    '.product-details-content',
] + GENERIC_DESCRIPTION_SELECTORS

VTEX_IMAGE_SELECTORS = [
    '.vtex-store-components-3-x-productImageTag',
    '.vtex-store-components-3-x-carouselGaleryThumbs img',
    '#image-main',
    '.apresentacao #show img',
] + GENERIC_IMAGE_SELECTORS


class VtexScraper(BaseScraper):
    """Scraper for VTEX IO / legacy VTEX storefronts."""

    platform = "vtex"

    title_selectors = VTEX_TITLE_SELECTORS
    description_selectors = VTEX_DESCRIPTION_SELECTORS
    image_selectors = VTEX_IMAGE_SELECTORS

    def price_probes(self) -> list[Probe]:
        return (
            [
                Probe("runtime-price", JS_RUNTIME_PRICE),
                Probe("datalayer-price", JS_DATALAYER_PRICE),
            ]
            + text_probes(VTEX_PRICE_SELECTORS)
            + [PRICE_ATTRIBUTES_PROBE, PRICE_PATTERN_PROBE]
            + text_probes(VTEX_FALLBACK_PRICE_SELECTORS)
        )

    def description_probe_pairs(self) -> list[tuple[Probe, Probe]]:
        structured = [
            ("runtime-description", JS_RUNTIME_DESCRIPTION),
            ("datalayer-description", JS_DATALAYER_DESCRIPTION),
            ("description-attributes", JS_DESCRIPTION_ATTRIBUTES),
            ("description-tabs", JS_DESCRIPTION_TABS),
        ]
        return [
            (Probe(f"{name}:text", script, "text"), Probe(f"{name}:html", script, "html"))
            for name, script in structured
        ] + text_html_pairs(self.description_selectors)
