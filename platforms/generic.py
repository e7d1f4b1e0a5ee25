"""
Scraper for storefronts with no recognized platform.

No platform-specific signal sources: broad selector lists covering the
usual store-builder conventions (Shopify ``product__*`` / ``product-single``,
Magento ``price-box`` / ``product-info-main``, WooCommerce and theme
galleries, schema.org microdata), with the currency-prefixed leaf-text
pattern as the last price resort.
"""

from __future__ import annotations

import logging

from handlers import Probe, text_probes
from handlers.cascade import PRICE_PATTERN_PROBE
from .base import BaseScraper

logger = logging.getLogger(__name__)

GENERIC_TITLE_SELECTORS = [
    'h1.product-name',
    '.product-title',
    '.product-name',
    '[itemprop="name"]',
    '.product__title',
    '.product-single__title',
    '.product-info h1',
    '.product-detail h1',
    '.product-essential h1',
    # Bare h1 stays last.
    'h1',
]

GENERIC_PRICE_SELECTORS = [
    '.product-price .price',
    '.product-price .current-price',
    '.product-price .sale-price',
    '.price-box .special-price',
    '.price-box .price',
    '.product__price',
    '.product-single__price',
    '[data-product-price]',
    '[data-price]',
    '[itemprop="price"]',
    '.price',
    '.product-info .price',
    '.product-essential .price',
    '.product-price',
    '.regular-price',
    '.special-price',
]

GENERIC_DESCRIPTION_SELECTORS = [
    '.product-description',
    '.product__description',
    '[itemprop="description"]',
    '.description',
    '#description',
    '.product-details',
    '.product-info-main .description',
    '.product-info-main .value',
    '.product-info .description',
    '.product-essential .description',
    '.woocommerce-product-details__short-description',
    '.tab-content',
    '.product-info',
    '.product-details-wrapper',
]

GENERIC_IMAGE_SELECTORS = [
    '.product-image img',
    '.product-gallery img',
    '.product__image img',
    '[itemprop="image"]',
    '.product-image-gallery img',
    '.product-images img',
    '.woocommerce-product-gallery__image img',
    '.product-single__photo img',
    '.swiper-slide img',
    '.gallery-image',
    '.product-image',
    '.product-photo-img',
    '.slick-slide img',
    '.carousel-item img',
]


class GenericScraper(BaseScraper):
    """Broad-selector scraper used when no platform is recognized."""

    platform = "generic"

    title_selectors = GENERIC_TITLE_SELECTORS
    description_selectors = GENERIC_DESCRIPTION_SELECTORS
    image_selectors = GENERIC_IMAGE_SELECTORS

    def price_probes(self) -> list[Probe]:
        return text_probes(GENERIC_PRICE_SELECTORS) + [PRICE_PATTERN_PROBE]
