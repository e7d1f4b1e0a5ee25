"""
Product extraction entry point and platform router.

``extract(page, url, store_type)`` is the only operation callers need: it
picks the platform scraper and returns a ``ProductRecord``.

Routing order:
  1. An explicit store-type hint naming a known platform.
  2. Platform markers in the URL.
  3. Generic: optionally upgraded by sniffing the loaded page for a
     platform runtime (``window.__RUNTIME__``) or host, when no hint was
     given.
"""

from __future__ import annotations

import logging
from typing import Any

from config.stores import (
    DEFAULT_PLATFORM,
    detect_platform_from_url,
    resolve_platform_alias,
)
from models import ProductRecord
from platforms import BaseScraper, GenericScraper, MercadoLivreScraper, VtexScraper

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Platform router
# ---------------------------------------------------------------------------

SCRAPER_MAP: dict[str, type[BaseScraper]] = {
    "vtex": VtexScraper,
    "mercadolivre": MercadoLivreScraper,
    "generic": GenericScraper,
}

JS_SNIFF_PLATFORM = """() => {
    if (window.__RUNTIME__ && window.__RUNTIME__.route) return 'vtex';
    const href = (window.location && window.location.href || '').toLowerCase();
    if (href.includes('vtex')) return 'vtex';
    if (href.includes('mercadolivre') || href.includes('mercadolibre')) return 'mercadolivre';
    return '';
}"""


def detect_platform(store_type: str | None, url: str) -> str:
    """Return the platform key for a hint/URL pair.  Never fails."""
    return (
        resolve_platform_alias(store_type)
        or detect_platform_from_url(url)
        or DEFAULT_PLATFORM
    )


def select_scraper(store_type: str | None, url: str) -> BaseScraper:
    """Return a fresh scraper instance for *store_type* / *url*."""
    return SCRAPER_MAP[detect_platform(store_type, url)]()


async def sniff_platform(page: Any) -> str | None:
    """Inspect the loaded page for platform fingerprints."""
    try:
        found = await page.evaluate(JS_SNIFF_PLATFORM)
    except Exception as exc:
        logger.debug("Platform sniff failed: %s", exc)
        return None
    return found if found in SCRAPER_MAP else None


async def extract(page: Any, url: str, store_type: str | None = None) -> ProductRecord:
    """Extract the product on *page* (already navigated to *url*).

    Raises ``PageUnavailableError`` when the page handle is unusable;
    otherwise always returns a fully shaped record.
    """
    scraper = select_scraper(store_type, url)
    if isinstance(scraper, GenericScraper) and resolve_platform_alias(store_type) is None:
        BaseScraper.ensure_page(page)
        sniffed = await sniff_platform(page)
        if sniffed and sniffed != scraper.platform:
            logger.info("Page fingerprint matches %s: switching scraper", sniffed)
            scraper = SCRAPER_MAP[sniffed]()
    logger.info("Using %s for %s (store_type=%s)", type(scraper).__name__, url, store_type)
    return await scraper.extract(page, url)
