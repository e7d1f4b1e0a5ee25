"""
Abstract base class for all storefront platform scrapers.

Every platform runs the same pipeline against an already-loaded page:

  1. Price cascade: price has the most platform-specific signal sources
     (runtime state objects, analytics data layers, split DOM prices) so it
     runs on its own, first.
  2. Combined field pass: title, description (text and markup from one
     source) and images, each with its own probe list.
  3. Platform follow-up: optional hook (MercadoLivre lazy description).
  4. Description tab reveal: only when the description is still empty.
  5. Record build: price normalization, HTML fallback, image resolution.

Subclasses only supply probe lists and, where needed, override the hooks.
Scrapers hold no per-page state, so one instance may serve concurrent
scrapes on distinct pages.  The page lifecycle (launch, navigation,
close) belongs to the caller.
"""

from __future__ import annotations

import abc
import logging
from typing import Any

from config.stores import PLATFORM_DEFAULTS
from handlers import (
    Probe,
    image_probes,
    reveal_description_tab,
    run_cascade,
    run_cascade_with_source,
    run_paired_cascade,
    text_html_pairs,
    text_probes,
)
from models import ProductRecord
from parser import normalize_price, resolve_images

logger = logging.getLogger(__name__)


class PageUnavailableError(RuntimeError):
    """The page handle is missing or closed; nothing can be extracted."""


class BaseScraper(abc.ABC):
    """Skeleton shared by every platform scraper.

    Usage::

        scraper = VtexScraper()
        record = await scraper.extract(page, url)
    """

    platform: str = ""

    # Selector lists for the combined field pass.  Subclasses replace them.
    title_selectors: list[str] = []
    description_selectors: list[str] = []
    image_selectors: list[str] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @property
    def settings(self) -> dict[str, Any]:
        return PLATFORM_DEFAULTS[self.platform]

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def extract(self, page: Any, url: str) -> ProductRecord:
        """Extract a ``ProductRecord`` from the page currently loaded.

        Raises ``PageUnavailableError`` only when *page* itself is unusable;
        fields that cannot be found come back empty.
        """
        self.ensure_page(page)
        logger.info("[%s] Extracting %s", self.platform, url)

        raw_price = await self.extract_price(page)
        fields = await self.extract_fields(page)
        fields = await self.follow_up(page, url, fields)

        if not fields["description"]:
            text, html = await reveal_description_tab(
                page,
                wait_ms=self.settings["reveal_wait_ms"],
                label=self.platform,
            )
            if text:
                fields["description"] = text
                fields["description_html"] = html

        record = self.build_record(url, raw_price, fields)
        logger.info(
            "[%s] Done: title=%r price=%r description=%d chars images=%d",
            self.platform, record.title[:60], record.price,
            len(record.description), len(record.images),
        )
        return record

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    @staticmethod
    def ensure_page(page: Any) -> None:
        if page is None:
            raise PageUnavailableError("No page handle supplied")
        try:
            closed = page.is_closed()
        except Exception as exc:
            raise PageUnavailableError(f"Page handle is unusable: {exc}") from exc
        if closed:
            raise PageUnavailableError("Page is closed")

    async def extract_price(self, page: Any) -> str:
        price, source = await run_cascade_with_source(
            page, self.price_probes(), "text", label=f"{self.platform}:price",
        )
        if source:
            logger.info("[%s] Price %r via %s", self.platform, price, source)
        else:
            logger.info("[%s] No price found", self.platform)
        return price

    async def extract_fields(self, page: Any) -> dict[str, Any]:
        """Single pass over title, description, description HTML and images.

        Description text and markup come from the same source: the markup
        is read only from the probe that produced the text.
        """
        tag = self.platform
        title = await run_cascade(page, self.title_probes(), "text", label=f"{tag}:title")
        description, description_html = await run_paired_cascade(
            page, self.description_probe_pairs(), label=f"{tag}:description",
        )
        return {
            "title": title,
            "description": description,
            "description_html": description_html,
            "images": await run_cascade(
                page, self.image_probes(), "image-list", label=f"{tag}:images",
            ),
        }

    async def follow_up(self, page: Any, url: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Platform hook run after the combined pass.  Default: no-op."""
        return fields

    def finalize_images(self, images: list[str]) -> list[str]:
        """Platform hook to rewrite image URLs before resolution."""
        return images

    def build_record(self, url: str, raw_price: str, fields: dict[str, Any]) -> ProductRecord:
        description = fields.get("description") or ""
        images = resolve_images(self.finalize_images(list(fields.get("images") or [])), url)
        return ProductRecord(
            title=fields.get("title") or "",
            price=normalize_price(raw_price),
            description=description,
            description_html=fields.get("description_html") or description,
            images=tuple(images),
        )

    # ------------------------------------------------------------------
    # Probe lists
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def price_probes(self) -> list[Probe]:
        """Ordered price probes, most authoritative first."""
        ...

    def title_probes(self) -> list[Probe]:
        return text_probes(self.title_selectors)

    def description_probe_pairs(self) -> list[tuple[Probe, Probe]]:
        """``(text, html)`` probe pairs, one per description source."""
        return text_html_pairs(self.description_selectors)

    def image_probes(self) -> list[Probe]:
        return image_probes(self.image_selectors)
