"""Tests for platforms/generic.py and the shared BaseScraper pipeline."""

from __future__ import annotations

import pytest

from handlers.cascade import JS_PRICE_PATTERN, JS_SELECTOR_HTML, JS_SELECTOR_IMAGES, JS_SELECTOR_TEXT
from models import ProductRecord
from platforms import GenericScraper, PageUnavailableError

URL = "https://shop.example/p/item"


@pytest.mark.asyncio
class TestGenericScraper:

    async def test_nothing_found_returns_empty_record(self, make_page):
        record = await GenericScraper().extract(make_page(), URL)
        assert record == ProductRecord()
        assert record.to_dict() == {
            "title": "",
            "price": "",
            "description": "",
            "descriptionHtml": "",
            "images": [],
        }

    async def test_every_probe_raising_still_returns_record(self, make_page):
        page = make_page({
            JS_SELECTOR_TEXT: RuntimeError("boom"),
            JS_SELECTOR_HTML: RuntimeError("boom"),
            JS_SELECTOR_IMAGES: RuntimeError("boom"),
            JS_PRICE_PATTERN: RuntimeError("boom"),
        })
        record = await GenericScraper().extract(page, URL)
        assert record == ProductRecord()

    async def test_selector_price_before_pattern(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, ".price-box .price"): "$1,234.56",
            JS_PRICE_PATTERN: "R$ 1,00",
        })
        record = await GenericScraper().extract(page, URL)
        assert record.price == "1234.56"
        assert JS_PRICE_PATTERN not in [s for s, _ in page.calls]

    async def test_pattern_price_last_resort(self, make_page):
        page = make_page({JS_PRICE_PATTERN: "R$ 1.234,56"})
        record = await GenericScraper().extract(page, URL)
        assert record.price == "1234.56"

    async def test_specific_title_before_bare_h1(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, "h1"): "Frete grátis para todo o Brasil",
            (JS_SELECTOR_TEXT, "h1.product-name"): "Caneca Esmaltada",
        })
        record = await GenericScraper().extract(page, URL)
        assert record.title == "Caneca Esmaltada"

    async def test_bare_h1_is_last_resort(self, make_page):
        page = make_page({(JS_SELECTOR_TEXT, "h1"): "Caneca Esmaltada"})
        record = await GenericScraper().extract(page, URL)
        assert record.title == "Caneca Esmaltada"
        args = page.evaluated_args(JS_SELECTOR_TEXT)
        assert args.index("h1") > args.index(".product-essential h1")

    async def test_description_html_preferred_over_text(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, ".product__description"): "Caneca 350 ml",
            (JS_SELECTOR_HTML, ".product__description"): "<ul><li>Caneca 350 ml</li></ul>",
        })
        record = await GenericScraper().extract(page, URL)
        assert record.description == "Caneca 350 ml"
        assert record.description_html == "<ul><li>Caneca 350 ml</li></ul>"

    async def test_description_html_from_same_element_as_text(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, ".product-description"): "",
            (JS_SELECTOR_HTML, ".product-description"): '<img src="/banner.jpg">',
            (JS_SELECTOR_TEXT, ".product__description"): "Caneca 350 ml",
            (JS_SELECTOR_HTML, ".product__description"): "<p>Caneca 350 ml</p>",
        })
        record = await GenericScraper().extract(page, URL)
        assert record.description == "Caneca 350 ml"
        assert record.description_html == "<p>Caneca 350 ml</p>"
        assert page.evaluated_args(JS_SELECTOR_HTML) == [".product__description"]

    async def test_markup_of_textless_element_never_used(self, make_page):
        page = make_page({
            (JS_SELECTOR_HTML, ".product-description"): '<img src="/banner.jpg">',
            (JS_SELECTOR_TEXT, ".product__description"): "Caneca 350 ml",
        })
        record = await GenericScraper().extract(page, URL)
        assert record.description_html == "Caneca 350 ml"

    async def test_images_resolved_and_inline_dropped(self, make_page):
        page = make_page({
            (JS_SELECTOR_IMAGES, ".product-gallery img"): [
                "data:image/png;base64,iVBORw0KGgo=",
                "/media/caneca-1.jpg",
                "caneca-2.jpg",
                "https://cdn.example/caneca-3.jpg",
            ],
        })
        record = await GenericScraper().extract(page, URL)
        assert record.images == (
            "https://shop.example/media/caneca-1.jpg",
            "https://shop.example/p/caneca-2.jpg",
            "https://cdn.example/caneca-3.jpg",
        )
        assert not any(img.startswith("data:") for img in record.images)

    async def test_record_is_read_only(self, make_page):
        record = await GenericScraper().extract(make_page(), URL)
        with pytest.raises(AttributeError):
            record.title = "changed"

    async def test_closed_page_raises(self, make_page):
        with pytest.raises(PageUnavailableError):
            await GenericScraper().extract(make_page(closed=True), URL)

    async def test_missing_page_raises(self):
        with pytest.raises(PageUnavailableError):
            await GenericScraper().extract(None, URL)
