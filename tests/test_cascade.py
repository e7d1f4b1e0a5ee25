"""Tests for handlers/cascade.py: ordered probe cascades."""

from __future__ import annotations

import re

import pytest

from handlers.cascade import (
    JS_PRICE_PATTERN,
    JS_SELECTOR_HTML,
    JS_SELECTOR_IMAGES,
    JS_SELECTOR_TEXT,
    Probe,
    html_probes,
    image_probes,
    run_cascade,
    run_cascade_with_source,
    run_paired_cascade,
    text_html_pairs,
    text_probes,
)
from parser import normalize_price

S1 = "script-one"
S2 = "script-two"
S3 = "script-three"


def _probes():
    return [Probe("one", S1), Probe("two", S2), Probe("three", S3)]


@pytest.mark.asyncio
class TestRunCascade:

    async def test_first_non_empty_wins(self, make_page):
        page = make_page({S1: "", S2: "second", S3: "third"})
        assert await run_cascade(page, _probes()) == "second"

    async def test_later_probes_not_evaluated(self, make_page):
        page = make_page({S1: "first", S2: "second"})
        await run_cascade(page, _probes())
        assert [s for s, _ in page.calls] == [S1]

    async def test_exception_is_a_miss(self, make_page):
        page = make_page({S1: RuntimeError("Execution context was destroyed"), S2: "ok"})
        assert await run_cascade(page, _probes()) == "ok"
        assert [s for s, _ in page.calls] == [S1, S2]

    async def test_all_fail_returns_zero_text(self, make_page):
        page = make_page({S1: ValueError("boom"), S2: None, S3: "   "})
        assert await run_cascade(page, _probes(), "text") == ""

    async def test_all_fail_returns_zero_images(self, make_page):
        page = make_page({S1: [], S2: RuntimeError("x"), S3: ["", None]})
        assert await run_cascade(page, _probes(), "image-list") == []

    async def test_no_probes(self, make_page):
        assert await run_cascade(make_page(), [], "html") == ""

    async def test_each_probe_evaluated_once(self, make_page):
        page = make_page()
        await run_cascade(page, _probes())
        assert [s for s, _ in page.calls] == [S1, S2, S3]

    async def test_text_is_stripped_and_stringified(self, make_page):
        page = make_page({S1: 199.9})
        assert await run_cascade(page, _probes()) == "199.9"
        page = make_page({S1: "  Tênis Runner  \n"})
        assert await run_cascade(page, _probes()) == "Tênis Runner"

    async def test_html_kept_verbatim(self, make_page):
        page = make_page({S1: "  \n ", S2: "<p>Algodão</p>\n"})
        assert await run_cascade(page, _probes(), "html") == "<p>Algodão</p>\n"

    async def test_image_list_filters_non_strings(self, make_page):
        page = make_page({S1: ["/a.jpg", 3, "", " /b.jpg "]})
        assert await run_cascade(page, _probes(), "image-list") == ["/a.jpg", "/b.jpg"]

    async def test_image_list_accepts_single_string(self, make_page):
        page = make_page({S1: "/a.jpg"})
        assert await run_cascade(page, _probes(), "image-list") == ["/a.jpg"]


@pytest.mark.asyncio
class TestRunCascadeWithSource:

    async def test_reports_source(self, make_page):
        page = make_page({S2: "x"})
        assert await run_cascade_with_source(page, _probes()) == ("x", "two")

    async def test_no_source_when_exhausted(self, make_page):
        assert await run_cascade_with_source(make_page(), _probes()) == ("", None)


@pytest.mark.asyncio
class TestRunPairedCascade:

    async def test_markup_comes_from_text_winner(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, ".a"): "",
            (JS_SELECTOR_HTML, ".a"): '<img src="/banner.jpg">',
            (JS_SELECTOR_TEXT, ".b"): "Algodão",
            (JS_SELECTOR_HTML, ".b"): "<p>Algodão</p>",
        })
        result = await run_paired_cascade(page, text_html_pairs([".a", ".b", ".c"]))
        assert result == ("Algodão", "<p>Algodão</p>")
        assert page.evaluated_args(JS_SELECTOR_HTML) == [".b"]
        assert page.evaluated_args(JS_SELECTOR_TEXT) == [".a", ".b"]

    async def test_no_text_means_no_markup_read(self, make_page):
        page = make_page({(JS_SELECTOR_HTML, ".a"): '<img src="/banner.jpg">'})
        assert await run_paired_cascade(page, text_html_pairs([".a", ".b"])) == ("", "")
        assert page.evaluated_args(JS_SELECTOR_HTML) == []

    async def test_markup_failure_keeps_text(self, make_page):
        page = make_page({
            (JS_SELECTOR_TEXT, ".a"): "Algodão",
            (JS_SELECTOR_HTML, ".a"): RuntimeError("Element is detached"),
        })
        assert await run_paired_cascade(page, text_html_pairs([".a"])) == ("Algodão", "")


@pytest.mark.asyncio
class TestSelectorProbes:

    async def test_selector_probes_pass_selector_as_arg(self, make_page):
        page = make_page({(JS_SELECTOR_TEXT, ".b"): "B"})
        value = await run_cascade(page, text_probes([".a", ".b", ".c"]))
        assert value == "B"
        assert page.evaluated_args(JS_SELECTOR_TEXT) == [".a", ".b"]


class TestProbeBuilders:

    def test_builders_use_matching_scripts(self):
        assert html_probes([".x"])[0].script == JS_SELECTOR_HTML
        assert image_probes([".x"])[0].script == JS_SELECTOR_IMAGES
        assert text_probes([".x"])[0].name == "text:.x"


class TestPricePatternScript:
    """The leaf-text regex uses only syntax shared by JS and Python ``re``."""

    @pytest.fixture
    def pattern(self):
        source = re.search(r"const re = /(.+)/i;", JS_PRICE_PATTERN).group(1)
        return re.compile(source, re.IGNORECASE)

    @pytest.mark.parametrize("text, amount, price", [
        ("A partir de R$ 99,90.", "R$ 99,90", "99.90"),
        ("Por apenas R$ 1.234,56.", "R$ 1.234,56", "1234.56"),
        ("10x de R$ 9,90 sem juros", "R$ 9,90", "9.90"),
        ("Only $5, today", "$5", "5"),
    ])
    def test_match_ends_on_a_digit(self, pattern, text, amount, price):
        match = pattern.search(text).group(0)
        assert match == amount
        assert normalize_price(match) == price
