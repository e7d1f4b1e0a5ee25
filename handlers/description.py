"""
Auxiliary page interaction for lazily rendered product descriptions.

Two flows, both ending in a bounded wait and a narrow re-probe:

  * **Tab reveal**: click the first description tab/button found and wait
    for one of the description containers to gain text.
  * **Scroll reveal**: scroll a lazy section into view (MercadoLivre loads
    the description only once it becomes visible) and wait the same way.

A wait that times out is not an error: the content may simply be absent,
so the re-probe runs regardless.  Neither flow navigates or closes the page.
"""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeout

from .cascade import run_paired_cascade, text_html_pairs

logger = logging.getLogger(__name__)

# Candidate tabs/buttons that toggle a hidden description pane.
DESCRIPTION_TAB_SELECTORS = [
    '[data-tab="description"]',
    '.description-tab',
    '#tab-description',
    '[data-target="#description"]',
]

# Containers re-probed once a tab has been clicked.
DESCRIPTION_CONTAINER_SELECTORS = [
    '.product-description',
    '#description',
    '.description-content',
    '.tab-content',
]

# True once any of the selectors resolves to an element with text.
JS_ANY_HAS_TEXT = """sels => sels.some(sel => {
    const el = document.querySelector(sel);
    return !!(el && el.textContent && el.textContent.trim().length > 0);
})"""

JS_SCROLL_INTO_VIEW = """sel => {
    const el = document.querySelector(sel);
    if (!el) return false;
    el.scrollIntoView({ block: 'center' });
    return true;
}"""


async def wait_for_content(page: Any, selectors: list[str], timeout_ms: int) -> bool:
    """Wait up to *timeout_ms* for any of *selectors* to contain text."""
    try:
        await page.wait_for_function(JS_ANY_HAS_TEXT, arg=selectors, timeout=timeout_ms)
        return True
    except PlaywrightTimeout:
        logger.debug("No description text within %d ms for %s", timeout_ms, selectors)
        return False


async def reprobe_description(
    page: Any,
    selectors: list[str],
    *,
    label: str = "description",
) -> tuple[str, str]:
    """Return ``(text, html)`` read from the first container with text."""
    return await run_paired_cascade(page, text_html_pairs(selectors), label=label)


async def reveal_description_tab(
    page: Any,
    *,
    wait_ms: int,
    tab_selectors: list[str] | None = None,
    content_selectors: list[str] | None = None,
    label: str = "description",
) -> tuple[str, str]:
    """Click a description tab, wait for content, and re-probe.

    Returns ``("", "")`` when no tab is found or the interaction fails.
    """
    tab_selectors = tab_selectors or DESCRIPTION_TAB_SELECTORS
    content_selectors = content_selectors or DESCRIPTION_CONTAINER_SELECTORS

    try:
        for selector in tab_selectors:
            tab = await page.query_selector(selector)
            if tab is None:
                continue
            logger.info("[%s] Clicking description tab %r", label, selector)
            await tab.click()
            await wait_for_content(page, content_selectors, wait_ms)
            return await reprobe_description(page, content_selectors, label=label)
    except Exception as exc:
        logger.warning("[%s] Description tab reveal failed: %s", label, exc)
        return "", ""

    logger.debug("[%s] No description tab found", label)
    return "", ""


async def reveal_by_scroll(
    page: Any,
    section_selector: str,
    content_selectors: list[str],
    *,
    wait_ms: int,
    label: str = "description",
) -> tuple[str, str]:
    """Scroll *section_selector* into view, wait for content, and re-probe."""
    try:
        scrolled = await page.evaluate(JS_SCROLL_INTO_VIEW, section_selector)
        if not scrolled:
            logger.debug("[%s] Section %r not on page", label, section_selector)
        await wait_for_content(page, content_selectors, wait_ms)
        return await reprobe_description(page, content_selectors, label=label)
    except Exception as exc:
        logger.warning("[%s] Scroll reveal of %r failed: %s", label, section_selector, exc)
        return "", ""
