"""
Browser session bootstrap for the command-line runner.

The extraction engine only needs an already-loaded ``Page``; this module
is the thin collaborator that provides one:

  1. Real Chrome binary via ``channel="chrome"`` when installed, bundled
     Chromium otherwise.
  2. Fresh browser context per product page with a rotated User-Agent and
     viewport.
  3. playwright-stealth applied to the context (webdriver, plugins,
     languages, chrome.runtime and friends).
  4. Navigation with ``WAIT_UNTIL`` so XHR-hydrated prices and galleries
     are present before extraction starts.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Browser, Page, Playwright
from playwright_stealth import Stealth

from config.stores import (
    BROWSER_ARGS, BROWSER_CHANNEL, GOTO_TIMEOUT_MS, WAIT_UNTIL,
    get_user_agent, get_viewport,
)

logger = logging.getLogger(__name__)

_STEALTH = Stealth()


async def launch_stealth_browser(
    pw: Playwright,
    *,
    headless: bool = True,
    extra_args: list[str] | None = None,
) -> Browser:
    """Launch Chrome, falling back to bundled Chromium if it is missing."""
    args = BROWSER_ARGS + (extra_args or [])

    try:
        browser = await pw.chromium.launch(
            headless=headless,
            channel=BROWSER_CHANNEL,
            args=args,
        )
        logger.info("Browser launched: channel=%s", BROWSER_CHANNEL)
        return browser
    except Exception as exc:
        logger.warning(
            "Chrome channel %r unavailable (%s), falling back to bundled Chromium",
            BROWSER_CHANNEL, exc,
        )

    browser = await pw.chromium.launch(headless=headless, args=args)
    logger.info("Browser launched: bundled Chromium (fallback)")
    return browser


@asynccontextmanager
async def open_product_page(
    browser: Browser,
    url: str,
    *,
    goto_timeout_ms: int = GOTO_TIMEOUT_MS,
) -> AsyncIterator[Page]:
    """Yield a stealth page already navigated to *url*.

    The context (and its page) is always closed on exit; the browser is
    left to the caller.
    """
    context = await browser.new_context(
        viewport=get_viewport(),
        user_agent=get_user_agent(),
        locale="pt-BR",
    )
    try:
        await _STEALTH.apply_stealth_async(context)
        page = await context.new_page()
        logger.info("Navigating to %s (wait_until=%s)", url, WAIT_UNTIL)
        await page.goto(url, wait_until=WAIT_UNTIL, timeout=goto_timeout_ms)
        yield page
    finally:
        try:
            await context.close()
        except Exception as exc:
            logger.debug("Context close failed: %s", exc)
