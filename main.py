"""
Command-line product scraper.

Opens one product page in a stealth browser, runs the extraction engine
and prints the resulting record as JSON.

Usage:
    python main.py https://loja.example/produto/p
    python main.py https://produto.mercadolivre.com.br/MLB-123 --store-type mercadolivre
    python main.py https://loja.example/produto/p --output product.json

Environment variables:
    HEADLESS=false            # show the browser window
    LOG_LEVEL=DEBUG           # per-probe hit/miss logging
    GOTO_TIMEOUT_MS=90000     # navigation timeout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeout

from browser import launch_stealth_browser, open_product_page
from config.stores import GOTO_TIMEOUT_MS
from extractor import extract
from models import ProductRecord

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("scraper")

HEADLESS = os.getenv("HEADLESS", "true").lower() != "false"
NAV_TIMEOUT_MS = int(os.getenv("GOTO_TIMEOUT_MS", str(GOTO_TIMEOUT_MS)))


async def scrape_url(url: str, store_type: str | None = None) -> ProductRecord:
    """Launch a browser, load *url* and extract its product record."""
    async with async_playwright() as pw:
        browser = await launch_stealth_browser(pw, headless=HEADLESS)
        try:
            async with open_product_page(browser, url, goto_timeout_ms=NAV_TIMEOUT_MS) as page:
                return await extract(page, url, store_type)
        finally:
            await browser.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract product data from a store product page")
    parser.add_argument("url", help="Product page URL")
    parser.add_argument(
        "--store-type",
        default=None,
        help="Platform hint (vtex, mercadolivre, generic); detected from the URL when omitted",
    )
    parser.add_argument("--output", default=None, help="Write the JSON record to this file")
    args = parser.parse_args()

    try:
        record = asyncio.run(scrape_url(args.url, args.store_type))
    except PlaywrightTimeout as exc:
        logger.error("Timed out loading %s: %s", args.url, exc)
        sys.exit(1)
    except Exception as exc:
        logger.error("Scrape of %s failed: %s", args.url, exc)
        sys.exit(1)

    payload = json.dumps(record.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        logger.info("Record written to %s", args.output)
    else:
        print(payload)


if __name__ == "__main__":
    main()
