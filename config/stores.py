"""
Storefront platform configuration and browser defaults.

Platforms (closed set):
  - vtex:         VTEX IO / legacy CMS stores (``window.__RUNTIME__``,
                  ``dataLayer``, ``vtex-*`` CSS namespaces)
  - mercadolivre: MercadoLivre / MercadoLibre listings (``ui-pdp-*``,
                  ``andes-money-amount`` split prices, lazy descriptions)
  - generic:      everything else (Shopify, Magento, WooCommerce, custom)

Browser settings are consumed by ``browser.py`` only; the extraction
engine itself never launches or navigates a browser.
"""

# ---------------------------------------------------------------------------
# Browser / Playwright defaults
# ---------------------------------------------------------------------------

import random as _random

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

BROWSER_CHANNEL = "chrome"

# Pool of realistic Chrome User-Agents, rotated per browser context.
_USER_AGENT_POOL = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
]


def get_user_agent() -> str:
    """Return a randomly selected realistic Chrome User-Agent."""
    return _random.choice(_USER_AGENT_POOL)


_VIEWPORT_BASES = [
    (1280, 800),
    (1366, 768),
    (1440, 900),
    (1920, 1080),
]


def get_viewport() -> dict[str, int]:
    """Return a slightly randomized desktop viewport."""
    w, h = _random.choice(_VIEWPORT_BASES)
    return {
        "width": w + _random.randint(-16, 16),
        "height": h + _random.randint(-8, 8),
    }


# Prices and galleries hydrate from XHR; navigation waits for the network
# to go quiet before extraction starts.
WAIT_UNTIL = "networkidle"

GOTO_TIMEOUT_MS = 60_000

# ---------------------------------------------------------------------------
# Platform defaults
# ---------------------------------------------------------------------------

# ``url_markers`` are matched against the lower-cased URL.  ``aliases`` are
# accepted store-type hints in addition to the platform key itself.
PLATFORM_DEFAULTS = {
    "vtex": {
        "url_markers": ["vtex"],
        "aliases": [],
        "reveal_wait_ms": 1_000,
    },
    "mercadolivre": {
        "url_markers": ["mercadolivre", "mercadolibre"],
        "aliases": ["mercadolibre", "marketplace"],
        "reveal_wait_ms": 1_000,
        "lazy_description_wait_ms": 2_000,
        # Descriptions shorter than this are treated as not loaded yet.
        "min_description_chars": 10,
    },
    "generic": {
        "url_markers": [],
        "aliases": [],
        "reveal_wait_ms": 1_000,
    },
}

DEFAULT_PLATFORM = "generic"


def resolve_platform_alias(store_type: str | None) -> str | None:
    """Map a store-type hint to a platform key, or ``None`` if unknown."""
    if not store_type:
        return None
    hint = store_type.strip().lower()
    for platform, cfg in PLATFORM_DEFAULTS.items():
        if hint == platform or hint in cfg["aliases"]:
            return platform
    return None


def detect_platform_from_url(url: str) -> str | None:
    """Return the first platform whose URL markers appear in *url*."""
    low = (url or "").lower()
    for platform, cfg in PLATFORM_DEFAULTS.items():
        if any(marker in low for marker in cfg["url_markers"]):
            return platform
    return None
