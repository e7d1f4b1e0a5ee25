from .base import BaseScraper, PageUnavailableError
from .generic import GenericScraper
from .mercadolivre import MercadoLivreScraper
from .vtex import VtexScraper

__all__ = [
    "BaseScraper",
    "GenericScraper",
    "MercadoLivreScraper",
    "PageUnavailableError",
    "VtexScraper",
]
