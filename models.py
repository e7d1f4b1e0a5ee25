"""Canonical product record handed from the extraction engine to importers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProductRecord:
    """Read-only snapshot of one scraped product page.

    Every field is always present: a value that could not be found is an
    empty string or an empty tuple, never ``None``.
    """

    title: str = ""
    price: str = ""
    description: str = ""
    description_html: str = ""
    images: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the field names the catalog importer expects."""
        return {
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "descriptionHtml": self.description_html,
            "images": list(self.images),
        }
