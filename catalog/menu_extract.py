# catalog/menu_extract.py
"""
Menu text -> products.

Turns the plain text Tesseract returns for a scanned menu or price list into
an ordered list of Product records:

    Entrées                      -> category line  (current category = "Entrées")
    Salade César 7,50€           -> product line   ("Salade César", "Entrées", "7,50€")
    Soupe à l'oignon 6,00€       -> product line
                                 -> blank, ignored
    Plats                        -> category line  (current category = "Plats")
    Steak frites 15,00€          -> product line

Rules:
  - a line ending in a price (see catalog.parsers.price_parser) is a product
  - any other non-blank line is a category heading, including OCR junk
  - blank lines do nothing

Single pass, no look-back. The current category is a local of the scan, so
concurrent calls never share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from catalog.parsers.price_parser import match_trailing_price
from catalog.product_types import Product

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductLine:
    product: Product


@dataclass(frozen=True)
class CategoryLine:
    category: str


LineOutcome = Union[ProductLine, CategoryLine]


def classify_line(line: str, current_category: str) -> LineOutcome:
    """
    Classify one non-blank line.

    The name/price split happens at the last occurrence of the matched price
    text, so a name that happens to contain the same digits earlier keeps them.
    """
    text = line.strip()
    pm = match_trailing_price(text)
    if pm is None:
        return CategoryLine(category=text)

    cut = text.rfind(pm.text)
    name = text[:cut].strip()
    return ProductLine(product=Product(name=name, category=current_category, price=pm.text))


def extract_products(text: Optional[str]) -> List[Product]:
    """Scan OCR text top to bottom and return the products in line order."""
    products: List[Product] = []
    current_category = ""
    n_lines = 0
    n_categories = 0

    for raw in (text or "").splitlines():
        n_lines += 1
        if not raw.strip():
            continue

        outcome = classify_line(raw, current_category)
        if isinstance(outcome, CategoryLine):
            current_category = outcome.category
            n_categories += 1
        else:
            products.append(outcome.product)

    log.debug(
        "extract_products: %d lines, %d products, %d category lines",
        n_lines, len(products), n_categories,
    )
    return products
