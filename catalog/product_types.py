"""
Catalog Types — product records extracted from OCR'd menus.

A Product is one priced menu line: the category heading it sits under, the
free-text name in front of the price, and the price text exactly as it was
recognized ("7,50€", "8.50"). Prices are never converted to numbers here;
the spreadsheet shows whatever the scan said, and the user fixes it by hand
when OCR got it wrong.

Edits go through `update_product` / `update_products`, which only accept the
three known fields and always return new objects.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Union


class UnknownFieldError(ValueError):
    """Raised when an edit targets something other than category/name/price."""

    def __init__(self, key: Any):
        self.key = key
        allowed = ", ".join(f.value for f in ProductField)
        super().__init__(f"unknown product field {key!r} (expected one of: {allowed})")


class ProductField(str, Enum):
    CATEGORY = "category"
    NAME = "name"
    PRICE = "price"

    @classmethod
    def parse(cls, key: Union["ProductField", str]) -> "ProductField":
        if isinstance(key, cls):
            return key
        try:
            return cls(key)
        except ValueError:
            raise UnknownFieldError(key) from None


# Column order used everywhere a product is laid out as a row.
ROW_FIELDS = (ProductField.CATEGORY, ProductField.NAME, ProductField.PRICE)


@dataclass(frozen=True)
class Product:
    name: str
    category: str
    price: str

    def to_dict(self) -> Dict[str, str]:
        return {f.value: getattr(self, f.value) for f in ROW_FIELDS}

    def as_row(self) -> List[str]:
        return [self.category, self.name, self.price]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        def _s(key: str) -> str:
            v = data.get(key)
            return "" if v is None else str(v)

        return cls(name=_s("name"), category=_s("category"), price=_s("price"))


def update_product(product: Product, field: Union[ProductField, str], value: str) -> Product:
    """Return a copy of `product` with one field overwritten."""
    f = ProductField.parse(field)
    return replace(product, **{f.value: value})


def update_products(
    products: Sequence[Product],
    index: int,
    field: Union[ProductField, str],
    value: str,
) -> List[Product]:
    """
    Overwrite one field of one record, keeping order and length.

    Negative indexes are rejected rather than counted from the end: a grid
    row number is always a position from the top.
    """
    if not 0 <= index < len(products):
        raise IndexError(f"product index {index} out of range (0..{len(products) - 1})")
    out = list(products)
    out[index] = update_product(out[index], field, value)
    return out
