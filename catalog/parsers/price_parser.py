"""
Price Parser — trailing price recognition for OCR'd menu lines.

A menu line is "priced" when it ends with:
    digits + decimal separator ('.' or ',') + exactly two digits
    + an optional single currency symbol

Examples that match (matched text in brackets):
    "Salade César 7,50€"   -> [7,50€]
    "Club Sandwich 8.50"   -> [8.50]
    "Menu 2 pers. 24,00 "  -> [24,00]   (trailing whitespace tolerated)

The matched text is returned verbatim. Nothing here parses it into a number,
checks its magnitude, or cares which currency the symbol stands for.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

CURRENCY_SYMBOLS = "€$£"

# End-anchored: only the price at the very end of the line is ever considered.
# \d is ASCII-only (re.ASCII): full-width or Arabic-Indic digits are not a price.
TRAILING_PRICE_RE = re.compile(r"\d+[.,]\d{2}[" + re.escape(CURRENCY_SYMBOLS) + r"]?$", re.ASCII)


@dataclass(frozen=True)
class PriceMatch:
    text: str   # matched substring, unchanged
    start: int  # offset of `text` within the (right-trimmed) line


def match_trailing_price(line: str) -> Optional[PriceMatch]:
    """Return the price the line ends with, or None."""
    if not line:
        return None
    m = TRAILING_PRICE_RE.search(line.rstrip())
    if m is None:
        return None
    return PriceMatch(text=m.group(0), start=m.start())
