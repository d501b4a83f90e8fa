# portal/contracts.py
from __future__ import annotations
from typing import Any, Tuple

ProductKeys = {"category", "name", "price"}


def _is_strict_int(x: Any) -> bool:
    # bool is an int subclass; a JSON true is not a row number
    return isinstance(x, int) and not isinstance(x, bool)


def validate_products_payload(payload: Any) -> Tuple[bool, str]:
    if not isinstance(payload, dict):
        return False, "body must be a JSON object"

    products = payload.get("products")
    if products is None:
        return False, "missing top-level key: products"
    if not isinstance(products, list):
        return False, "products must be a list"

    for i, p in enumerate(products):
        if not isinstance(p, dict):
            return False, f"products[{i}] must be an object"
        extra = sorted(set(p) - ProductKeys)
        if extra:
            return False, f"products[{i}] has unknown keys: {', '.join(extra)}"
        for k in ProductKeys:
            if k in p and not isinstance(p[k], str):
                return False, f"products[{i}].{k} must be a string"

    return True, ""


def validate_update_payload(payload: Any) -> Tuple[bool, str]:
    ok, err = validate_products_payload(payload)
    if not ok:
        return ok, err

    missing = [k for k in ("index", "field", "value") if k not in payload]
    if missing:
        return False, f"missing top-level keys: {', '.join(missing)}"
    if not _is_strict_int(payload["index"]):
        return False, "index must be an integer"
    if not isinstance(payload["field"], str):
        return False, "field must be a string"
    if not isinstance(payload["value"], str):
        return False, "value must be a string"

    return True, ""
