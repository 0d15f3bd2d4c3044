"""Product form parsing.

``parse_product_form_data`` never fails: it always returns a structurally
valid ``ParsedProductData`` and leaves every semantic check (lengths, slug
pattern, price range, ...) to ``modules.products.validation``.
"""

from __future__ import annotations

import math
import re
from typing import Any, List, Mapping, Optional

from modules.products.dtos import ParsedProductData

DEFAULT_CURRENCY = "RON"
STORAGE_BUCKET = "product-images"

_STORAGE_MARKER = f"/{STORAGE_BUCKET}/"

# Longest numeric prefix, the way browsers' parseFloat reads form input.
_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)

_OPTIONAL_TEXT_FIELDS = (
    "name_en",
    "description",
    "description_en",
    "image_url",
    "image_alt",
    "category",
)


def _text(form: Mapping[str, Any], key: str) -> Optional[str]:
    value = form.get(key)
    if value is None:
        return None
    return str(value)


def parse_price(raw: Optional[str]) -> float:
    """Parse a submitted price; missing means ``0``, garbage means NaN."""
    if raw is None:
        return 0.0
    match = _FLOAT_PREFIX.match(raw.lstrip())
    if not match:
        return math.nan
    token = match.group(0)
    if token.endswith("Infinity"):
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma-delimited tag list, trimming and dropping empties."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def parse_product_form_data(form: Mapping[str, Any]) -> ParsedProductData:
    """Build a ``ParsedProductData`` from a flat form mapping.

    ``form`` may be a plain ``dict`` or a Django ``QueryDict``; only
    ``.get()`` is used, so repeated keys resolve to their last value.
    """
    optional = {key: _text(form, key) or None for key in _OPTIONAL_TEXT_FIELDS}

    return ParsedProductData(
        slug=_text(form, "slug") or "",
        name=_text(form, "name") or "",
        price=parse_price(_text(form, "price")),
        currency=_text(form, "currency") or DEFAULT_CURRENCY,
        tags=tuple(parse_tags(_text(form, "tags"))),
        featured=_text(form, "featured") == "true",
        in_stock=_text(form, "in_stock") == "true",
        **optional,
    )


def parse_storage_path(url: Optional[str]) -> Optional[str]:
    """Return the object path after ``/product-images/`` in a public URL.

    The segment is returned raw (no URL-decoding) and stops at a second
    marker, if any.  ``None`` when the URL is empty, lacks the marker, or
    ends right after it.
    """
    if not url:
        return None
    parts = url.split(_STORAGE_MARKER)
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]
