"""Product business-rule validation.

Every rule runs on every call; violations are accumulated and returned
together so the admin form can show all of them at once.  All upper
bounds are inclusive.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List

from modules.products.dtos import ParsedProductData

ALLOWED_CURRENCIES = ("RON", "EUR")
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

MAX_SLUG = 100
MAX_NAME = 255
MAX_DESCRIPTION = 2000
MAX_IMAGE_URL = 500
MAX_IMAGE_ALT = 255
MAX_TAG = 50
MAX_TAGS = 20
MAX_PRICE = 99_999


@dataclass(frozen=True)
class ValidationError:
    """One violated rule: the offending field and a human-readable message."""

    field: str
    message: str


def validate_product_data(data: ParsedProductData) -> List[ValidationError]:
    errors: List[ValidationError] = []

    def add(field: str, message: str) -> None:
        errors.append(ValidationError(field, message))

    # slug
    if not data.slug:
        add("slug", "Slug is required.")
    elif len(data.slug) > MAX_SLUG:
        add("slug", f"Slug must be at most {MAX_SLUG} characters.")
    elif not SLUG_PATTERN.fullmatch(data.slug):
        add("slug", "Slug may only contain lowercase letters, numbers, and hyphens.")

    # name
    if not data.name:
        add("name", "Name is required.")
    elif len(data.name) > MAX_NAME:
        add("name", f"Name must be at most {MAX_NAME} characters.")

    if data.name_en and len(data.name_en) > MAX_NAME:
        add("name_en", f"English name must be at most {MAX_NAME} characters.")

    if data.description and len(data.description) > MAX_DESCRIPTION:
        add("description", f"Description must be at most {MAX_DESCRIPTION} characters.")

    if data.description_en and len(data.description_en) > MAX_DESCRIPTION:
        add(
            "description_en",
            f"English description must be at most {MAX_DESCRIPTION} characters.",
        )

    # price
    if not math.isfinite(data.price) or data.price < 0:
        add("price", "Price must be a valid non-negative number.")
    elif data.price > MAX_PRICE:
        add("price", f"Price must not exceed {MAX_PRICE}.")

    if data.currency not in ALLOWED_CURRENCIES:
        add("currency", f"Currency must be one of: {', '.join(ALLOWED_CURRENCIES)}.")

    # image_url: https only
    if data.image_url:
        if not data.image_url.startswith("https://"):
            add("image_url", "Image URL must start with https://.")
        elif len(data.image_url) > MAX_IMAGE_URL:
            add("image_url", f"Image URL must be at most {MAX_IMAGE_URL} characters.")

    if data.image_alt and len(data.image_alt) > MAX_IMAGE_ALT:
        add("image_alt", f"Image alt text must be at most {MAX_IMAGE_ALT} characters.")

    # tags
    if len(data.tags) > MAX_TAGS:
        add("tags", f"At most {MAX_TAGS} tags are allowed.")
    for tag in data.tags:
        if len(tag) > MAX_TAG:
            add("tags", f'Tag "{tag}" must be at most {MAX_TAG} characters.')

    return errors


def errors_by_field(errors: List[ValidationError]) -> dict:
    """Group messages per field, in rule order, for form rendering."""
    grouped: dict = {}
    for error in errors:
        grouped.setdefault(error.field, []).append(error.message)
    return grouped
