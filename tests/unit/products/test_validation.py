"""Unit tests for product validation.

Covers every rule of ``validate_product_data`` including the inclusive
upper bounds, and the guarantee that all violations are collected.
"""

from __future__ import annotations

import math

import pytest

from modules.products.dtos import ParsedProductData
from modules.products.validation import (
    ValidationError,
    errors_by_field,
    validate_product_data,
)

pytestmark = pytest.mark.unit


def _valid(**overrides) -> ParsedProductData:
    defaults = {
        "slug": "valid-slug-1",
        "name": "Cană pictată",
        "name_en": "Painted mug",
        "description": "Descriere",
        "description_en": "Description",
        "price": 49.5,
        "currency": "RON",
        "image_url": "https://cdn.example.com/mug.jpg",
        "image_alt": "Cană",
        "category": "gifts",
        "tags": ("mug", "handmade"),
        "featured": False,
        "in_stock": True,
    }
    defaults.update(overrides)
    return ParsedProductData(**defaults)


def _fields(data: ParsedProductData) -> list:
    return [error.field for error in validate_product_data(data)]


class TestValidProduct:
    def test_no_errors(self):
        assert validate_product_data(_valid()) == []

    def test_optional_fields_absent(self):
        data = _valid(
            name_en=None,
            description=None,
            description_en=None,
            image_url=None,
            image_alt=None,
            category=None,
            tags=(),
        )
        assert validate_product_data(data) == []

    def test_errors_are_value_objects(self):
        errors = validate_product_data(_valid(slug=""))
        assert errors == [ValidationError("slug", "Slug is required.")]


class TestSlug:
    def test_required(self):
        assert _fields(_valid(slug="")) == ["slug"]

    def test_length_boundary(self):
        assert "slug" not in _fields(_valid(slug="a" * 100))
        assert "slug" in _fields(_valid(slug="a" * 101))

    @pytest.mark.parametrize("slug", ["Upper", "with space", "under_score", "ă-diacritic", "x\n"])
    def test_pattern_rejects(self, slug):
        assert _fields(_valid(slug=slug)) == ["slug"]

    def test_pattern_accepts_digits_and_hyphens(self):
        assert _fields(_valid(slug="cana-2024-v2")) == []

    def test_single_error_per_slug(self):
        errors = validate_product_data(_valid(slug="A" * 101))
        assert [e.message for e in errors] == ["Slug must be at most 100 characters."]


class TestNames:
    def test_name_required(self):
        assert _fields(_valid(name="")) == ["name"]

    def test_name_length_boundary(self):
        assert _fields(_valid(name="n" * 255)) == []
        assert _fields(_valid(name="n" * 256)) == ["name"]

    def test_name_en_length_boundary(self):
        assert _fields(_valid(name_en="n" * 255)) == []
        assert _fields(_valid(name_en="n" * 256)) == ["name_en"]


class TestDescriptions:
    @pytest.mark.parametrize("field", ["description", "description_en"])
    def test_length_boundary(self, field):
        assert _fields(_valid(**{field: "d" * 2000})) == []
        assert _fields(_valid(**{field: "d" * 2001})) == [field]


class TestPrice:
    @pytest.mark.parametrize("price", [0, 0.01, 99_999])
    def test_accepts(self, price):
        assert _fields(_valid(price=price)) == []

    @pytest.mark.parametrize("price", [-0.01, math.nan, math.inf, -math.inf])
    def test_rejects_invalid(self, price):
        errors = validate_product_data(_valid(price=price))
        assert errors == [
            ValidationError("price", "Price must be a valid non-negative number.")
        ]

    def test_rejects_above_max(self):
        errors = validate_product_data(_valid(price=99_999.01))
        assert errors == [ValidationError("price", "Price must not exceed 99999.")]


class TestCurrency:
    @pytest.mark.parametrize("currency", ["RON", "EUR"])
    def test_allowed(self, currency):
        assert _fields(_valid(currency=currency)) == []

    @pytest.mark.parametrize("currency", ["USD", "ron", ""])
    def test_rejected(self, currency):
        assert _fields(_valid(currency=currency)) == ["currency"]


class TestImage:
    def test_https_required(self):
        assert _fields(_valid(image_url="http://cdn.example.com/a.jpg")) == ["image_url"]

    def test_url_length_boundary(self):
        prefix = "https://"
        assert _fields(_valid(image_url=prefix + "a" * (500 - len(prefix)))) == []
        assert _fields(_valid(image_url=prefix + "a" * (501 - len(prefix)))) == ["image_url"]

    def test_alt_length_boundary(self):
        assert _fields(_valid(image_alt="a" * 255)) == []
        assert _fields(_valid(image_alt="a" * 256)) == ["image_alt"]


class TestTags:
    def test_count_boundary(self):
        assert _fields(_valid(tags=tuple(f"t{i}" for i in range(20)))) == []
        assert _fields(_valid(tags=tuple(f"t{i}" for i in range(21)))) == ["tags"]

    def test_tag_length_boundary(self):
        assert _fields(_valid(tags=("t" * 50,))) == []
        assert _fields(_valid(tags=("t" * 51,))) == ["tags"]

    def test_one_error_per_long_tag(self):
        errors = validate_product_data(_valid(tags=("a" * 51, "ok", "b" * 60)))
        assert [e.field for e in errors] == ["tags", "tags"]


class TestAccumulation:
    def test_all_rules_run(self):
        data = _valid(
            slug="",
            name="",
            price=-1,
            currency="USD",
            image_url="ftp://x",
            tags=tuple("t" for _ in range(21)),
        )
        assert _fields(data) == ["slug", "name", "price", "currency", "image_url", "tags"]

    def test_errors_by_field_groups_messages(self):
        errors = validate_product_data(_valid(tags=("a" * 51, "b" * 51)))
        grouped = errors_by_field(errors)
        assert list(grouped) == ["tags"]
        assert len(grouped["tags"]) == 2
