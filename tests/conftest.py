import pytest
from django.test import Client

from modules.core.config import get_memory_client, reset_memory_client

ADMIN_ACCESS_TOKEN = "admin-access-token-fixture"

_FORM_DEFAULTS = {
    "slug": "test-slug",
    "name": "Test Name",
    "name_en": "Test Name EN",
    "description": "Test description",
    "description_en": "Test description EN",
    "price": "99",
    "currency": "RON",
    "image_url": "https://example.com/image.jpg",
    "image_alt": "Alt text",
    "category": "gifts",
    "tags": "tag1, tag2",
    "featured": "true",
    "in_stock": "true",
}


@pytest.fixture(autouse=True)
def _fresh_backend():
    """Every test starts with an empty in-memory backend."""
    reset_memory_client()
    yield
    reset_memory_client()


@pytest.fixture()
def backend():
    return get_memory_client()


@pytest.fixture()
def admin_client(backend, settings):
    """Django test client carrying a valid admin session cookie."""
    backend.add_admin(ADMIN_ACCESS_TOKEN)
    client = Client()
    client.cookies[settings.ADMIN_ACCESS_TOKEN_COOKIE] = ADMIN_ACCESS_TOKEN
    return client


@pytest.fixture()
def make_form():
    """Build a product form mapping; an override of ``None`` omits the key."""

    def _make(**overrides):
        merged = {**_FORM_DEFAULTS, **overrides}
        return {key: value for key, value in merged.items() if value is not None}

    return _make


@pytest.fixture()
def product_row():
    return {
        "id": "test-product-id",
        "slug": "test-product",
        "name": "Test Product",
        "name_en": "Test Product EN",
        "description": "A test product description",
        "description_en": "A test product description in English",
        "price": 99,
        "currency": "RON",
        "image_url": "https://test.supabase.co/storage/v1/object/public/product-images/test.jpg",
        "image_alt": "Test product image",
        "category": "gifts",
        "tags": ["tag1", "tag2"],
        "featured": True,
        "in_stock": True,
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-01T00:00:00.000Z",
    }
