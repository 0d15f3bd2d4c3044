"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the admin views and the Service layer.
DTOs are immutable (``frozen=True``).

- ``ParsedProductData``: a product form submission after parsing.
- ``ProductResult``: uniform outcome of every persistence operation.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Input DTO
# ---------------------------------------------------------------------------


class ParsedProductData(BaseModel):
    """Immutable product record built from one form submission.

    Optional text fields are ``None`` when absent, never ``""``.
    ``price`` may be NaN: numeric checks belong to validation, not parsing.
    """

    model_config = ConfigDict(frozen=True)

    slug: str
    name: str
    name_en: Optional[str] = None
    description: Optional[str] = None
    description_en: Optional[str] = None
    price: float = 0.0
    currency: str = "RON"
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    featured: bool = False
    in_stock: bool = False

    def to_record(self) -> Dict[str, Any]:
        """Row payload for the ``products`` table."""
        record = self.model_dump()
        record["tags"] = list(self.tags)
        return record


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class ProductResult(BaseModel, Generic[T]):
    """Either ``success=True`` with ``data`` or ``success=False`` with ``error``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> ProductResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> ProductResult[T]:
        return cls(success=False, error=error)
