"""Product service layer (Use Cases).

Orchestrates persistence of the Product aggregate, delegating every
round trip to the injected ``IBackendClient``.

Error contract:
- Collaborator failures never escape as exceptions; every method returns
  a ``ProductResult``.
- Failed results carry a generic, user-facing message.  The raw backend
  message is logged server-side only.
- Image cleanup during delete is advisory: its failures are logged and
  never change the outcome.
"""

from __future__ import annotations

import os
import secrets
import time
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

from modules.core.exceptions import StorageError
from modules.products.dtos import ProductResult
from modules.products.parsing import STORAGE_BUCKET, parse_storage_path

if TYPE_CHECKING:
    from modules.core.repositories.interfaces import IBackendClient, Row
    from modules.products.dtos import ParsedProductData

logger = structlog.get_logger(__name__)

PRODUCTS_TABLE = "products"

CREATE_FAILED = "Could not save product. Please try again."
UPDATE_FAILED = "Could not update product. Please try again."
LOAD_FAILED = "Could not load product."
LIST_FAILED = "Could not load products."
DELETE_FAILED = "Could not delete product. Please try again."
UPLOAD_FAILED = "Could not upload image. Please try again."


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IBackendClient`` via constructor injection (DIP).
    """

    def __init__(self, backend: IBackendClient) -> None:
        self._backend = backend

    @property
    def _products(self):
        return self._backend.rows(PRODUCTS_TABLE)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_product(self, data: ParsedProductData) -> ProductResult[None]:
        log = logger.bind(slug=data.slug)
        try:
            await self._products.insert(data.to_record())
        except StorageError as exc:
            log.error("product.create_failed", error=exc.message)
            return ProductResult.fail(CREATE_FAILED)
        log.info("product.created")
        return ProductResult.ok()

    async def update_product(
        self, id: str, data: ParsedProductData
    ) -> ProductResult[None]:
        log = logger.bind(product_id=id, slug=data.slug)
        try:
            await self._products.update(id, data.to_record())
        except StorageError as exc:
            log.error("product.update_failed", error=exc.message)
            return ProductResult.fail(UPDATE_FAILED)
        log.info("product.updated")
        return ProductResult.ok()

    async def delete_product(self, id: str) -> ProductResult[None]:
        """Delete a product row, removing its image first when possible.

        Only the row deletion decides the result.
        """
        log = logger.bind(product_id=id)

        try:
            product = await self._products.select_by_id(id, columns="image_url")
        except StorageError as exc:
            log.warning("product.image_lookup_failed", error=exc.message)
            product = None

        image_url = (product or {}).get("image_url")
        storage_path = parse_storage_path(image_url) if image_url else None
        if storage_path:
            try:
                await self._backend.bucket(STORAGE_BUCKET).remove([storage_path])
            except Exception as exc:
                log.warning(
                    "product.image_cleanup_failed",
                    storage_path=storage_path,
                    error=str(exc),
                )

        try:
            await self._products.delete_by_id(id)
        except StorageError as exc:
            log.error("product.delete_failed", error=exc.message)
            return ProductResult.fail(DELETE_FAILED)
        log.info("product.deleted")
        return ProductResult.ok()

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> ProductResult[str]:
        """Store an image as-is and return its public URL.

        Object names are ``<epoch-ms>-<random>.<ext>`` so uploads never
        collide with, or overwrite, an existing image.
        """
        ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
        path = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"
        bucket = self._backend.bucket(STORAGE_BUCKET)
        log = logger.bind(storage_path=path)
        try:
            await bucket.upload(path, content, content_type)
        except StorageError as exc:
            log.error("product.image_upload_failed", error=exc.message)
            return ProductResult.fail(UPLOAD_FAILED)
        log.info("product.image_uploaded", size=len(content))
        return ProductResult.ok(await bucket.public_url(path))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_product(self, id: str) -> ProductResult[Row]:
        try:
            row = await self._products.select_by_id(id)
        except StorageError as exc:
            logger.error("product.retrieve_failed", product_id=id, error=exc.message)
            return ProductResult.fail(LOAD_FAILED)
        if not row:
            logger.info("product.not_found", product_id=id)
            return ProductResult.fail(LOAD_FAILED)
        logger.info("product.retrieved", product_id=id)
        return ProductResult.ok(row)

    async def list_products(self) -> ProductResult[List[Dict[str, Any]]]:
        """Return every product, newest first."""
        try:
            rows = await self._products.select_all(order_by="created_at", descending=True)
        except StorageError as exc:
            logger.error("product.list_failed", error=exc.message)
            return ProductResult.fail(LIST_FAILED)
        return ProductResult.ok(rows)
