"""Admin product views.

Exposes ``ProductService`` to the back office as plain HTML forms.
Every POST is checked with the double-submit CSRF protocol before the
submission reaches the parser, the validator and the service.  Each
rendered form issues a fresh token (rotation), so stale tabs are rejected.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from asgiref.sync import sync_to_async
from django.conf import settings
from django.http import (
    HttpRequest,
    HttpResponse,
    HttpResponseForbidden,
    HttpResponseRedirect,
    JsonResponse,
)
from django.shortcuts import render
from django.urls import reverse
from django.views.decorators.http import require_http_methods, require_POST

from modules.core.authentication import admin_required
from modules.core.csrf import (
    CSRF_FIELD,
    generate_csrf_token,
    read_csrf_cookie,
    set_csrf_cookie,
    validate_csrf_tokens,
)
from modules.products.parsing import parse_product_form_data
from modules.products.services import ProductService
from modules.products.validation import (
    ALLOWED_CURRENCIES,
    errors_by_field,
    validate_product_data,
)

logger = structlog.get_logger(__name__)

FORM_TEMPLATE = "products/admin_form.html"
LIST_TEMPLATE = "products/admin_list.html"

ACTIONS = ("create", "update", "delete")

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_IMAGE_BYTES = 5 * 1024 * 1024


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _render_with_token(
    request: HttpRequest,
    template: str,
    context: Dict[str, Any],
    status: int = 200,
) -> HttpResponse:
    token = generate_csrf_token()
    context = {**context, "csrf_token_value": token, "csrf_field": CSRF_FIELD}
    response = render(request, template, context, status=status)
    set_csrf_cookie(response, token, secure=settings.CSRF_COOKIE_SECURE)
    return response


def _csrf_ok(request: HttpRequest) -> bool:
    cookie_token = read_csrf_cookie(request.COOKIES)
    form_token = request.POST.get(CSRF_FIELD, "")
    if validate_csrf_tokens(cookie_token, form_token):
        return True
    logger.warning(
        "csrf.rejected",
        path=request.path,
        has_cookie=bool(cookie_token),
        has_form_token=bool(form_token),
    )
    return False


def _csrf_rejected() -> HttpResponse:
    return HttpResponseForbidden("Invalid or expired form. Reload the page and try again.")


def _render_form(
    request: HttpRequest,
    *,
    product_id: Optional[str],
    form: Dict[str, Any],
    errors: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    status: int = 200,
) -> HttpResponse:
    return _render_with_token(
        request,
        FORM_TEMPLATE,
        {
            "product_id": product_id,
            "form": form,
            "errors": errors or {},
            "error": error,
            "currencies": ALLOWED_CURRENCIES,
        },
        status=status,
    )


def _form_from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Row values as the string form the template echoes back."""
    form = {key: ("" if value is None else value) for key, value in row.items()}
    form["tags"] = ", ".join(row.get("tags") or [])
    form["featured"] = "true" if row.get("featured") else ""
    form["in_stock"] = "true" if row.get("in_stock") else ""
    return form


async def _handle_submission(
    request: HttpRequest, product_id: Optional[str]
) -> HttpResponse:
    """Dispatch a CSRF-verified POST on its ``action`` field."""
    service = ProductService(backend=request.backend)
    action = request.POST.get("action", "")
    target_id = request.POST.get("id") or product_id or ""
    list_url = reverse("admin_product_list")

    if action not in ACTIONS:
        return HttpResponse("Unknown action.", status=400)

    if action == "delete":
        if not target_id:
            return HttpResponse("Missing product id.", status=400)
        result = await service.delete_product(target_id)
        if not result.success:
            listing = await service.list_products()
            return _render_with_token(
                request,
                LIST_TEMPLATE,
                {"products": listing.data or [], "error": result.error},
                status=400,
            )
        return HttpResponseRedirect(list_url)

    form = request.POST.dict()
    data = parse_product_form_data(request.POST)
    errors = validate_product_data(data)
    if errors:
        logger.info(
            "product.validation_failed",
            action=action,
            fields=sorted({e.field for e in errors}),
        )
        return _render_form(
            request,
            product_id=target_id or None,
            form=form,
            errors=errors_by_field(errors),
            status=400,
        )

    if action == "create":
        result = await service.create_product(data)
    else:
        if not target_id:
            return HttpResponse("Missing product id.", status=400)
        result = await service.update_product(target_id, data)

    if not result.success:
        return _render_form(
            request,
            product_id=target_id or None,
            form=form,
            error=result.error,
            status=400,
        )
    return HttpResponseRedirect(list_url)


# ------------------------------------------------------------------
# Views
# ------------------------------------------------------------------


@require_http_methods(["GET", "POST"])
@admin_required
async def product_list(request: HttpRequest) -> HttpResponse:
    """GET/POST /admin/products/"""
    if request.method == "POST":
        if not _csrf_ok(request):
            return _csrf_rejected()
        return await _handle_submission(request, product_id=None)

    result = await ProductService(backend=request.backend).list_products()
    return _render_with_token(
        request,
        LIST_TEMPLATE,
        {"products": result.data or [], "error": result.error},
    )


@require_http_methods(["GET", "POST"])
@admin_required
async def product_create(request: HttpRequest) -> HttpResponse:
    """GET/POST /admin/products/new/"""
    if request.method == "POST":
        if not _csrf_ok(request):
            return _csrf_rejected()
        return await _handle_submission(request, product_id=None)

    return _render_form(
        request,
        product_id=None,
        form={"currency": "RON", "in_stock": "true"},
    )


@require_http_methods(["GET", "POST"])
@admin_required
async def product_edit(request: HttpRequest, pk: str) -> HttpResponse:
    """GET/POST /admin/products/{pk}/edit/"""
    if request.method == "POST":
        if not _csrf_ok(request):
            return _csrf_rejected()
        return await _handle_submission(request, product_id=pk)

    result = await ProductService(backend=request.backend).get_product(pk)
    if not result.success:
        return _render_with_token(
            request,
            LIST_TEMPLATE,
            {"products": [], "error": result.error},
            status=404,
        )
    return _render_form(request, product_id=pk, form=_form_from_row(result.data))


@require_POST
@admin_required
async def upload_image(request: HttpRequest) -> HttpResponse:
    """POST /admin/products/upload-image/

    Pass-through to the ``product-images`` bucket; returns ``{"url": ...}``.
    """
    if not _csrf_ok(request):
        return JsonResponse({"error": "Invalid CSRF token."}, status=403)

    upload = request.FILES.get("file")
    if upload is None:
        return JsonResponse({"error": "No file uploaded."}, status=400)
    content_type = upload.content_type or ""
    if content_type not in ALLOWED_IMAGE_TYPES:
        return JsonResponse(
            {"error": "Only JPEG, PNG, WebP or GIF images are accepted."}, status=400
        )
    if upload.size > MAX_IMAGE_BYTES:
        return JsonResponse({"error": "Image must be at most 5 MB."}, status=400)

    # Large uploads are spooled to a temporary file.
    content = await sync_to_async(upload.read)()
    result = await ProductService(backend=request.backend).upload_image(
        upload.name, content, content_type
    )
    if not result.success:
        return JsonResponse({"error": result.error}, status=502)
    return JsonResponse({"url": result.data}, status=201)
