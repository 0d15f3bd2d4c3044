"""Admin product URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.products import views

urlpatterns = [
    path("", views.product_list, name="admin_product_list"),
    path("new/", views.product_create, name="admin_product_create"),
    path("<str:pk>/edit/", views.product_edit, name="admin_product_edit"),
    path("upload-image/", views.upload_image, name="admin_product_upload_image"),
]
