from django.urls import include, path

urlpatterns = [
    path("", include("modules.core.urls")),
    # Admin back office (double-submit CSRF, hosted auth)
    path("admin/products/", include("modules.products.urls")),
]
