from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path

from orders import module


def health(_request):
    return JsonResponse({"service": "POS Backend", "status": "healthy", "version": module.MODULE_VERSION})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),
    path("api/", include("orders.urls")),
]
