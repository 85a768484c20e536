"""URL configuration for the workbench project."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("actionkit_django.urls")),
]
