"""
URL configuration for the feed translator project.

Only the admin is served from here; the public items API lives in a
separate service that reads the same database.
"""
from django.urls import path

from core.custom_admin_site import core_admin_site

urlpatterns = [
    path("", core_admin_site.urls),
]
