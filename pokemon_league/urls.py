from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("PL_battle.urls")),          # API lives under /api/ inside PL_battle.urls
]
