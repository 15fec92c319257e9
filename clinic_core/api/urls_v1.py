# clinic_core/api/urls_v1.py
# Schema-only URLConf: the versioned API without the /api/ alias.
from django.urls import include, path

urlpatterns = [
    path("api/v1/", include("clinic_core.api.urls")),
]
