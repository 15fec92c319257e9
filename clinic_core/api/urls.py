# clinic_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from clinic_core.audit.api.views import AuditEventViewSet
from clinic_core.common.views import HealthView
from clinic_core.iam.api.auth import LoginView, LogoutView, SignupView
from clinic_core.iam.api.me import MeView
from clinic_core.patients.api.views import (
    PatientViewSet,
    VisitReportDetailView,
    VisitReportDownloadView,
    VisitReportsView,
)
from clinic_core.suggestions.api.views import SuggestionBulkView, SuggestionView

router = DefaultRouter()

router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

urlpatterns = [
    path("health/", HealthView.as_view(), name="health"),

    # Auth + /me
    path("auth/signup/", SignupView.as_view(), name="signup"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/me/", MeView.as_view(), name="me"),

    # Visit reports
    path(
        "patients/<str:patient_id>/visits/<str:visit_id>/reports/",
        VisitReportsView.as_view(),
        name="patient-visit-reports",
    ),
    path(
        "patients/<str:patient_id>/visits/<str:visit_id>/reports/<str:report_id>/",
        VisitReportDetailView.as_view(),
        name="patient-report-detail",
    ),
    path(
        "patients/<str:patient_id>/visits/<str:visit_id>/reports/<str:report_id>/download/",
        VisitReportDownloadView.as_view(),
        name="patient-report-download",
    ),

    # Suggestions
    path("suggestions/", SuggestionView.as_view(), name="suggestions"),
    path("suggestions/bulk/", SuggestionBulkView.as_view(), name="suggestions-bulk"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
