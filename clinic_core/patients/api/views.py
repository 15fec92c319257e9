# clinic_core/patients/api/views.py
from __future__ import annotations

from urllib.parse import quote

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from clinic_core.common.permissions import PatientPermission, ReportPermission
from clinic_core.patients.api.serializers import (
    DetailSerializer,
    PatientCreateSerializer,
    PatientSerializer,
    PatientVisitsSerializer,
    ReportSerializer,
    ReportUploadSerializer,
    VisitInputSerializer,
    VisitSerializer,
)
from clinic_core.patients.models import Patient
from clinic_core.patients.selectors import get_patient, list_reports, list_visits, search_patients
from clinic_core.patients.services import DEFAULT_MIME, PatientService, ReportService, VisitService
from clinic_core.patients.storage import get_report_storage


def _actor_id(request):
    user = getattr(request, "user", None)
    return user.id if user and user.is_authenticated else None


class PatientViewSet(viewsets.ViewSet):
    permission_classes = [PatientPermission]

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    @extend_schema(
        tags=["Patients"],
        parameters=[
            OpenApiParameter(name="q", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Substring of name, phone or unique id."),
            OpenApiParameter(name="from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False,
                             description="Registered on or after (YYYY-MM-DD)."),
            OpenApiParameter(name="to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False,
                             description="Registered on or before (YYYY-MM-DD)."),
        ],
        responses={200: PatientSerializer(many=True)},
    )
    def list(self, request):
        params = request.query_params
        qs = search_patients(
            q=params.get("q", ""),
            date_from=params.get("from") or params.get("date_from"),
            date_to=params.get("to") or params.get("date_to"),
        )
        return Response(PatientSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], request=PatientCreateSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(actor_user_id=_actor_id(request), **ser.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        patient = get_patient(patient_id=pk)
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Visits"],
        methods=["GET"],
        request=None,
        responses={200: PatientVisitsSerializer},
    )
    @extend_schema(
        tags=["Visits"],
        methods=["POST"],
        request=VisitInputSerializer,
        responses={201: VisitSerializer},
    )
    @action(detail=True, methods=["get", "post"], url_path="visits")
    def visits(self, request, pk=None):
        if request.method == "POST":
            ser = VisitInputSerializer(data=request.data)
            ser.is_valid(raise_exception=True)

            visit = VisitService.add_visit(
                patient_id=pk,
                data=ser.validated_data,
                actor_user_id=_actor_id(request),
            )
            return Response(VisitSerializer(visit).data, status=status.HTTP_201_CREATED)

        patient, visits = list_visits(patient_id=pk)
        payload = {
            "patient_id": patient.id,
            "unique_id": patient.unique_id,
            "name": patient.name,
            "visits": visits,
        }
        return Response(PatientVisitsSerializer(payload).data, status=status.HTTP_200_OK)


class VisitReportsView(APIView):
    """
    /patients/{patient_id}/visits/{visit_id}/reports/
    - GET reports of the visit
    - POST multipart upload (field "file", optional "name")
    """
    permission_classes = [ReportPermission]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(tags=["Reports"], responses={200: ReportSerializer(many=True)})
    def get(self, request, patient_id, visit_id):
        reports = list_reports(patient_id=patient_id, visit_id=visit_id)
        return Response(ReportSerializer(reports, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Reports"],
        request={"multipart/form-data": ReportUploadSerializer},
        responses={201: ReportSerializer(many=True)},
    )
    def post(self, request, patient_id, visit_id):
        ser = ReportUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reports = ReportService.upload(
            patient_id=patient_id,
            visit_id=visit_id,
            file=ser.validated_data["file"],
            name=ser.validated_data.get("name"),
            storage=get_report_storage(),
            actor_user_id=_actor_id(request),
        )
        return Response(ReportSerializer(reports, many=True).data, status=status.HTTP_201_CREATED)


class VisitReportDetailView(APIView):
    permission_classes = [ReportPermission]

    @extend_schema(tags=["Reports"], responses={200: DetailSerializer})
    def delete(self, request, patient_id, visit_id, report_id):
        ReportService.delete(
            patient_id=patient_id,
            visit_id=visit_id,
            report_id=report_id,
            storage=get_report_storage(),
            actor_user_id=_actor_id(request),
        )
        return Response({"detail": "Report deleted."}, status=status.HTTP_200_OK)


class VisitReportDownloadView(APIView):
    permission_classes = [ReportPermission]

    @extend_schema(tags=["Reports"], responses={(200, "application/octet-stream"): OpenApiTypes.BINARY})
    def get(self, request, patient_id, visit_id, report_id):
        report, fh = ReportService.open_download(
            patient_id=patient_id,
            visit_id=visit_id,
            report_id=report_id,
            storage=get_report_storage(),
        )
        response = FileResponse(fh, content_type=report.mime or DEFAULT_MIME)
        response["Content-Disposition"] = f'inline; filename="{quote(report.name or report.stored_name)}"'
        return response
