# clinic_core/suggestions/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from clinic_core.common.permissions import SuggestionPermission
from clinic_core.suggestions.api.serializers import (
    BulkResultSerializer,
    SuggestionBulkSerializer,
    SuggestionSerializer,
    SuggestionUpsertSerializer,
)
from clinic_core.suggestions.selectors import search_suggestions
from clinic_core.suggestions.services import SuggestionService


class SuggestionView(APIView):
    """
    /suggestions/
    - GET ranked autocomplete texts
    - POST create or increment one suggestion
    """
    permission_classes = [SuggestionPermission]

    @extend_schema(
        tags=["Suggestions"],
        parameters=[
            OpenApiParameter(name="type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=True,
                             enum=["SYMPTOM", "MEDICINE"]),
            OpenApiParameter(name="prefix", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Case-insensitive prefix."),
        ],
        responses={200: OpenApiTypes.STR},
    )
    def get(self, request):
        texts = search_suggestions(
            type=request.query_params.get("type", ""),
            prefix=request.query_params.get("prefix", ""),
        )
        return Response(texts, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Suggestions"],
        request=SuggestionUpsertSerializer,
        responses={200: SuggestionSerializer},
    )
    def post(self, request):
        ser = SuggestionUpsertSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        row = SuggestionService.upsert(**ser.validated_data)
        return Response(SuggestionSerializer(row).data, status=status.HTTP_200_OK)


class SuggestionBulkView(APIView):
    permission_classes = [SuggestionPermission]

    @extend_schema(
        tags=["Suggestions"],
        request=SuggestionBulkSerializer,
        responses={200: BulkResultSerializer},
    )
    def post(self, request):
        ser = SuggestionBulkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = SuggestionService.bulk_upsert(**ser.validated_data)
        return Response(result.as_dict(), status=status.HTTP_200_OK)
