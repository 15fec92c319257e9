# clinic_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.common.api.serializers import StrictInputSerializer, StringListField
from clinic_core.patients.models import (
    NAME_MAX_LENGTH,
    UNIQUE_ID_MAX_LENGTH,
    Patient,
    PaymentMode,
    PaymentStatus,
    Report,
    Visit,
)


# ---------- input ----------

class PatientCreateSerializer(StrictInputSerializer):
    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
    phone = serializers.CharField(max_length=32)
    unique_id = serializers.CharField(max_length=UNIQUE_ID_MAX_LENGTH, required=False, allow_blank=True, allow_null=True)


class BloodPressureInputSerializer(StrictInputSerializer):
    systolic = serializers.FloatField(required=False, allow_null=True, min_value=0)
    diastolic = serializers.FloatField(required=False, allow_null=True, min_value=0)


class PaymentInputSerializer(StrictInputSerializer):
    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0
    )
    mode = serializers.ChoiceField(choices=PaymentMode.choices, required=False)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)


class VisitInputSerializer(StrictInputSerializer):
    """
    Frontdesk and doctor fields of one visit. Every field is optional.
    tests / medicines take a list or one comma-separated string.
    """
    date = serializers.DateTimeField(required=False, allow_null=True)

    symptoms = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bp = BloodPressureInputSerializer(required=False, allow_null=True)
    payment = PaymentInputSerializer(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    diagnosis = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tests = StringListField(required=False, allow_null=True)
    medicines = StringListField(required=False, allow_null=True)
    advice = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# ---------- output ----------

class ReportSerializer(serializers.ModelSerializer):
    url = serializers.CharField(read_only=True)

    class Meta:
        model = Report
        fields = ["id", "name", "stored_name", "mime", "size", "uploaded_at", "url"]
        read_only_fields = fields


class BloodPressureSerializer(serializers.Serializer):
    systolic = serializers.FloatField(source="bp_systolic", allow_null=True, read_only=True)
    diastolic = serializers.FloatField(source="bp_diastolic", allow_null=True, read_only=True)


class PaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        source="payment_amount",
        max_digits=10,
        decimal_places=2,
        coerce_to_string=False,
        allow_null=True,
        read_only=True,
    )
    mode = serializers.CharField(source="payment_mode", read_only=True)
    status = serializers.CharField(source="payment_status", read_only=True)


class VisitSerializer(serializers.ModelSerializer):
    bp = BloodPressureSerializer(source="*", read_only=True)
    payment = PaymentSerializer(source="*", read_only=True)
    reports = ReportSerializer(many=True, read_only=True)

    class Meta:
        model = Visit
        fields = [
            "id",
            "date",
            "symptoms",
            "bp",
            "payment",
            "notes",
            "diagnosis",
            "tests",
            "medicines",
            "advice",
            "reports",
            "created_at",
        ]
        read_only_fields = fields


class PatientSerializer(serializers.ModelSerializer):
    visits = VisitSerializer(many=True, read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "unique_id",
            "name",
            "phone",
            "registered_at",
            "visits",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PatientVisitsSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField(read_only=True)
    unique_id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    visits = VisitSerializer(many=True, read_only=True)


class ReportUploadSerializer(serializers.Serializer):
    file = serializers.FileField(allow_empty_file=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=NAME_MAX_LENGTH)


class DetailSerializer(serializers.Serializer):
    detail = serializers.CharField()
