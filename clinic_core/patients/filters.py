# clinic_core/patients/filters.py
from __future__ import annotations

import django_filters
from django.db.models import Q

from clinic_core.patients.models import Patient


class PatientSearchFilter(django_filters.FilterSet):
    """
    q matches name, phone or unique_id (case-insensitive substring, literal).
    date_from / date_to bound the registration calendar date, both inclusive.
    """
    q = django_filters.CharFilter(method="filter_q")
    date_from = django_filters.DateFilter(field_name="registered_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="registered_at", lookup_expr="date__lte")

    class Meta:
        model = Patient
        fields = []

    def filter_q(self, queryset, name, value):
        qv = (value or "").strip()
        if not qv:
            return queryset
        return queryset.filter(
            Q(name__icontains=qv)
            | Q(phone__icontains=qv)
            | Q(unique_id__icontains=qv)
        )
