from django.contrib import admin

from clinic_core.patients.models import Patient, Report, Visit


class VisitInline(admin.TabularInline):
    model = Visit
    extra = 0
    fields = ("date", "symptoms", "diagnosis", "payment_status")
    readonly_fields = fields
    show_change_link = True


class ReportInline(admin.TabularInline):
    model = Report
    extra = 0
    fields = ("name", "stored_name", "mime", "size", "uploaded_at")
    readonly_fields = fields


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("unique_id", "name", "phone", "registered_at")
    search_fields = ("unique_id", "name", "phone")
    readonly_fields = ("id", "registered_at", "created_at", "updated_at")
    ordering = ("-registered_at",)
    inlines = [VisitInline]


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ("patient", "date", "payment_mode", "payment_status")
    list_filter = ("payment_mode", "payment_status")
    search_fields = ("patient__unique_id", "patient__name")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [ReportInline]
