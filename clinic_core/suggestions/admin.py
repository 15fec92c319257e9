from django.contrib import admin

from clinic_core.suggestions.models import Suggestion


@admin.register(Suggestion)
class SuggestionAdmin(admin.ModelAdmin):
    list_display = ("type", "text", "count", "updated_at")
    list_filter = ("type",)
    search_fields = ("text",)
    readonly_fields = ("count", "created_at", "updated_at")
    ordering = ("type", "-count", "text")
