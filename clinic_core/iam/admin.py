from django.contrib import admin

from clinic_core.iam.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name")
    exclude = ("password",)
    ordering = ("-created_at",)

    def get_readonly_fields(self, request, obj=None):
        # role is fixed once the account exists
        if obj is not None:
            return ("role", "created_at", "updated_at", "last_login")
        return ("created_at", "updated_at", "last_login")
