from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display  = ("created_at", "username", "action", "entity_type", "entity_id", "summary")
    list_filter   = ("action", "entity_type")
    search_fields = ("action", "username", "summary")
    ordering      = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
