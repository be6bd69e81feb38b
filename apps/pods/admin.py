from django.contrib import admin
from .models import Pod


@admin.register(Pod)
class PodAdmin(admin.ModelAdmin):
    list_display  = ("id", "docket", "status", "approved_by", "approved_at", "created_at")
    list_filter   = ("status",)
    search_fields = ("docket__docket_number",)
    readonly_fields = ("ai_analysis", "approved_by", "approved_at", "created_at", "updated_at")
