from django.contrib import admin
from .models import Thc


@admin.register(Thc)
class ThcAdmin(admin.ModelAdmin):
    list_display  = ("thc_number", "manifest", "hire_amount", "advance_amount", "balance_amount", "status", "created_at")
    list_filter   = ("status",)
    search_fields = ("thc_number", "vehicle_number", "driver_name", "manifest__manifest_number")
    readonly_fields = ("balance_amount", "created_at", "updated_at")
