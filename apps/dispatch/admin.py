from django.contrib import admin
from .models import LoadingSheet, LoadingSheetDocket, Manifest


class LoadingSheetDocketInline(admin.TabularInline):
    model = LoadingSheetDocket
    extra = 0
    raw_id_fields = ("docket",)


@admin.register(LoadingSheet)
class LoadingSheetAdmin(admin.ModelAdmin):
    list_display  = ("sheet_number", "vehicle_number", "driver_name", "destination", "date", "status", "created_at")
    list_filter   = ("status",)
    search_fields = ("sheet_number", "vehicle_number", "driver_name")
    ordering      = ("-created_at",)
    inlines       = [LoadingSheetDocketInline]


@admin.register(Manifest)
class ManifestAdmin(admin.ModelAdmin):
    list_display  = ("manifest_number", "loading_sheet", "status", "generated_at")
    search_fields = ("manifest_number", "loading_sheet__sheet_number")
    readonly_fields = ("generated_at",)
