from django.contrib import admin
from .models import Docket, DocketItem


class DocketItemInline(admin.TabularInline):
    model  = DocketItem
    extra  = 0
    readonly_fields = ("description", "weight", "quantity", "package_type")


@admin.register(Docket)
class DocketAdmin(admin.ModelAdmin):
    list_display  = ("docket_number", "status", "sender_name", "receiver_name", "total_weight", "total_packages", "created_at")
    list_filter   = ("status",)
    search_fields = ("docket_number", "sender_name", "receiver_name")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering      = ("-created_at",)
    inlines       = [DocketItemInline]
