"""Loading sheet and manifest serializers."""

from rest_framework import serializers

from apps.dockets.serializers import DocketSerializer
from apps.payments.serializers import ThcSerializer
from .models import LoadingSheet, Manifest


class LoadingSheetCreateSerializer(serializers.ModelSerializer):
    docket_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), write_only=True)
    status     = serializers.ChoiceField(choices=LoadingSheet.Status.choices, required=False)
    date       = serializers.DateField(required=False)

    class Meta:
        model  = LoadingSheet
        fields = ["sheet_number", "vehicle_number", "driver_name", "destination", "date", "status", "docket_ids"]


class LoadingSheetSerializer(serializers.ModelSerializer):
    docket_count    = serializers.IntegerField(source="docket_links.count", read_only=True)
    manifest_number = serializers.CharField(source="manifest.manifest_number", read_only=True, default=None)

    class Meta:
        model  = LoadingSheet
        fields = [
            "id", "sheet_number", "vehicle_number", "driver_name", "destination",
            "date", "status", "docket_count", "manifest_number", "created_at",
        ]


class LoadingSheetDetailSerializer(LoadingSheetSerializer):
    dockets = DocketSerializer(many=True, read_only=True)

    class Meta(LoadingSheetSerializer.Meta):
        fields = LoadingSheetSerializer.Meta.fields + ["dockets"]


class ManifestCreateSerializer(serializers.Serializer):
    loading_sheet_id = serializers.IntegerField(min_value=1)


class ManifestSerializer(serializers.ModelSerializer):
    loading_sheet_number = serializers.CharField(source="loading_sheet.sheet_number", read_only=True)
    vehicle_number       = serializers.CharField(source="loading_sheet.vehicle_number", read_only=True)

    class Meta:
        model  = Manifest
        fields = [
            "id", "manifest_number", "loading_sheet", "loading_sheet_number",
            "vehicle_number", "status", "generated_at",
        ]


class ManifestDetailSerializer(ManifestSerializer):
    loading_sheet = LoadingSheetSerializer(read_only=True)
    dockets       = serializers.SerializerMethodField()
    thc           = serializers.SerializerMethodField()

    class Meta(ManifestSerializer.Meta):
        fields = ManifestSerializer.Meta.fields + ["dockets", "thc"]

    def get_dockets(self, obj):
        dockets = obj.loading_sheet.dockets.prefetch_related("items").order_by("id")
        return DocketSerializer(dockets, many=True).data

    def get_thc(self, obj):
        thc = obj.latest_thc()
        return ThcSerializer(thc).data if thc else None
