"""Docket serializers."""

from rest_framework import serializers
from .models import Docket, DocketItem


class DocketItemSerializer(serializers.ModelSerializer):
    class Meta:
        model  = DocketItem
        fields = ["id", "description", "weight", "quantity", "package_type"]
        read_only_fields = ["id"]


class PodSummarySerializer(serializers.Serializer):
    id               = serializers.IntegerField()
    status           = serializers.CharField()
    image_url        = serializers.CharField()
    ai_analysis      = serializers.JSONField()
    rejection_reason = serializers.CharField(allow_null=True)
    approved_at      = serializers.DateTimeField(allow_null=True)
    created_at       = serializers.DateTimeField()


class DocketCreateSerializer(serializers.ModelSerializer):
    items = DocketItemSerializer(many=True, allow_empty=False)

    class Meta:
        model  = Docket
        fields = [
            "docket_number",
            "sender_name", "sender_address",
            "receiver_name", "receiver_address",
            "pickup_date", "delivery_date", "special_instructions",
            "total_weight", "total_packages",
            "geofence_lat", "geofence_lng", "geofence_radius_km",
            "current_lat", "current_lng",
            "items",
        ]

    def validate_geofence_radius_km(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Geofence radius must be greater than zero.")
        return value


class DocketSerializer(serializers.ModelSerializer):
    items = DocketItemSerializer(many=True, read_only=True)

    class Meta:
        model  = Docket
        fields = [
            "id", "docket_number", "status",
            "sender_name", "sender_address",
            "receiver_name", "receiver_address",
            "pickup_date", "delivery_date", "special_instructions",
            "total_weight", "total_packages",
            "geofence_lat", "geofence_lng", "geofence_radius_km",
            "current_lat", "current_lng",
            "items", "created_at", "updated_at",
        ]


class DocketDetailSerializer(DocketSerializer):
    pod = serializers.SerializerMethodField()

    class Meta(DocketSerializer.Meta):
        fields = DocketSerializer.Meta.fields + ["pod"]

    def get_pod(self, obj):
        pod = obj.latest_pod()
        return PodSummarySerializer(pod).data if pod else None


class DocketStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Docket.Status.choices)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)
