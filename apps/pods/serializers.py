"""POD serializers."""

from django.conf import settings
from rest_framework import serializers
from .models import Pod


class PodCreateSerializer(serializers.Serializer):
    docket_id = serializers.IntegerField(min_value=1)
    image_url = serializers.CharField(max_length=4096)


class PodUploadSerializer(serializers.Serializer):
    docket_id = serializers.IntegerField(min_value=1)
    image     = serializers.FileField()

    def validate_image(self, value):
        content_type = getattr(value, "content_type", "") or ""
        if not content_type.startswith("image/"):
            raise serializers.ValidationError("Only image files can be uploaded as a POD.")
        if value.size > settings.POD_UPLOAD_MAX_BYTES:
            raise serializers.ValidationError("Image is too large.")
        return value


class PodReviewSerializer(serializers.Serializer):
    status           = serializers.ChoiceField(choices=[Pod.Status.APPROVED, Pod.Status.REJECTED])
    rejection_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, data):
        if data["status"] == Pod.Status.REJECTED and not (data.get("rejection_reason") or "").strip():
            raise serializers.ValidationError(
                {"rejection_reason": "A reason is required when rejecting a POD."}
            )
        return data


class PodSerializer(serializers.ModelSerializer):
    docket_number = serializers.CharField(source="docket.docket_number", read_only=True)
    approved_by_username = serializers.CharField(source="approved_by.username", read_only=True, default=None)

    class Meta:
        model  = Pod
        fields = [
            "id", "docket", "docket_number", "image_url", "status",
            "ai_analysis", "rejection_reason",
            "approved_by", "approved_by_username", "approved_at",
            "created_at", "updated_at",
        ]
