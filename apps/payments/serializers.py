"""THC serializers."""

from rest_framework import serializers
from .models import Thc

AMOUNT = dict(max_digits=12, decimal_places=2, min_value=0)


class ThcCreateSerializer(serializers.ModelSerializer):
    manifest_id    = serializers.IntegerField(min_value=1)
    hire_amount    = serializers.DecimalField(**AMOUNT)
    advance_amount = serializers.DecimalField(**AMOUNT)
    balance_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    status         = serializers.ChoiceField(choices=Thc.Status.choices, required=False)

    class Meta:
        model  = Thc
        fields = [
            "thc_number", "manifest_id",
            "hire_amount", "advance_amount", "balance_amount",
            "driver_name", "vehicle_number", "status",
        ]


class ThcUpdateSerializer(ThcCreateSerializer):
    """Every field optional; balance is re-checked by the workflow."""

    class Meta(ThcCreateSerializer.Meta):
        extra_kwargs = {
            "thc_number":     {"required": False},
            "driver_name":    {"required": False},
            "vehicle_number": {"required": False},
        }

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)


class ThcSerializer(serializers.ModelSerializer):
    manifest_number = serializers.CharField(source="manifest.manifest_number", read_only=True)

    class Meta:
        model  = Thc
        fields = [
            "id", "thc_number", "manifest", "manifest_number",
            "hire_amount", "advance_amount", "balance_amount",
            "driver_name", "vehicle_number", "status",
            "created_at", "updated_at",
        ]
