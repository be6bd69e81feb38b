"""Audit log serializers."""

from rest_framework import serializers
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    class Meta:
        model  = AuditLog
        fields = [
            "id", "user", "username", "action", "entity_type", "entity_id",
            "summary", "meta", "ip", "user_agent", "created_at",
        ]
        read_only_fields = fields
