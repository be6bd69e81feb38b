"""
Audit trail.
AuditLog rows are append-only: one row per mutating workflow action.
"""

from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    SYSTEM_ACTOR = "system"

    user        = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name="audit_logs",
    )
    username    = models.CharField(max_length=150, default=SYSTEM_ACTOR)
    action      = models.CharField(max_length=64)
    entity_type = models.CharField(max_length=40, blank=True)
    entity_id   = models.BigIntegerField(null=True, blank=True)
    summary     = models.TextField(blank=True)
    meta        = models.JSONField(default=dict, blank=True)
    ip          = models.CharField(max_length=64, blank=True)
    user_agent  = models.TextField(blank=True)
    created_at  = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes  = [
            models.Index(fields=["action"],                     name="audit_action_idx"),
            models.Index(fields=["entity_type", "entity_id"],   name="audit_entity_idx"),
            models.Index(fields=["created_at"],                 name="audit_created_idx"),
        ]

    def __str__(self):
        return f"{self.action} by {self.username} @ {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Audit log entries are immutable.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Audit log entries cannot be deleted.")
