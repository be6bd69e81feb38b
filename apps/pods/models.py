"""
Proof of Delivery (POD).
A docket may collect several PODs; the newest one is the one shown and reviewed.
"""

from django.conf import settings
from django.db import models


class Pod(models.Model):

    class Status(models.TextChoices):
        PENDING_REVIEW = "pending_review", "Pending Review"
        APPROVED       = "approved",       "Approved"
        REJECTED       = "rejected",       "Rejected"

    docket           = models.ForeignKey("dockets.Docket", on_delete=models.PROTECT, related_name="pods")
    image_url        = models.TextField()
    status           = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING_REVIEW)
    ai_analysis      = models.JSONField(null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)
    approved_by      = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name="approved_pods",
    )
    approved_at      = models.DateTimeField(null=True, blank=True)
    created_at       = models.DateTimeField(auto_now_add=True)
    updated_at       = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "POD"
        ordering = ["-created_at", "-id"]
        indexes  = [models.Index(fields=["status"], name="pod_status_idx")]

    def __str__(self):
        return f"POD#{self.pk} for {self.docket_id} [{self.status}]"
