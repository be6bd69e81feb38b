"""
Dispatch models: loading sheets and the manifests generated from them.
"""

from django.db import models
from django.utils import timezone


class LoadingSheet(models.Model):
    """A vehicle trip grouping one or more dockets."""

    class Status(models.TextChoices):
        DRAFT     = "draft",     "Draft"
        FINALIZED = "finalized", "Finalized"

    sheet_number   = models.CharField(max_length=40, unique=True)
    vehicle_number = models.CharField(max_length=30)
    driver_name    = models.CharField(max_length=120)
    destination    = models.CharField(max_length=255)
    date           = models.DateField(default=timezone.localdate)
    status         = models.CharField(max_length=10, choices=Status.choices, default=Status.DRAFT)
    dockets        = models.ManyToManyField(
        "dockets.Docket", through="LoadingSheetDocket", related_name="loading_sheets",
    )
    created_at     = models.DateTimeField(auto_now_add=True)
    updated_at     = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes  = [models.Index(fields=["status"], name="sheet_status_idx")]

    def __str__(self):
        return f"{self.sheet_number} – {self.vehicle_number}"


class LoadingSheetDocket(models.Model):
    loading_sheet = models.ForeignKey(LoadingSheet, on_delete=models.CASCADE, related_name="docket_links")
    docket        = models.ForeignKey("dockets.Docket", on_delete=models.PROTECT, related_name="sheet_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["loading_sheet", "docket"], name="sheet_docket_unique"),
        ]


class Manifest(models.Model):
    """Trip document; at most one per loading sheet."""

    class Status(models.TextChoices):
        GENERATED = "generated", "Generated"

    manifest_number = models.CharField(max_length=40, unique=True)
    loading_sheet   = models.OneToOneField(LoadingSheet, on_delete=models.PROTECT, related_name="manifest")
    status          = models.CharField(max_length=10, choices=Status.choices, default=Status.GENERATED)
    generated_at    = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-generated_at", "-id"]

    def __str__(self):
        return self.manifest_number

    def latest_thc(self):
        return self.thcs.order_by("-created_at", "-id").first()
