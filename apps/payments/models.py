"""
Transport Hire Challan (THC): the vehicle-hire payment record of a manifest.
balance_amount is always hire_amount − advance_amount.
"""

from django.core.validators import MinValueValidator
from django.db import models


class Thc(models.Model):

    class Status(models.TextChoices):
        GENERATED = "generated", "Generated"
        PAID      = "paid",      "Paid"
        COMPLETED = "completed", "Completed"

    thc_number     = models.CharField(max_length=40, unique=True)
    manifest       = models.ForeignKey("dispatch.Manifest", on_delete=models.PROTECT, related_name="thcs")
    hire_amount    = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    balance_amount = models.DecimalField(max_digits=12, decimal_places=2)
    driver_name    = models.CharField(max_length=120, blank=True)
    vehicle_number = models.CharField(max_length=30, blank=True)
    status         = models.CharField(max_length=10, choices=Status.choices, default=Status.GENERATED)
    created_at     = models.DateTimeField(auto_now_add=True)
    updated_at     = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "THC"
        ordering = ["-created_at", "-id"]
        indexes  = [models.Index(fields=["status"], name="thc_status_idx")]

    def __str__(self):
        return f"{self.thc_number} [{self.status}]"
