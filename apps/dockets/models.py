"""
Docket models.
A Docket is a shipment booking; its status only moves forward through the lifecycle.
"""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Docket(models.Model):

    class Status(models.TextChoices):
        BOOKED     = "booked",     "Booked"
        LOADED     = "loaded",     "Loaded"
        IN_TRANSIT = "in_transit", "In Transit"
        DELIVERED  = "delivered",  "Delivered"

    # Forward order of the lifecycle
    LIFECYCLE = (Status.BOOKED, Status.LOADED, Status.IN_TRANSIT, Status.DELIVERED)

    docket_number        = models.CharField(max_length=40, unique=True)
    sender_name          = models.CharField(max_length=120)
    sender_address       = models.CharField(max_length=255)
    receiver_name        = models.CharField(max_length=120)
    receiver_address     = models.CharField(max_length=255)
    pickup_date          = models.DateField(null=True, blank=True)
    delivery_date        = models.DateField(null=True, blank=True)
    status               = models.CharField(max_length=12, choices=Status.choices, default=Status.BOOKED)
    special_instructions = models.TextField(blank=True)
    total_weight         = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0)],
    )
    total_packages       = models.PositiveIntegerField(null=True, blank=True)
    geofence_lat         = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    geofence_lng         = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    geofence_radius_km   = models.DecimalField(
        max_digits=7, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0)],
    )
    current_lat          = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    current_lng          = models.DecimalField(
        max_digits=9, decimal_places=6, null=True, blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    created_at           = models.DateTimeField(auto_now_add=True)
    updated_at           = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes  = [
            models.Index(fields=["status"],     name="docket_status_idx"),
            models.Index(fields=["created_at"], name="docket_created_idx"),
        ]

    def __str__(self):
        return f"{self.docket_number} [{self.status}]"

    @classmethod
    def rank(cls, status) -> int:
        return cls.LIFECYCLE.index(status)

    @classmethod
    def statuses_before(cls, status) -> list:
        """Statuses a docket may be advanced out of when moving to `status`."""
        return list(cls.LIFECYCLE[:cls.rank(status)])

    @property
    def has_geofence(self) -> bool:
        return None not in (self.geofence_lat, self.geofence_lng, self.geofence_radius_km)

    @property
    def has_position(self) -> bool:
        return None not in (self.current_lat, self.current_lng)

    def latest_pod(self):
        return self.pods.order_by("-created_at", "-id").first()


class DocketItem(models.Model):
    """A line of goods on a docket; never edited after booking."""
    docket       = models.ForeignKey(Docket, on_delete=models.CASCADE, related_name="items")
    description  = models.CharField(max_length=255)
    weight       = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    quantity     = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    package_type = models.CharField(max_length=40)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} × {self.description}"
