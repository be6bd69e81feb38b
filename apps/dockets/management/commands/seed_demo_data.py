"""
Management command: seed demo dockets and walk them through the workflow.

Usage:
    python manage.py seed_demo_data
"""

from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand

from apps.dockets.models import Docket
from apps.workflow.service import workflow


DOCKETS = [
    {
        "docket_number": "DOC-001",
        "sender_name": "Acme Corp", "sender_address": "123 Industrial Park, NY",
        "receiver_name": "Global Logistics", "receiver_address": "456 Port Rd, NJ",
        "pickup_date": date(2023, 10, 25), "delivery_date": date(2023, 10, 27),
        "special_instructions": "Handle with care",
        "total_weight": Decimal("500.00"), "total_packages": 10,
        "geofence_lat": Decimal("40.7128"), "geofence_lng": Decimal("-74.0060"),
        "geofence_radius_km": Decimal("6"),
        "current_lat": Decimal("40.7306"), "current_lng": Decimal("-73.9352"),
        "items": [
            {"description": "Electronics", "weight": Decimal("200.00"), "quantity": 5, "package_type": "box"},
            {"description": "Cables",      "weight": Decimal("300.00"), "quantity": 5, "package_type": "pallet"},
        ],
    },
    {
        "docket_number": "DOC-002",
        "sender_name": "Tech Solutions", "sender_address": "789 Valley Dr, CA",
        "receiver_name": "Retail Store A", "receiver_address": "321 Main St, CA",
        "pickup_date": date(2023, 10, 26), "delivery_date": date(2023, 10, 28),
        "special_instructions": "Urgent delivery",
        "total_weight": Decimal("150.50"), "total_packages": 2,
        "geofence_lat": Decimal("34.0522"), "geofence_lng": Decimal("-118.2437"),
        "geofence_radius_km": Decimal("4"),
        "current_lat": Decimal("34.0407"), "current_lng": Decimal("-118.2468"),
        "items": [
            {"description": "Laptops", "weight": Decimal("150.50"), "quantity": 2, "package_type": "box"},
        ],
    },
    {
        "docket_number": "DOC-003",
        "sender_name": "Fresh Foods", "sender_address": "Farm Lane 1, TX",
        "receiver_name": "Supermarket Chain", "receiver_address": "Market St 5, TX",
        "pickup_date": date(2023, 10, 27), "delivery_date": date(2023, 10, 27),
        "special_instructions": "Temperature controlled",
        "total_weight": Decimal("1000.00"), "total_packages": 20,
        "geofence_lat": Decimal("29.7604"), "geofence_lng": Decimal("-95.3698"),
        "geofence_radius_km": Decimal("8"),
        "current_lat": Decimal("29.7499"), "current_lng": Decimal("-95.3584"),
        "items": [
            {"description": "Vegetables", "weight": Decimal("1000.00"), "quantity": 20, "package_type": "crate"},
        ],
    },
]


class Command(BaseCommand):
    help = "Seed demo dockets, a loading sheet, manifest, THC and POD"

    def handle(self, *args, **options):
        if Docket.objects.filter(docket_number="DOC-001").exists():
            self.stdout.write(self.style.WARNING("Demo data already present: nothing to do."))
            return

        doc1, doc2, doc3 = (workflow.book_docket(data) for data in DOCKETS)

        sheet = workflow.assemble_loading_sheet({
            "sheet_number":   "LS-1001",
            "vehicle_number": "KA-01-AB-1234",
            "driver_name":    "John Doe",
            "destination":    "NJ Hub",
            "docket_ids":     [doc1.pk, doc2.pk],
        })
        manifest = workflow.generate_manifest(sheet.pk)
        workflow.issue_thc({
            "thc_number":     "THC-3001",
            "manifest_id":    manifest.pk,
            "hire_amount":    Decimal("5000.00"),
            "advance_amount": Decimal("2000.00"),
        })
        workflow.submit_pod(doc3.pk, "https://placehold.co/600x400?text=POD+Image")

        self.stdout.write(self.style.SUCCESS(
            f"Seeded 3 dockets, sheet {sheet.sheet_number}, manifest {manifest.manifest_number}."
        ))
