import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Docket",
            fields=[
                ("id",                   models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("docket_number",        models.CharField(max_length=40, unique=True)),
                ("sender_name",          models.CharField(max_length=120)),
                ("sender_address",       models.CharField(max_length=255)),
                ("receiver_name",        models.CharField(max_length=120)),
                ("receiver_address",     models.CharField(max_length=255)),
                ("pickup_date",          models.DateField(blank=True, null=True)),
                ("delivery_date",        models.DateField(blank=True, null=True)),
                ("status",               models.CharField(
                    choices=[
                        ("booked",     "Booked"),
                        ("loaded",     "Loaded"),
                        ("in_transit", "In Transit"),
                        ("delivered",  "Delivered"),
                    ],
                    default="booked",
                    max_length=12,
                )),
                ("special_instructions", models.TextField(blank=True)),
                ("total_weight",         models.DecimalField(
                    blank=True, decimal_places=2, max_digits=10, null=True,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("total_packages",       models.PositiveIntegerField(blank=True, null=True)),
                ("geofence_lat",         models.DecimalField(
                    blank=True, decimal_places=6, max_digits=9, null=True,
                    validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)],
                )),
                ("geofence_lng",         models.DecimalField(
                    blank=True, decimal_places=6, max_digits=9, null=True,
                    validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)],
                )),
                ("geofence_radius_km",   models.DecimalField(
                    blank=True, decimal_places=2, max_digits=7, null=True,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("current_lat",          models.DecimalField(
                    blank=True, decimal_places=6, max_digits=9, null=True,
                    validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)],
                )),
                ("current_lng",          models.DecimalField(
                    blank=True, decimal_places=6, max_digits=9, null=True,
                    validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)],
                )),
                ("created_at",           models.DateTimeField(auto_now_add=True)),
                ("updated_at",           models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="DocketItem",
            fields=[
                ("id",           models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description",  models.CharField(max_length=255)),
                ("weight",       models.DecimalField(
                    decimal_places=2, max_digits=10,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("quantity",     models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("package_type", models.CharField(max_length=40)),
                ("docket",       models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="items",
                    to="dockets.docket",
                )),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.AddIndex(
            model_name="docket",
            index=models.Index(fields=["status"], name="docket_status_idx"),
        ),
        migrations.AddIndex(
            model_name="docket",
            index=models.Index(fields=["created_at"], name="docket_created_idx"),
        ),
    ]
