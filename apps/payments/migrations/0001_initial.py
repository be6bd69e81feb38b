import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("dispatch", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Thc",
            fields=[
                ("id",             models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("thc_number",     models.CharField(max_length=40, unique=True)),
                ("hire_amount",    models.DecimalField(
                    decimal_places=2, max_digits=12,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("advance_amount", models.DecimalField(
                    decimal_places=2, max_digits=12,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("balance_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("driver_name",    models.CharField(blank=True, max_length=120)),
                ("vehicle_number", models.CharField(blank=True, max_length=30)),
                ("status",         models.CharField(
                    choices=[
                        ("generated", "Generated"),
                        ("paid",      "Paid"),
                        ("completed", "Completed"),
                    ],
                    default="generated",
                    max_length=10,
                )),
                ("created_at",     models.DateTimeField(auto_now_add=True)),
                ("updated_at",     models.DateTimeField(auto_now=True)),
                ("manifest",       models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="thcs",
                    to="dispatch.manifest",
                )),
            ],
            options={"verbose_name": "THC", "ordering": ["-created_at", "-id"]},
        ),
        migrations.AddIndex(
            model_name="thc",
            index=models.Index(fields=["status"], name="thc_status_idx"),
        ),
    ]
