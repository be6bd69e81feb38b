import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("dockets", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Pod",
            fields=[
                ("id",               models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("image_url",        models.TextField()),
                ("status",           models.CharField(
                    choices=[
                        ("pending_review", "Pending Review"),
                        ("approved",       "Approved"),
                        ("rejected",       "Rejected"),
                    ],
                    default="pending_review",
                    max_length=16,
                )),
                ("ai_analysis",      models.JSONField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("approved_at",      models.DateTimeField(blank=True, null=True)),
                ("created_at",       models.DateTimeField(auto_now_add=True)),
                ("updated_at",       models.DateTimeField(auto_now=True)),
                ("approved_by",      models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="approved_pods",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("docket",           models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="pods",
                    to="dockets.docket",
                )),
            ],
            options={"verbose_name": "POD", "ordering": ["-created_at", "-id"]},
        ),
        migrations.AddIndex(
            model_name="pod",
            index=models.Index(fields=["status"], name="pod_status_idx"),
        ),
    ]
