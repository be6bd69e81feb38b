import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("dockets", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="LoadingSheet",
            fields=[
                ("id",             models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sheet_number",   models.CharField(max_length=40, unique=True)),
                ("vehicle_number", models.CharField(max_length=30)),
                ("driver_name",    models.CharField(max_length=120)),
                ("destination",    models.CharField(max_length=255)),
                ("date",           models.DateField(default=django.utils.timezone.localdate)),
                ("status",         models.CharField(
                    choices=[("draft", "Draft"), ("finalized", "Finalized")],
                    default="draft",
                    max_length=10,
                )),
                ("created_at",     models.DateTimeField(auto_now_add=True)),
                ("updated_at",     models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="LoadingSheetDocket",
            fields=[
                ("id",            models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("docket",        models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="sheet_links",
                    to="dockets.docket",
                )),
                ("loading_sheet", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="docket_links",
                    to="dispatch.loadingsheet",
                )),
            ],
        ),
        migrations.AddField(
            model_name="loadingsheet",
            name="dockets",
            field=models.ManyToManyField(
                related_name="loading_sheets",
                through="dispatch.LoadingSheetDocket",
                to="dockets.docket",
            ),
        ),
        migrations.CreateModel(
            name="Manifest",
            fields=[
                ("id",              models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("manifest_number", models.CharField(max_length=40, unique=True)),
                ("status",          models.CharField(
                    choices=[("generated", "Generated")],
                    default="generated",
                    max_length=10,
                )),
                ("generated_at",    models.DateTimeField(auto_now_add=True)),
                ("loading_sheet",   models.OneToOneField(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="manifest",
                    to="dispatch.loadingsheet",
                )),
            ],
            options={"ordering": ["-generated_at", "-id"]},
        ),
        migrations.AddConstraint(
            model_name="loadingsheetdocket",
            constraint=models.UniqueConstraint(fields=("loading_sheet", "docket"), name="sheet_docket_unique"),
        ),
        migrations.AddIndex(
            model_name="loadingsheet",
            index=models.Index(fields=["status"], name="sheet_status_idx"),
        ),
    ]
