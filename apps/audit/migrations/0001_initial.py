import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id",          models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("username",    models.CharField(default="system", max_length=150)),
                ("action",      models.CharField(max_length=64)),
                ("entity_type", models.CharField(blank=True, max_length=40)),
                ("entity_id",   models.BigIntegerField(blank=True, null=True)),
                ("summary",     models.TextField(blank=True)),
                ("meta",        models.JSONField(blank=True, default=dict)),
                ("ip",          models.CharField(blank=True, max_length=64)),
                ("user_agent",  models.TextField(blank=True)),
                ("created_at",  models.DateTimeField(auto_now_add=True)),
                ("user",        models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="audit_logs",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.AddIndex(
            model_name="auditlog",
            index=models.Index(fields=["action"], name="audit_action_idx"),
        ),
        migrations.AddIndex(
            model_name="auditlog",
            index=models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
        ),
        migrations.AddIndex(
            model_name="auditlog",
            index=models.Index(fields=["created_at"], name="audit_created_idx"),
        ),
    ]
