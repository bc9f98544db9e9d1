from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="QueuedConfirmation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("method", models.CharField(default="UPI", max_length=32)),
                ("utr", models.CharField(db_index=True, max_length=64)),
                ("name", models.CharField(blank=True, default="", max_length=128)),
                ("mobile", models.CharField(max_length=16)),
                ("purpose", models.CharField(default="Donation", max_length=128)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("status", models.CharField(choices=[("QUEUED", "QUEUED"), ("SENT", "SENT"), ("FAILED", "FAILED")], db_index=True, default="QUEUED", max_length=16)),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
            ],
        ),
    ]
