import django.db.models.deletion
from django.db import migrations, models

STATE_CHOICES = [("ACTIVE", "ACTIVE"), ("DELETED", "DELETED")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("venue", models.CharField(blank=True, max_length=255)),
                ("starts_at", models.DateTimeField(blank=True, null=True)),
                ("state", models.CharField(choices=STATE_CHOICES, default="ACTIVE", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["starts_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("stock_quantity", models.PositiveIntegerField(default=0)),
                ("quantity_sold", models.PositiveIntegerField(default=0)),
                ("limit_per_user", models.PositiveIntegerField(blank=True, null=True)),
                ("points_earned_per_unit", models.PositiveIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=0)),
                ("state", models.CharField(choices=STATE_CHOICES, default="ACTIVE", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ticket_type", models.CharField(max_length=100)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("quantity_available", models.PositiveIntegerField(default=0)),
                ("quantity_sold", models.PositiveIntegerField(default=0)),
                ("limit_per_user", models.PositiveIntegerField(blank=True, null=True)),
                ("points_earned_per_unit", models.PositiveIntegerField(default=0)),
                ("version", models.PositiveIntegerField(default=0)),
                ("state", models.CharField(choices=STATE_CHOICES, default="ACTIVE", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tickets",
                        to="catalog.event",
                    ),
                ),
            ],
            options={
                "ordering": ["event_id", "price", "id"],
            },
        ),
    ]
