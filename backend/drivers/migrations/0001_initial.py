import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DriverProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("car_brand", models.CharField(max_length=50)),
                ("car_model", models.CharField(max_length=50)),
                ("car_year", models.PositiveSmallIntegerField()),
                ("car_color", models.CharField(max_length=30)),
                ("plate_number", models.CharField(max_length=20, unique=True)),
                (
                    "cylinders",
                    models.PositiveSmallIntegerField(
                        choices=[(4, "4 Cylinders"), (6, "6 Cylinders"), (8, "8 Cylinders"), (12, "12 Cylinders")],
                        default=4,
                    ),
                ),
                ("home_address", models.TextField(blank=True)),
                ("is_live", models.BooleanField(default=False)),
                ("current_latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("current_longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("last_location_update", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="driver_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "driver_profiles",
            },
        ),
    ]
