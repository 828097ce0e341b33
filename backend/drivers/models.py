from django.db import models
from django.utils import timezone
from django.conf import settings

from services.domain import VehicleClass

User = settings.AUTH_USER_MODEL

class DriverProfile(models.Model):
    """Driver vehicle details, live flag and last known position"""
    CYLINDER_CHOICES = [
        (4, '4 Cylinders'),
        (6, '6 Cylinders'),
        (8, '8 Cylinders'),
        (12, '12 Cylinders'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='driver_profile')

    # Vehicle details
    car_brand = models.CharField(max_length=50)
    car_model = models.CharField(max_length=50)
    car_year = models.PositiveSmallIntegerField()
    car_color = models.CharField(max_length=30)
    plate_number = models.CharField(max_length=20, unique=True)
    cylinders = models.PositiveSmallIntegerField(choices=CYLINDER_CHOICES, default=4)
    home_address = models.TextField(blank=True)

    # Live visibility & location (read by the eligibility filter)
    is_live = models.BooleanField(default=False)
    current_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    current_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    last_location_update = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'driver_profiles'

    def __str__(self):
        return f"{self.user.username} - {self.plate_number}"

    @property
    def vehicle_class(self) -> VehicleClass:
        return VehicleClass.from_cylinders(self.cylinders)

    @property
    def has_location(self) -> bool:
        return self.current_latitude is not None and self.current_longitude is not None
