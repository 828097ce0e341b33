from django.db import models
from django.conf import settings


class RideRequest(models.Model):
    """A passenger's request to one driver, with the fare snapshotted at request time"""

    STATUS_CHOICES = [
        ('requested', 'Requested'),
        ('accepted', 'Accepted'),
        ('declined', 'Declined by Driver'),
        ('cancelled', 'Cancelled by Passenger'),
        ('completed', 'Completed'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('live', 'Live (cash)'),
        ('wish', 'Wish Money'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
    ]

    # Foreign keys
    passenger = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='ride_requests'
    )

    driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driven_rides'
    )

    # Destination is always the passenger's campus
    university = models.ForeignKey(
        'accounts.University',
        on_delete=models.PROTECT,
        related_name='ride_requests'
    )

    # Pickup location
    pickup_latitude = models.DecimalField(max_digits=9, decimal_places=6)
    pickup_longitude = models.DecimalField(max_digits=9, decimal_places=6)

    # Fare snapshot
    distance_km = models.DecimalField(max_digits=8, decimal_places=2)
    fuel_price = models.DecimalField(max_digits=8, decimal_places=3)
    estimated_cost = models.DecimalField(max_digits=10, decimal_places=2)
    passenger_share = models.DecimalField(max_digits=10, decimal_places=2)
    driver_share = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, default='live')
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending')

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='requested')

    # Timestamps
    requested_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'ride_requests'
        ordering = ['-requested_at']

    def __str__(self):
        return f"Ride #{self.id} - {self.passenger} - {self.status}"
