from django.db import models
from django.contrib.auth.models import AbstractUser

from services.domain import GeoPoint


class University(models.Model):
    """Campus a student belongs to; also the destination of every trip."""
    name = models.CharField(max_length=200, unique=True)
    city = models.CharField(max_length=100)
    latitude = models.DecimalField(max_digits=9, decimal_places=6)
    longitude = models.DecimalField(max_digits=9, decimal_places=6)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'universities'
        ordering = ['name']
        verbose_name_plural = 'universities'

    def __str__(self):
        return f"{self.name} ({self.city})"

    @property
    def location(self) -> GeoPoint:
        return GeoPoint(float(self.latitude), float(self.longitude))


class User(AbstractUser):
    """Extended user model with role, gender, university and approval status"""
    ROLE_CHOICES = [
        ('passenger', 'Passenger'),
        ('driver', 'Driver'),
    ]

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending Approval'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('banned', 'Banned'),
    ]

    # Role & basic info
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    university = models.ForeignKey(
        University,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='students',
    )
    whatsapp = models.CharField(max_length=20, blank=True)
    completed_rides = models.IntegerField(default=0)

    # Admin approval workflow
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    status_changed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_approved(self) -> bool:
        return self.status == 'approved'
