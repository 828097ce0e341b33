from django.db import models
from django.conf import settings


class PassengerProfile(models.Model):
    """Passenger matching preferences"""
    GENDER_PREFERENCE_CHOICES = [
        ('same', 'Same Gender Only'),
        ('any', 'Any Gender'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='passenger_profile',
    )
    gender_preference = models.CharField(
        max_length=10,
        choices=GENDER_PREFERENCE_CHOICES,
        default='same',
    )

    class Meta:
        db_table = 'passenger_profiles'

    def __str__(self):
        return f"{self.user.username} ({self.get_gender_preference_display()})"
