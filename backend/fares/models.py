from django.db import models
from django.conf import settings


class FuelPrice(models.Model):
    """Administered fuel price history. The most recent row is the current price."""

    price_per_liter = models.DecimalField(max_digits=8, decimal_places=3)
    set_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fuel_prices_set',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'fuel_prices'
        ordering = ['-created_at', '-id']
        get_latest_by = ['created_at', 'id']

    def __str__(self):
        return f"{self.price_per_liter} USD/L ({self.created_at:%Y-%m-%d %H:%M})"
