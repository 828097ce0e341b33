"""Fares app configuration."""

from django.apps import AppConfig


class FaresConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'fares'
