"""Model signal handlers for listing cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .cache import invalidate_search_cache
from .models import Property


@receiver([post_save, post_delete], sender=Property)
def listings_cache_invalidator(**_: object) -> None:
    """Drop cached search pages whenever listing data changes."""
    invalidate_search_cache()
