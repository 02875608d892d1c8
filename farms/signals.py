"""
Farm Signals

Keeps medication alert schedules in step with the poultry batch's hatch date.
"""

import logging

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import PoultryStatus

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=PoultryStatus)
def poultry_track_birth_date(sender, instance, **kwargs):
    """Remember the stored hatch date so post_save can tell whether it changed."""
    instance._previous_birth_date = None
    if instance.pk:
        instance._previous_birth_date = (
            PoultryStatus.objects.filter(pk=instance.pk).values_list('chick_birth_date', flat=True).first()
        )


@receiver(post_save, sender=PoultryStatus)
def poultry_regenerate_alerts(sender, instance, created, **kwargs):
    if not instance.chick_birth_date:
        return
    if not created and instance.chick_birth_date == getattr(instance, '_previous_birth_date', None):
        return

    from medication_management.services import MedicationAlertService

    result = MedicationAlertService.create_alerts_for_poultry(instance.id, instance.chick_birth_date)
    if result.success:
        logger.info(f"Medication alerts regenerated for batch {instance.batch_name}")
    else:
        logger.error(f"Medication alert generation failed for batch {instance.batch_name}: {result.error}")
