"""
Medication management Celery tasks.
"""
import logging

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task
def refresh_medication_alerts():
    """
    Regenerate alerts for batches whose medicine schedule changed.

    A batch is stale when its pending (medicine, day) pairs differ from the
    catalog's medicines with a day_of_age, leaving out medicines already
    administered to the batch. Scheduled via Celery Beat to run daily.
    """
    from catalog.models import Medicine
    from farms.models import PoultryStatus
    from medication_management.models import MedicationAlert
    from medication_management.services import MedicationAlertService

    schedule = set(Medicine.objects.filter(day_of_age__isnull=False).values_list('id', 'day_of_age'))

    refreshed = 0
    for batch in PoultryStatus.objects.filter(chick_birth_date__isnull=False):
        alerts = MedicationAlert.objects.filter(poultry_status=batch)
        administered = set(alerts.filter(is_administered=True).values_list('medicine_id', flat=True))
        pending = set(alerts.filter(is_administered=False).values_list('medicine_id', 'scheduled_day'))
        if pending == {pair for pair in schedule if pair[0] not in administered}:
            continue
        result = MedicationAlertService.create_alerts_for_poultry(batch.id, batch.chick_birth_date)
        if result.success:
            refreshed += 1
        else:
            logger.error(f"Failed to refresh alerts for batch {batch.batch_name}: {result.error}")

    logger.info(f"Medication alerts refreshed for {refreshed} batches")
    return refreshed


@shared_task
def log_due_medication_alerts():
    """Log the overdue and due-today alert counts of every farm."""
    from django.db.models import Count, Q

    from farms.models import Farm

    today = timezone.localdate()
    pending = Q(medication_alerts__is_administered=False)
    farms = Farm.objects.annotate(
        overdue=Count('medication_alerts', filter=pending & Q(medication_alerts__scheduled_date__lt=today)),
        due_today=Count('medication_alerts', filter=pending & Q(medication_alerts__scheduled_date=today)),
    ).filter(Q(overdue__gt=0) | Q(due_today__gt=0))

    count = 0
    for farm in farms:
        count += 1
        logger.warning(f"Farm {farm.name}: {farm.overdue} overdue, {farm.due_today} due today")

    logger.info(f"Medication alert check complete: {count} farms with due alerts")
    return count
