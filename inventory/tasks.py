"""
Inventory Celery tasks.
"""
import logging

from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


@shared_task
def report_low_stock():
    """
    Log every stock row below the low-stock threshold.

    Scheduled via Celery Beat to run daily.
    """
    from inventory.models import Material

    threshold = settings.LOW_STOCK_THRESHOLD
    low_rows = (
        Material.objects.select_related('warehouse__farm', 'material_name', 'medicine', 'unit')
        .filter(current_balance__lt=threshold)
        .order_by('warehouse__name', 'current_balance')
    )

    count = 0
    for material in low_rows:
        count += 1
        unit = material.unit.unit_name if material.unit_id else ''
        logger.warning(
            f"Low stock: {material.item_name} in {material.warehouse.name} "
            f"({material.warehouse.farm.name}) at {material.current_balance} {unit}".rstrip()
        )

    logger.info(f"Low stock check complete: {count} rows below {threshold}")
    return count
