"""
Daily Report Models

One DailyReport per warehouse per day records egg production, flock count,
feed and droppings. Derived figures (production_eggs, production_egg_rate,
current_eggs_balance, chicks_after, feed_monthly_kg) are computed by the
integrated report service when the report is filed.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.attachments import AttachmentBase
from farms.models import Warehouse


def _quantity(help_text=''):
    return models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text=help_text,
    )


class DailyReport(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.CASCADE,
        related_name='daily_reports',
    )
    report_date = models.DateField(db_index=True)
    report_time = models.TimeField(null=True, blank=True)

    # =========================================================================
    # EGGS
    # =========================================================================
    production_eggs_healthy = _quantity()
    production_eggs_deformed = _quantity()
    production_eggs = _quantity("healthy + deformed")
    production_egg_rate = models.DecimalField(
        max_digits=7, decimal_places=2, default=Decimal('0.00'),
        help_text="production_eggs / chicks_before x 100"
    )
    eggs_sold = _quantity()
    eggs_gift = _quantity()
    previous_eggs_balance = _quantity()
    current_eggs_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        help_text="previous + healthy - sold - gift"
    )
    carton_consumption = _quantity()

    # =========================================================================
    # FLOCK
    # =========================================================================
    chicks_before = models.PositiveIntegerField(default=0)
    chicks_dead = models.PositiveIntegerField(default=0)
    chicks_after = models.IntegerField(default=0, help_text="chicks_before - chicks_dead")

    # =========================================================================
    # FEED AND DROPPINGS
    # =========================================================================
    feed_daily_kg = _quantity()
    feed_monthly_kg = _quantity("Month-to-date feed including this report")
    feed_ratio = _quantity()
    production_droppings = _quantity()

    notes = models.TextField(blank=True, null=True)
    checked = models.BooleanField(default=False, help_text="Reviewed by an admin")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_reports'
        ordering = ['-report_date', '-report_time']
        indexes = [
            models.Index(fields=['warehouse', '-report_date']),
        ]

    def __str__(self):
        return f"Daily report {self.report_date} - {self.warehouse.name}"


class DailyReportAttachment(AttachmentBase):
    daily_report = models.ForeignKey(
        DailyReport, on_delete=models.CASCADE, related_name='attachments'
    )

    class Meta(AttachmentBase.Meta):
        db_table = 'daily_report_attachments'
