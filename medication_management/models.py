"""
Medication Management Models

Tracks medicine consumed by a poultry batch and the vaccination/medication
schedule generated from the catalog's medicine day_of_age.

Models:
    - MedicineConsumptionInvoice: Medicines drawn from a warehouse for a batch
    - MedicineConsumptionItem: One medicine line (consumes warehouse stock)
    - MedicineConsumptionExpense: Extra costs charged to the invoice
    - MedicineConsumptionAttachment: Uploaded documents (stored under medicine-consumption/)
    - MedicationAlert: One scheduled dose for a batch
"""

import uuid
from decimal import Decimal

from django.db import models

from catalog.models import MeasurementUnit, Medicine
from core.attachments import AttachmentBase
from core.totals import ExpenseBase
from farms.models import Farm, PoultryStatus, Warehouse


# =============================================================================
# CONSUMPTION INVOICES
# =============================================================================

class MedicineConsumptionInvoice(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=100, unique=True)
    invoice_date = models.DateField(db_index=True)
    invoice_time = models.TimeField(null=True, blank=True)

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='medicine_invoices',
    )
    poultry_status = models.ForeignKey(
        PoultryStatus,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='medicine_invoices',
        help_text="Batch the medicine was given to"
    )

    total_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        help_text="Sum of item values plus expense amounts"
    )
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medicine_consumption_invoices'
        ordering = ['-invoice_date', '-created_at']

    def __str__(self):
        return f"Medicine consumption {self.invoice_number}"


class MedicineConsumptionItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    consumption_invoice = models.ForeignKey(
        MedicineConsumptionInvoice, on_delete=models.CASCADE, related_name='items'
    )
    medicine = models.ForeignKey(
        Medicine, on_delete=models.SET_NULL, null=True, blank=True, related_name='consumption_items'
    )
    unit = models.ForeignKey(
        MeasurementUnit, on_delete=models.SET_NULL, null=True, blank=True, related_name='consumption_items'
    )
    administration_day = models.PositiveIntegerField(null=True, blank=True, help_text="Chick age in days")
    administration_date = models.DateField(null=True, blank=True)

    quantity = models.DecimalField(max_digits=14, decimal_places=2)
    price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'medicine_consumption_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.medicine} x {self.quantity}"

    def save(self, *args, **kwargs):
        self.value = (self.quantity or 0) * (self.price or 0)
        super().save(*args, **kwargs)


class MedicineConsumptionExpense(ExpenseBase):
    consumption_invoice = models.ForeignKey(
        MedicineConsumptionInvoice, on_delete=models.CASCADE, related_name='expenses'
    )

    class Meta(ExpenseBase.Meta):
        db_table = 'medicine_consumption_expenses'


class MedicineConsumptionAttachment(AttachmentBase):
    consumption_invoice = models.ForeignKey(
        MedicineConsumptionInvoice, on_delete=models.CASCADE, related_name='attachments'
    )

    class Meta(AttachmentBase.Meta):
        db_table = 'medicine_consumption_attachments'


# =============================================================================
# ALERTS
# =============================================================================

class MedicationAlert(models.Model):
    """
    A dose due on scheduled_date (chick birth date + medicine day_of_age).

    The alert starts showing on alert_date, a configurable number of days
    before the dose.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farm = models.ForeignKey(Farm, on_delete=models.CASCADE, related_name='medication_alerts')
    poultry_status = models.ForeignKey(
        PoultryStatus, on_delete=models.CASCADE, related_name='medication_alerts'
    )
    medicine = models.ForeignKey(Medicine, on_delete=models.CASCADE, related_name='alerts')

    scheduled_day = models.PositiveIntegerField(help_text="Chick age in days when the dose is due")
    scheduled_date = models.DateField(db_index=True)
    alert_date = models.DateField(db_index=True)

    is_administered = models.BooleanField(default=False)
    administered_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medication_alerts'
        ordering = ['scheduled_date']
        indexes = [
            models.Index(fields=['farm', 'is_administered', 'alert_date']),
        ]

    def __str__(self):
        return f"{self.medicine} for {self.poultry_status} on {self.scheduled_date}"
