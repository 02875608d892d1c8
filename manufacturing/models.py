"""
Manufacturing Models

A manufacturing invoice records one feed blending batch: input materials are
consumed from the warehouse and the output material is added to it.

Models:
    - ManufacturingInvoice: Batch header with the output material and quantity
    - ManufacturingInvoiceItem: An input material consumed by the batch
    - ManufacturingExpense: Costs of the batch (labour, fuel, ...)
    - ManufacturingAttachment: Uploaded documents (stored under manufacturing/)
"""

import uuid
from decimal import Decimal

from django.db import models

from catalog.models import MaterialName, MeasurementUnit
from core.attachments import AttachmentBase
from core.totals import ExpenseBase
from farms.models import Warehouse


class ManufacturingInvoice(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=100, unique=True)
    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='manufacturing_invoices',
    )
    blend_name = models.CharField(max_length=200, blank=True, null=True)

    # Output
    material_name = models.ForeignKey(
        MaterialName,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='manufacturing_outputs',
        help_text="Material produced by the batch"
    )
    unit = models.ForeignKey(
        MeasurementUnit, on_delete=models.SET_NULL, null=True, blank=True, related_name='manufacturing_outputs'
    )
    quantity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    output_added = models.BooleanField(
        default=False,
        help_text="Output quantity has been added to warehouse stock"
    )

    manufacturing_date = models.DateField(db_index=True)
    manufacturing_time = models.TimeField(null=True, blank=True)

    total_expenses_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        help_text="Sum of expense amounts"
    )
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'manufacturing_invoices'
        ordering = ['-manufacturing_date', '-created_at']

    def __str__(self):
        return f"Manufacturing {self.invoice_number}"


class ManufacturingInvoiceItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    manufacturing_invoice = models.ForeignKey(
        ManufacturingInvoice, on_delete=models.CASCADE, related_name='items'
    )
    material_name = models.ForeignKey(
        MaterialName, on_delete=models.SET_NULL, null=True, blank=True, related_name='manufacturing_inputs'
    )
    unit = models.ForeignKey(
        MeasurementUnit, on_delete=models.SET_NULL, null=True, blank=True, related_name='manufacturing_inputs'
    )
    quantity = models.DecimalField(max_digits=14, decimal_places=2)
    blend_count = models.PositiveIntegerField(default=1)
    weight = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'manufacturing_invoice_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.material_name} x {self.quantity}"


class ManufacturingExpense(ExpenseBase):
    manufacturing_invoice = models.ForeignKey(
        ManufacturingInvoice, on_delete=models.CASCADE, related_name='expenses'
    )

    class Meta(ExpenseBase.Meta):
        db_table = 'manufacturing_expenses'


class ManufacturingAttachment(AttachmentBase):
    manufacturing_invoice = models.ForeignKey(
        ManufacturingInvoice, on_delete=models.CASCADE, related_name='attachments'
    )

    class Meta(AttachmentBase.Meta):
        db_table = 'manufacturing_attachments'
