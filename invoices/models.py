"""
Invoice Models

Buy and sell invoices move warehouse stock: a buy invoice's items are
purchases, a sell invoice's items are sales.

Models:
    - Invoice: Header with derived totals
    - InvoiceItem: A material or medicine line (value = quantity x price)
    - InvoiceExpense: Extra costs charged to the invoice
    - InvoiceAttachment: Uploaded documents (stored under invoices/buy or invoices/sell)
"""

import uuid
from decimal import Decimal

from django.db import models

from catalog.models import Client, EggWeight, MaterialName, MeasurementUnit, Medicine
from core.attachments import AttachmentBase
from core.totals import ExpenseBase
from farms.models import Warehouse


class Invoice(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class InvoiceType(models.TextChoices):
        BUY = 'buy', 'Buy'
        SELL = 'sell', 'Sell'

    invoice_type = models.CharField(max_length=10, choices=InvoiceType.choices, db_index=True)
    invoice_number = models.CharField(max_length=100, unique=True)
    invoice_date = models.DateField(db_index=True)
    invoice_time = models.TimeField(null=True, blank=True)

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices',
    )
    client = models.ForeignKey(
        Client,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invoices',
    )

    # Derived totals
    total_items_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    total_expenses_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    net_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        help_text="total_items_value + total_expenses_value"
    )

    checked = models.BooleanField(default=False, help_text="Reviewed by an admin")
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoices'
        ordering = ['-invoice_date', '-created_at']

    def __str__(self):
        return f"{self.get_invoice_type_display()} invoice {self.invoice_number}"

    @property
    def is_sell(self):
        return self.invoice_type == self.InvoiceType.SELL


class InvoiceItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')

    material_name = models.ForeignKey(
        MaterialName, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice_items'
    )
    medicine = models.ForeignKey(
        Medicine, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice_items'
    )
    unit = models.ForeignKey(
        MeasurementUnit, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice_items'
    )
    egg_weight = models.ForeignKey(
        EggWeight, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice_items'
    )

    quantity = models.DecimalField(max_digits=14, decimal_places=2)
    weight = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    price = models.DecimalField(max_digits=14, decimal_places=2)
    value = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal('0.00'),
        help_text="quantity x price"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoice_items'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.item_name} x {self.quantity}"

    @property
    def item_name(self):
        if self.material_name_id:
            return self.material_name.material_name
        if self.medicine_id:
            return self.medicine.name
        return ''

    def save(self, *args, **kwargs):
        self.value = (self.quantity or 0) * (self.price or 0)
        super().save(*args, **kwargs)


class InvoiceExpense(ExpenseBase):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='expenses')

    class Meta(ExpenseBase.Meta):
        db_table = 'invoice_expenses'


class InvoiceAttachment(AttachmentBase):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='attachments')

    class Meta(AttachmentBase.Meta):
        db_table = 'invoice_attachments'
