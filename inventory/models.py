"""
Inventory Models

A Material row is the stock ledger of one item (a catalog material or a
medicine) in one warehouse. Movement columns accumulate what happened to the
item; current_balance always equals

    opening_balance + purchases + manufacturing - sales - consumption

unless a clamped reversal kept it from going negative.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from catalog.models import MaterialName, MeasurementUnit, Medicine
from farms.models import Warehouse


class Material(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.CASCADE,
        related_name='materials',
    )
    material_name = models.ForeignKey(
        MaterialName,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='stock_rows',
    )
    medicine = models.ForeignKey(
        Medicine,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='stock_rows',
    )
    unit = models.ForeignKey(
        MeasurementUnit,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_rows',
    )

    # Movement columns
    opening_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    purchases = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    consumption = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    manufacturing = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    current_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal('0.00'),
        help_text="Maintained by the stock ledger"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'materials'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(material_name__isnull=False, medicine__isnull=True)
                    | Q(material_name__isnull=True, medicine__isnull=False)
                ),
                name='material_exactly_one_item',
            ),
            models.UniqueConstraint(
                fields=['warehouse', 'material_name'],
                condition=Q(material_name__isnull=False),
                name='unique_material_per_warehouse',
            ),
            models.UniqueConstraint(
                fields=['warehouse', 'medicine'],
                condition=Q(medicine__isnull=False),
                name='unique_medicine_per_warehouse',
            ),
        ]
        indexes = [
            models.Index(fields=['warehouse', 'current_balance']),
        ]

    def __str__(self):
        return f"{self.item_name} @ {self.warehouse.name}"

    @property
    def is_medicine(self):
        return self.medicine_id is not None

    @property
    def item_id(self):
        return self.material_name_id or self.medicine_id

    @property
    def item_name(self):
        if self.material_name_id:
            return self.material_name.material_name
        if self.medicine_id:
            return self.medicine.name
        return ''

    def recalculate_balance(self):
        self.current_balance = (
            self.opening_balance + self.purchases + self.manufacturing
            - self.sales - self.consumption
        )
        return self.current_balance
