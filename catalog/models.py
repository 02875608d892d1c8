"""
Catalog (Lookup) Models

Reference data shared by every farm. Admins maintain it; farmers read it.

Models:
    - MaterialName: Names of stock materials (feed, eggs, droppings, ...)
    - MeasurementUnit: Units stock and invoice lines are counted in
    - EggWeight: Egg weight grades used on sale invoices
    - ExpenseType: Categories for invoice expenses
    - Medicine: Medicines with their scheduled administration day
    - Client: Customers and providers appearing on invoices
"""

import uuid

from django.db import models


class MaterialName(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    material_name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'materials_names'
        ordering = ['material_name']

    def __str__(self):
        return self.material_name


class MeasurementUnit(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    unit_name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'measurement_units'
        ordering = ['unit_name']

    def __str__(self):
        return self.unit_name


class EggWeight(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    weight_range = models.CharField(max_length=100, unique=True, help_text="e.g. '1800-1850 g'")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'egg_weights'
        ordering = ['weight_range']

    def __str__(self):
        return self.weight_range


class ExpenseType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'expense_types'
        ordering = ['name']

    def __str__(self):
        return self.name


class Medicine(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True, null=True)
    day_of_age = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Chick age in days when this medicine is administered"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medicines'
        ordering = ['name']

    def __str__(self):
        return self.name


class Client(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class ClientType(models.TextChoices):
        CUSTOMER = 'customer', 'Customer'
        PROVIDER = 'provider', 'Provider'

    name = models.CharField(max_length=200)
    type = models.CharField(max_length=20, choices=ClientType.choices, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clients'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"
