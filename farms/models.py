"""
Farm Models

Each farmer owns at most one farm; each farm has exactly one warehouse
(its stock location) and one poultry batch.

Models:
    - Farm: A farm assigned to a farmer account
    - Warehouse: The farm's stock location (materials, reports, invoices hang off it)
    - PoultryStatus: The farm's current flock batch and chick counts
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models

from accounts.models import User


class Farm(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='farm',
        help_text="Farmer account that runs this farm"
    )
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farms'
        ordering = ['name']

    def __str__(self):
        return self.name


class Warehouse(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farm = models.OneToOneField(
        Farm,
        on_delete=models.CASCADE,
        related_name='warehouse',
    )
    name = models.CharField(max_length=200)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'warehouses'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} - {self.farm.name}"


class PoultryStatus(models.Model):
    """
    The flock batch housed on a farm.

    remaining_chicks is always opening_chicks - dead_chicks; it seeds
    chicks_before on the warehouse's first daily report.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farm = models.OneToOneField(
        Farm,
        on_delete=models.CASCADE,
        related_name='poultry_status',
    )
    batch_name = models.CharField(max_length=200)
    opening_chicks = models.PositiveIntegerField(default=0)
    dead_chicks = models.PositiveIntegerField(default=0)
    remaining_chicks = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Auto-calculated: opening_chicks - dead_chicks"
    )
    chick_birth_date = models.DateField(
        null=True,
        blank=True,
        help_text="Hatch date; medication alerts are scheduled from it"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'poultry_status'
        verbose_name_plural = 'Poultry statuses'
        ordering = ['batch_name']

    def __str__(self):
        return f"{self.batch_name} ({self.farm.name})"

    def save(self, *args, **kwargs):
        self.remaining_chicks = max(0, (self.opening_chicks or 0) - (self.dead_chicks or 0))
        super().save(*args, **kwargs)
