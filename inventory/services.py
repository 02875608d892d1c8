"""
Inventory services.

StockLedger applies stock movements to Material rows. Invoices,
manufacturing batches, medicine consumption and daily reports all move
stock through it, always from inside their own transaction, so a failed
movement rolls back the document that caused it.

MaterialService holds the admin actions over Material rows.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q

from core.actions import ActionError, ActionResult, NotFound, action, get_or_404
from core.cache import cached_page, revalidate_path
from farms.models import Warehouse

from .models import Material

logger = logging.getLogger(__name__)

MATERIALS_PATH = '/admin/materials'
MATERIALS_SUMMARY_PATH = '/admin/materials/summary'
INVENTORY_SUMMARY_PATH = '/admin/inventory-reports/summary'

ZERO = Decimal('0.00')


def to_quantity(value, label='Quantity'):
    try:
        return Decimal(str(value if value not in (None, '') else 0))
    except (InvalidOperation, ValueError):
        raise ActionError(f'{label} must be a number')


def item_lookup(material_name_id=None, medicine_id=None):
    if material_name_id:
        return {'material_name_id': material_name_id}
    if medicine_id:
        return {'medicine_id': medicine_id}
    raise ActionError('Either material name or medicine must be provided')


def stock_status(balance):
    if balance <= 0:
        return 'out_of_stock'
    if balance < settings.LOW_STOCK_THRESHOLD:
        return 'low_stock'
    return 'in_stock'


def revalidate_stock_pages():
    revalidate_path(MATERIALS_PATH, MATERIALS_SUMMARY_PATH, INVENTORY_SUMMARY_PATH, '/admin/inventory-reports')


class StockLedger:
    """
    Stock movements on the Material row of (warehouse, item).

    Every method locks the row with select_for_update for the rest of the
    caller's transaction and returns the saved row.
    """

    @staticmethod
    def get_row(warehouse_id, material_name_id=None, medicine_id=None, lock=True):
        rows = Material.objects.filter(warehouse_id=warehouse_id, **item_lookup(material_name_id, medicine_id))
        if lock:
            rows = rows.select_for_update()
        return rows.first()

    @classmethod
    def _get_or_create_row(cls, warehouse_id, material_name_id, medicine_id, unit_id):
        row = cls.get_row(warehouse_id, material_name_id, medicine_id)
        if row is None:
            row = Material.objects.create(
                warehouse_id=warehouse_id,
                unit_id=unit_id,
                **item_lookup(material_name_id, medicine_id),
            )
            logger.info(f"Stock row created in warehouse {warehouse_id} for item {material_name_id or medicine_id}")
        return row

    @staticmethod
    def _require_stock(row, quantity, medicine_id=None):
        if row is None:
            if medicine_id:
                raise ActionError('Medicine not found in warehouse inventory')
            raise ActionError('Material not found in warehouse inventory')
        if row.current_balance < quantity:
            label = 'Insufficient medicine stock' if medicine_id else 'Insufficient stock'
            raise ActionError(f'{label}. Available: {row.current_balance}, Required: {quantity}')

    @staticmethod
    def _log(movement, row, quantity):
        logger.info(
            f"Stock {movement}: {quantity} of {row.material_name_id or row.medicine_id} "
            f"in warehouse {row.warehouse_id}, balance now {row.current_balance}"
        )

    @classmethod
    @transaction.atomic
    def purchase(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None, unit_id=None):
        quantity = to_quantity(quantity)
        row = cls._get_or_create_row(warehouse_id, material_name_id, medicine_id, unit_id)
        row.purchases += quantity
        row.current_balance += quantity
        row.save()
        cls._log('purchase', row, quantity)
        return row

    @classmethod
    @transaction.atomic
    def sell(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None):
        quantity = to_quantity(quantity)
        row = cls.get_row(warehouse_id, material_name_id, medicine_id)
        cls._require_stock(row, quantity)
        row.sales += quantity
        row.current_balance -= quantity
        row.save()
        cls._log('sale', row, quantity)
        return row

    @classmethod
    @transaction.atomic
    def consume(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None):
        quantity = to_quantity(quantity)
        row = cls.get_row(warehouse_id, material_name_id, medicine_id)
        cls._require_stock(row, quantity, medicine_id=medicine_id)
        row.consumption += quantity
        row.current_balance -= quantity
        row.save()
        cls._log('consumption', row, quantity)
        return row

    @classmethod
    @transaction.atomic
    def manufacture(cls, warehouse_id, quantity, material_name_id=None, unit_id=None):
        quantity = to_quantity(quantity)
        row = cls._get_or_create_row(warehouse_id, material_name_id, None, unit_id)
        row.manufacturing += quantity
        row.current_balance += quantity
        row.save()
        cls._log('manufacture', row, quantity)
        return row

    @classmethod
    def _reverse(cls, warehouse_id, quantity, column, balance_sign, material_name_id, medicine_id):
        quantity = to_quantity(quantity)
        row = cls.get_row(warehouse_id, material_name_id, medicine_id)
        if row is None:
            logger.warning(
                f"Cannot reverse {column} of {material_name_id or medicine_id}: "
                f"no stock row in warehouse {warehouse_id}"
            )
            return None

        setattr(row, column, max(ZERO, getattr(row, column) - quantity))
        if balance_sign > 0:
            row.current_balance += quantity
        else:
            row.current_balance = max(ZERO, row.current_balance - quantity)
        row.save()
        cls._log(f'reversal of {column}', row, quantity)
        return row

    @classmethod
    @transaction.atomic
    def reverse_purchase(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None):
        return cls._reverse(warehouse_id, quantity, 'purchases', -1, material_name_id, medicine_id)

    @classmethod
    @transaction.atomic
    def reverse_sale(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None):
        return cls._reverse(warehouse_id, quantity, 'sales', 1, material_name_id, medicine_id)

    @classmethod
    @transaction.atomic
    def reverse_consumption(cls, warehouse_id, quantity, material_name_id=None, medicine_id=None):
        return cls._reverse(warehouse_id, quantity, 'consumption', 1, material_name_id, medicine_id)

    @classmethod
    @transaction.atomic
    def reverse_manufacture(cls, warehouse_id, quantity, material_name_id=None):
        return cls._reverse(warehouse_id, quantity, 'manufacturing', -1, material_name_id, None)

    @classmethod
    @transaction.atomic
    def record(cls, warehouse_id, material_name_id=None, medicine_id=None, unit_id=None,
               purchases=0, sales=0, consumption=0):
        """
        Unchecked movement used by daily reports.

        The row is created when missing and the balance is clamped at zero
        instead of rejecting the movement.
        """
        purchases = to_quantity(purchases)
        sales = to_quantity(sales)
        consumption = to_quantity(consumption)

        row = cls._get_or_create_row(warehouse_id, material_name_id, medicine_id, unit_id)
        row.purchases += purchases
        row.sales += sales
        row.consumption += consumption
        row.current_balance = max(ZERO, row.current_balance + purchases - sales - consumption)
        row.save()
        cls._log('record', row, purchases - sales - consumption)
        return row


class MaterialService:

    @staticmethod
    @action('Failed to get materials')
    def list_materials(warehouse_id=None):
        materials = Material.objects.select_related(
            'warehouse__farm', 'material_name', 'medicine', 'unit'
        ).order_by('-created_at')
        if warehouse_id:
            materials = materials.filter(warehouse_id=warehouse_id)
        return list(materials)

    @staticmethod
    @action('Failed to get material')
    def get_material(material_id):
        return get_or_404(Material, 'Material not found', pk=material_id)

    @staticmethod
    @action('Failed to create material')
    def create_material(warehouse_id, material_name_id=None, medicine_id=None, unit_id=None, opening_balance=0):
        opening_balance = to_quantity(opening_balance, 'Opening balance')
        if opening_balance < 0:
            raise ActionError('Opening balance cannot be negative')
        if not material_name_id and not medicine_id:
            raise ActionError('Either material name or medicine must be provided')
        if material_name_id and medicine_id:
            raise ActionError('Cannot provide both material name and medicine')

        warehouse = get_or_404(Warehouse, 'Warehouse not found', pk=warehouse_id)
        lookup = item_lookup(material_name_id, medicine_id)
        if Material.objects.filter(warehouse=warehouse, **lookup).exists():
            raise ActionError('This item already exists in the selected warehouse')

        material = Material.objects.create(
            warehouse=warehouse,
            unit_id=unit_id or None,
            opening_balance=opening_balance,
            current_balance=opening_balance,
            **lookup,
        )
        logger.info(f"Material {material.item_id} created in warehouse {warehouse.name} with balance {opening_balance}")
        revalidate_stock_pages()
        return ActionResult.ok(material)

    @staticmethod
    @action('Failed to update material')
    def update_material(material_id, **fields):
        with transaction.atomic():
            try:
                material = Material.objects.select_for_update().get(pk=material_id)
            except (Material.DoesNotExist, ValueError):
                raise NotFound('Material not found')

            for column in ('opening_balance', 'purchases', 'sales', 'consumption', 'manufacturing'):
                if fields.get(column) is not None:
                    value = to_quantity(fields[column], column.replace('_', ' ').capitalize())
                    if value < 0:
                        raise ActionError(f"{column.replace('_', ' ').capitalize()} cannot be negative")
                    setattr(material, column, value)
            if 'unit_id' in fields:
                material.unit_id = fields['unit_id'] or None

            material.recalculate_balance()
            material.save()

        revalidate_stock_pages()
        return ActionResult.ok(material)

    @staticmethod
    @action('Failed to delete material')
    def delete_material(material_id):
        material = get_or_404(Material, 'Material not found', pk=material_id)
        material.delete()
        revalidate_stock_pages()
        return ActionResult.ok()

    @staticmethod
    @action('Failed to get aggregated materials')
    def aggregated_materials():
        """Totals per (item, unit) across every warehouse."""
        grouped = {}
        rows = Material.objects.select_related('material_name', 'medicine', 'unit').order_by('-created_at')
        for material in rows:
            key = f"{material.item_id}-{material.unit_id}"
            entry = grouped.get(key)
            if entry is None:
                entry = grouped[key] = {
                    'id': key,
                    'warehouse_id': None,
                    'material_name_id': material.material_name_id,
                    'medicine_id': material.medicine_id,
                    'unit_id': material.unit_id,
                    'material_name': material.item_name,
                    'is_medicine': material.is_medicine,
                    'unit_name': material.unit.unit_name if material.unit_id else None,
                    'opening_balance': ZERO,
                    'purchases': ZERO,
                    'sales': ZERO,
                    'consumption': ZERO,
                    'manufacturing': ZERO,
                    'current_balance': ZERO,
                    'warehouse': {'name': 'All warehouses', 'farm_name': 'General'},
                }
            for column in ('opening_balance', 'purchases', 'sales', 'consumption', 'manufacturing', 'current_balance'):
                entry[column] += getattr(material, column)
        return list(grouped.values())

    @staticmethod
    @action('Failed to get warehouses')
    def warehouses_for_materials():
        return [
            {'id': warehouse.id, 'name': warehouse.name, 'farm_name': warehouse.farm.name}
            for warehouse in Warehouse.objects.select_related('farm').order_by('name')
        ]

    @staticmethod
    @action('Failed to get material inventory')
    def material_inventory(warehouse_id, item_id):
        """Balance of a material or medicine in one warehouse ({0, ''} when unknown)."""
        if not warehouse_id or not item_id:
            return {'current_balance': ZERO, 'unit_name': ''}
        material = (
            Material.objects.select_related('unit')
            .filter(warehouse_id=warehouse_id)
            .filter(Q(material_name_id=item_id) | Q(medicine_id=item_id))
            .first()
        )
        if material is None:
            return {'current_balance': ZERO, 'unit_name': ''}
        return {
            'current_balance': material.current_balance,
            'unit_name': material.unit.unit_name if material.unit_id else '',
        }

    @staticmethod
    @action('Failed to get materials summary')
    def materials_summary():
        return cached_page(MATERIALS_SUMMARY_PATH, stock_summary)


def stock_summary():
    threshold = settings.LOW_STOCK_THRESHOLD
    counts = Material.objects.aggregate(
        total_materials=Count('id'),
        low_stock_count=Count('id', filter=Q(current_balance__gt=0, current_balance__lt=threshold)),
        out_of_stock_count=Count('id', filter=Q(current_balance__lte=0)),
    )
    return {
        'total_materials': counts['total_materials'],
        'total_value': 0,
        'low_stock_count': counts['low_stock_count'],
        'out_of_stock_count': counts['out_of_stock_count'],
        'in_stock_count': counts['total_materials'] - counts['low_stock_count'] - counts['out_of_stock_count'],
        'total_warehouses': Warehouse.objects.count(),
    }
