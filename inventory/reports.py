"""
Inventory Report Services

Read-only stock views for the admin inventory report page:
- inventory_report: every stock row with its stock status, lowest balance first
- inventory_summary: counts per status
- inventory_by_warehouse: stock rows grouped per warehouse
"""

import logging

from core.actions import action
from core.cache import cached_page
from farms.models import Warehouse

from .models import Material
from .services import INVENTORY_SUMMARY_PATH, stock_summary, stock_status

logger = logging.getLogger(__name__)


def material_row(material):
    """Flatten a Material with its warehouse, item and unit names."""
    warehouse = material.warehouse
    return {
        'id': material.id,
        'warehouse_id': material.warehouse_id,
        'warehouse_name': warehouse.name if warehouse else 'Unknown',
        'farm_name': warehouse.farm.name if warehouse and warehouse.farm_id else 'Unknown',
        'material_name_id': material.material_name_id,
        'medicine_id': material.medicine_id,
        'material_name': material.item_name or 'Unknown',
        'is_medicine': material.is_medicine,
        'unit_id': material.unit_id,
        'unit_name': material.unit.unit_name if material.unit_id else 'Unknown',
        'opening_balance': material.opening_balance,
        'purchases': material.purchases,
        'sales': material.sales,
        'consumption': material.consumption,
        'manufacturing': material.manufacturing,
        'current_balance': material.current_balance,
        'status': stock_status(material.current_balance),
        'updated_at': material.updated_at,
    }


def _materials(warehouse_id=None):
    materials = Material.objects.select_related(
        'warehouse__farm', 'material_name', 'medicine', 'unit'
    ).order_by('current_balance', 'created_at')
    if warehouse_id:
        materials = materials.filter(warehouse_id=warehouse_id)
    return materials


class InventoryReportService:

    @staticmethod
    @action('Failed to get inventory report')
    def inventory_report(warehouse_id=None):
        return [material_row(material) for material in _materials(warehouse_id)]

    @staticmethod
    @action('Failed to get inventory summary')
    def inventory_summary():
        return cached_page(INVENTORY_SUMMARY_PATH, stock_summary)

    @staticmethod
    @action('Failed to get warehouse inventory')
    def inventory_by_warehouse():
        groups = {}
        for warehouse in Warehouse.objects.select_related('farm').order_by('name'):
            groups[warehouse.id] = {
                'warehouse_id': warehouse.id,
                'warehouse_name': warehouse.name,
                'farm_name': warehouse.farm.name,
                'materials': [],
                'total_items': 0,
                'low_stock_count': 0,
                'out_of_stock_count': 0,
            }

        for material in _materials():
            group = groups.get(material.warehouse_id)
            if group is None:
                continue
            row = material_row(material)
            group['materials'].append(row)
            group['total_items'] += 1
            if row['status'] == 'low_stock':
                group['low_stock_count'] += 1
            elif row['status'] == 'out_of_stock':
                group['out_of_stock_count'] += 1

        return list(groups.values())
