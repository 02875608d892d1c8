"""
Complete Farm Setup Service

Onboards a farmer in one step: account, farm, warehouse, poultry batch and
opening stock. Either everything is created or nothing is.
"""

import logging

from django.db import transaction

from accounts.models import User
from accounts.services import UserService
from core.actions import ActionError, ActionResult, action
from core.cache import revalidate_path
from inventory.services import MaterialService

from .farm_service import FarmService, PoultryService, WarehouseService

logger = logging.getLogger(__name__)

SETUP_PATHS = (
    '/admin/users',
    '/admin/farms',
    '/admin/warehouses',
    '/admin/poultry',
    '/admin/materials',
    '/admin/setup',
)


def _step(label, result):
    if not result.success or result.data is None:
        raise ActionError(f'Failed to create {label}: {result.error}')
    return result.data


def _opening_stock(warehouse_id, rows, item_field):
    """Create opening stock rows; invalid rows are skipped."""
    created = []
    for row in rows or []:
        # Savepoint per row so a failed insert does not poison the setup transaction
        with transaction.atomic():
            result = MaterialService.create_material(
                warehouse_id=warehouse_id,
                unit_id=row.get('unit_id'),
                opening_balance=row.get('opening_balance', 0),
                **{item_field: row.get(item_field)},
            )
        if result.success:
            created.append(result.data.id)
        else:
            logger.warning(f"Opening stock row skipped for warehouse {warehouse_id}: {result.error}")
    return created


class FarmSetupService:

    @staticmethod
    @action('An unexpected error occurred during setup')
    def create_complete_farm_setup(user, farm, warehouse, poultry, materials=None, medicines=None):
        """
        Args:
            user: {email, password, full_name}
            farm: {name, location?, is_active?}
            warehouse: {name}
            poultry: {batch_name, opening_chicks, chick_birth_date?}
            materials: [{material_name_id, unit_id, opening_balance}]
            medicines: [{medicine_id, unit_id, opening_balance}]

        Returns the ids of everything created.
        """
        with transaction.atomic():
            farmer = _step('user', UserService.create_user(
                email=user.get('email'),
                password=user.get('password'),
                full_name=user.get('full_name', ''),
                role=User.UserRole.FARMER,
            ))
            new_farm = _step('farm', FarmService.create_farm(
                name=farm.get('name'),
                location=farm.get('location'),
                is_active=farm.get('is_active', True),
                user_id=farmer.id,
            ))
            new_warehouse = _step('warehouse', WarehouseService.create_warehouse(
                name=warehouse.get('name'),
                farm_id=new_farm.id,
            ))
            batch = _step('poultry batch', PoultryService.create_poultry(
                farm_id=new_farm.id,
                batch_name=poultry.get('batch_name'),
                opening_chicks=poultry.get('opening_chicks', 0),
                chick_birth_date=poultry.get('chick_birth_date'),
            ))

            material_ids = _opening_stock(new_warehouse.id, materials, 'material_name_id')
            medicine_ids = _opening_stock(new_warehouse.id, medicines, 'medicine_id')

        logger.info(
            f"Farm setup complete for {farmer.email}: farm {new_farm.name}, "
            f"{len(material_ids)} materials, {len(medicine_ids)} medicines"
        )
        revalidate_path(*SETUP_PATHS)
        return ActionResult.ok({
            'user_id': farmer.id,
            'farm_id': new_farm.id,
            'warehouse_id': new_warehouse.id,
            'poultry_id': batch.id,
            'material_ids': material_ids,
            'medicine_ids': medicine_ids,
        })
