"""
Farm, Warehouse and Poultry Batch Services

Admin CRUD over the farm structure:
- Farms (one per farmer account)
- Warehouses (one per farm)
- Poultry batches (one per farm)
"""

import logging

from django.contrib.auth import get_user_model

from core.actions import ActionError, ActionResult, NotFound, action, get_or_404
from core.cache import revalidate_path
from farms.models import Farm, PoultryStatus, Warehouse
from inventory.services import revalidate_stock_pages

User = get_user_model()
logger = logging.getLogger(__name__)

FARMS_PATH = '/admin/farms'
WAREHOUSES_PATH = '/admin/warehouses'
POULTRY_PATH = '/admin/poultry'


def _validate_name(name, label):
    name = (name or '').strip()
    if len(name) < 2:
        raise ActionError(f'{label} must be at least 2 characters')
    return name


class FarmService:

    @staticmethod
    @action('Failed to get farms')
    def list_farms():
        return list(
            Farm.objects.select_related('user', 'warehouse', 'poultry_status').order_by('name')
        )

    @staticmethod
    @action('Failed to get farm')
    def get_farm(farm_id):
        return get_or_404(Farm, 'Farm not found', pk=farm_id)

    @staticmethod
    def _resolve_owner(user_id, exclude_farm=None):
        if not user_id:
            return None
        owner = User.objects.filter(pk=user_id).first()
        if owner is None:
            raise NotFound('User not found')
        if not owner.is_farmer:
            raise ActionError('Only farmer accounts can be assigned a farm')
        taken = Farm.objects.filter(user=owner)
        if exclude_farm is not None:
            taken = taken.exclude(pk=exclude_farm.pk)
        if taken.exists():
            raise ActionError('User already has a farm assigned')
        return owner

    @staticmethod
    @action('Failed to create farm')
    def create_farm(name, location=None, is_active=True, user_id=None):
        name = _validate_name(name, 'Farm name')
        owner = FarmService._resolve_owner(user_id)

        farm = Farm.objects.create(
            name=name,
            location=(location or '').strip() or None,
            is_active=is_active,
            user=owner,
        )
        logger.info(f"Farm created: {farm.name}")
        revalidate_path(FARMS_PATH)
        return ActionResult.ok(farm)

    @staticmethod
    @action('Failed to update farm')
    def update_farm(farm_id, **fields):
        farm = get_or_404(Farm, 'Farm not found', pk=farm_id)

        if 'name' in fields:
            farm.name = _validate_name(fields['name'], 'Farm name')
        if 'location' in fields:
            farm.location = (fields['location'] or '').strip() or None
        if 'is_active' in fields:
            farm.is_active = fields['is_active']
        if 'user_id' in fields:
            farm.user = FarmService._resolve_owner(fields['user_id'], exclude_farm=farm)

        farm.save()
        revalidate_path(FARMS_PATH)
        return ActionResult.ok(farm)

    @staticmethod
    @action('Failed to delete farm')
    def delete_farm(farm_id):
        farm = get_or_404(Farm, 'Farm not found', pk=farm_id)
        farm.delete()
        logger.info(f"Farm deleted: {farm_id}")
        revalidate_path(FARMS_PATH, WAREHOUSES_PATH, POULTRY_PATH)
        revalidate_stock_pages()
        return ActionResult.ok()

    @staticmethod
    @action('Failed to get users')
    def users_without_farms():
        return list(
            User.objects.filter(role=User.UserRole.FARMER, farm__isnull=True).order_by('full_name', 'email')
        )


class WarehouseService:

    @staticmethod
    @action('Failed to get warehouses')
    def list_warehouses():
        return list(Warehouse.objects.select_related('farm').order_by('name'))

    @staticmethod
    @action('Failed to get warehouse')
    def get_warehouse(warehouse_id):
        return get_or_404(Warehouse, 'Warehouse not found', pk=warehouse_id)

    @staticmethod
    @action('Failed to create warehouse')
    def create_warehouse(name, farm_id):
        name = _validate_name(name, 'Warehouse name')
        if not farm_id:
            raise ActionError('Farm is required')
        farm = get_or_404(Farm, 'Farm not found', pk=farm_id)
        if Warehouse.objects.filter(farm=farm).exists():
            raise ActionError('Farm already has a warehouse assigned')

        warehouse = Warehouse.objects.create(name=name, farm=farm)
        logger.info(f"Warehouse created: {warehouse.name} for farm {farm.name}")
        revalidate_path(WAREHOUSES_PATH)
        return ActionResult.ok(warehouse)

    @staticmethod
    @action('Failed to update warehouse')
    def update_warehouse(warehouse_id, name=None, farm_id=None):
        warehouse = get_or_404(Warehouse, 'Warehouse not found', pk=warehouse_id)

        if name is not None:
            warehouse.name = _validate_name(name, 'Warehouse name')
        if farm_id is not None and str(farm_id) != str(warehouse.farm_id):
            farm = get_or_404(Farm, 'Farm not found', pk=farm_id)
            if Warehouse.objects.filter(farm=farm).exclude(pk=warehouse.pk).exists():
                raise ActionError('Farm already has a warehouse assigned')
            warehouse.farm = farm

        warehouse.save()
        revalidate_path(WAREHOUSES_PATH)
        return ActionResult.ok(warehouse)

    @staticmethod
    @action('Failed to delete warehouse')
    def delete_warehouse(warehouse_id):
        warehouse = get_or_404(Warehouse, 'Warehouse not found', pk=warehouse_id)
        warehouse.delete()
        logger.info(f"Warehouse deleted: {warehouse_id}")
        revalidate_path(WAREHOUSES_PATH)
        revalidate_stock_pages()
        return ActionResult.ok()

    @staticmethod
    @action('Failed to get warehouses')
    def farmer_warehouses(user):
        return list(Warehouse.objects.select_related('farm').filter(farm__user=user))

    @staticmethod
    @action('Failed to get farms')
    def farms_without_warehouses():
        return list(Farm.objects.filter(warehouse__isnull=True).order_by('name'))


class PoultryService:

    @staticmethod
    @action('Failed to get poultry statuses')
    def list_poultry():
        return list(PoultryStatus.objects.select_related('farm').order_by('batch_name'))

    @staticmethod
    @action('Failed to get poultry status')
    def get_poultry(poultry_id):
        return get_or_404(PoultryStatus, 'Poultry status not found', pk=poultry_id)

    @staticmethod
    @action('Failed to create poultry status')
    def create_poultry(farm_id, batch_name, opening_chicks=0, chick_birth_date=None):
        batch_name = _validate_name(batch_name, 'Batch name')
        if not farm_id:
            raise ActionError('Farm is required')
        if opening_chicks is None or int(opening_chicks) < 0:
            raise ActionError('Opening chicks must be a positive number')

        farm = get_or_404(Farm, 'Farm not found', pk=farm_id)
        if PoultryStatus.objects.filter(farm=farm, batch_name=batch_name).exists():
            raise ActionError('Batch name already exists for this farm')
        if PoultryStatus.objects.filter(farm=farm).exists():
            raise ActionError('Farm already has a poultry batch')

        poultry = PoultryStatus.objects.create(
            farm=farm,
            batch_name=batch_name,
            opening_chicks=int(opening_chicks),
            dead_chicks=0,
            chick_birth_date=chick_birth_date or None,
        )
        logger.info(f"Poultry batch {poultry.batch_name} created for farm {farm.name}")
        revalidate_path(POULTRY_PATH)
        return ActionResult.ok(poultry)

    @staticmethod
    @action('Failed to update poultry status')
    def update_poultry(poultry_id, **fields):
        poultry = get_or_404(PoultryStatus, 'Poultry status not found', pk=poultry_id)

        if 'batch_name' in fields and fields['batch_name'] is not None:
            poultry.batch_name = _validate_name(fields['batch_name'], 'Batch name')
        if 'opening_chicks' in fields and fields['opening_chicks'] is not None:
            if int(fields['opening_chicks']) < 0:
                raise ActionError('Opening chicks must be a positive number')
            poultry.opening_chicks = int(fields['opening_chicks'])
        if 'dead_chicks' in fields and fields['dead_chicks'] is not None:
            if int(fields['dead_chicks']) < 0:
                raise ActionError('Dead chicks must be a positive number')
            poultry.dead_chicks = int(fields['dead_chicks'])
        if 'chick_birth_date' in fields:
            poultry.chick_birth_date = fields['chick_birth_date'] or None

        poultry.save()
        revalidate_path(POULTRY_PATH)
        return ActionResult.ok(poultry)

    @staticmethod
    @action('Failed to delete poultry status')
    def delete_poultry(poultry_id):
        poultry = get_or_404(PoultryStatus, 'Poultry status not found', pk=poultry_id)
        poultry.delete()
        revalidate_path(POULTRY_PATH)
        return ActionResult.ok()

    @staticmethod
    @action('Failed to get available farms')
    def available_farms_for_poultry():
        """Farms without a poultry batch (each farm holds at most one)."""
        return list(Farm.objects.filter(poultry_status__isnull=True).order_by('name'))

    @staticmethod
    def active_farms():
        return PoultryService.available_farms_for_poultry()
