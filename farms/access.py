"""
Farm ownership checks for farmer-scoped actions.
"""

from core.actions import ActionError, Forbidden

from .models import Farm, Warehouse


def get_farmer_farm(user):
    farm = Farm.objects.filter(user=user).first()
    if farm is None:
        raise ActionError('No farm assigned to your account')
    return farm


def farmer_warehouse_ids(user):
    return list(Warehouse.objects.filter(farm__user=user).values_list('id', flat=True))


def require_farmer_warehouse(user, warehouse_id, message='Invalid warehouse - not assigned to your farm'):
    """Return the warehouse when it belongs to the farmer's farm."""
    farm = get_farmer_farm(user)
    warehouse = Warehouse.objects.filter(pk=warehouse_id).first() if warehouse_id else None
    if warehouse is None or warehouse.farm_id != farm.id:
        raise Forbidden(message)
    return warehouse
