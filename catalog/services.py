"""
Lookup table services.

Every catalog table supports the same action set: list, create, update,
delete and a read-only farmer_list. A subclass names the model, the field
holding the display name and the messages it reports.
"""

import logging

from django.db.models import ProtectedError

from core.actions import ActionError, ActionResult, action, get_or_404
from core.cache import revalidate_path

from .models import Client, EggWeight, ExpenseType, MaterialName, MeasurementUnit, Medicine

logger = logging.getLogger(__name__)


class LookupService:
    model = None
    name_field = 'name'
    label = 'record'
    plural = 'records'
    path = None
    name_error = 'Name must be at least 2 characters'
    duplicate_error = 'Name already exists'
    min_length = 2
    unique_name = True

    @classmethod
    def clean(cls, data, instance=None):
        """Validate and normalise input; returns the field values to save."""
        name = (data.get(cls.name_field) or '').strip()
        if len(name) < cls.min_length:
            raise ActionError(cls.name_error)

        if cls.unique_name:
            duplicates = cls.model.objects.filter(**{f"{cls.name_field}__iexact": name})
            if instance is not None:
                duplicates = duplicates.exclude(pk=instance.pk)
            if duplicates.exists():
                raise ActionError(cls.duplicate_error)

        return {cls.name_field: name}

    @classmethod
    def queryset(cls):
        return cls.model.objects.order_by(cls.name_field)

    @classmethod
    def list(cls):
        return action(f'Failed to get {cls.plural}')(lambda: list(cls.queryset()))()

    @classmethod
    def farmer_list(cls):
        return cls.list()

    @classmethod
    def create(cls, **data):
        return action(f'Failed to create {cls.label}')(cls._create)(data)

    @classmethod
    def update(cls, record_id, **data):
        return action(f'Failed to update {cls.label}')(cls._update)(record_id, data)

    @classmethod
    def delete(cls, record_id):
        return action(f'Failed to delete {cls.label}')(cls._delete)(record_id)

    @classmethod
    def _create(cls, data):
        record = cls.model.objects.create(**cls.clean(data))
        logger.info(f"{cls.model.__name__} created: {record}")
        revalidate_path(cls.path)
        return ActionResult.ok(record)

    @classmethod
    def _update(cls, record_id, data):
        record = get_or_404(cls.model, f'{cls.label.capitalize()} not found', pk=record_id)
        for field, value in cls.clean(data, instance=record).items():
            setattr(record, field, value)
        record.save()
        revalidate_path(cls.path)
        return ActionResult.ok(record)

    @classmethod
    def _delete(cls, record_id):
        record = get_or_404(cls.model, f'{cls.label.capitalize()} not found', pk=record_id)
        try:
            record.delete()
        except ProtectedError:
            raise ActionError(f'{cls.label.capitalize()} is in use and cannot be deleted')
        revalidate_path(cls.path)
        return ActionResult.ok()


class MaterialNameService(LookupService):
    model = MaterialName
    name_field = 'material_name'
    label = 'material name'
    plural = 'material names'
    path = '/admin/materials-names'
    name_error = 'Material name must be at least 2 characters'
    duplicate_error = 'Material name already exists'


class MeasurementUnitService(LookupService):
    model = MeasurementUnit
    name_field = 'unit_name'
    label = 'measurement unit'
    plural = 'measurement units'
    path = '/admin/units'
    name_error = 'Unit name is required'
    duplicate_error = 'Unit name already exists'
    min_length = 1


class EggWeightService(LookupService):
    model = EggWeight
    name_field = 'weight_range'
    label = 'egg weight'
    plural = 'egg weights'
    path = '/admin/egg-weights'
    name_error = 'Weight range must be at least 2 characters'
    duplicate_error = 'Weight range already exists'


class ExpenseTypeService(LookupService):
    model = ExpenseType
    label = 'expense type'
    plural = 'expense types'
    path = '/admin/expense-types'
    name_error = 'Expense type name must be at least 2 characters'
    duplicate_error = 'Expense type already exists'


class MedicineService(LookupService):
    model = Medicine
    label = 'medicine'
    plural = 'medicines'
    path = '/admin/medicines'
    name_error = 'Medicine name must be at least 2 characters'
    duplicate_error = 'Medicine name already exists'

    @classmethod
    def clean(cls, data, instance=None):
        values = super().clean(data, instance)

        day_of_age = data.get('day_of_age')
        if day_of_age in (None, ''):
            raise ActionError('Day of age is required')
        try:
            day_of_age = int(day_of_age)
        except (TypeError, ValueError):
            raise ActionError('Day of age must be a whole number')
        if day_of_age < 0:
            raise ActionError('Day of age cannot be negative')

        values['day_of_age'] = day_of_age
        values['description'] = (data.get('description') or '').strip() or None
        return values

    @classmethod
    def _update(cls, record_id, data):
        result = super()._update(record_id, data)
        # Alert schedules hang off day_of_age
        revalidate_path('/admin/medication-alerts')
        return result


class ClientService(LookupService):
    model = Client
    label = 'client'
    plural = 'clients'
    path = '/admin/clients'
    name_error = 'Client name must be at least 2 characters'
    unique_name = False

    @classmethod
    def clean(cls, data, instance=None):
        values = super().clean(data, instance)
        client_type = data.get('type')
        if client_type not in Client.ClientType.values:
            raise ActionError('Client type must be either customer or provider')
        values['type'] = client_type
        return values


LOOKUP_SERVICES = {
    'material-names': MaterialNameService,
    'units': MeasurementUnitService,
    'egg-weights': EggWeightService,
    'expense-types': ExpenseTypeService,
    'medicines': MedicineService,
    'clients': ClientService,
}
