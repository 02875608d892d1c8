"""
Shared pytest fixtures: users of each role, one farm with its warehouse and
poultry batch, and the catalog rows most tests need.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from catalog.models import ExpenseType, MaterialName, MeasurementUnit, Medicine
from farms.models import Farm, PoultryStatus, Warehouse
from inventory.models import Material


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


def make_user(email, role, password='testpass123'):
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        full_name=email.split('@')[0].title(),
        role=role,
    )


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def admin_user(db):
    return make_user('admin@farm.test', User.UserRole.ADMIN)


@pytest.fixture
def sub_admin_user(db):
    return make_user('viewer@farm.test', User.UserRole.SUB_ADMIN)


@pytest.fixture
def farmer_user(db):
    return make_user('farmer@farm.test', User.UserRole.FARMER)


@pytest.fixture
def other_farmer(db):
    return make_user('other@farm.test', User.UserRole.FARMER)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def sub_admin_client(sub_admin_user):
    return client_for(sub_admin_user)


@pytest.fixture
def farmer_client(farmer_user):
    return client_for(farmer_user)


@pytest.fixture
def farm(farmer_user):
    return Farm.objects.create(user=farmer_user, name='Green Valley', location='Kumasi')


@pytest.fixture
def warehouse(farm):
    return Warehouse.objects.create(farm=farm, name='House A')


@pytest.fixture
def poultry(farm):
    return PoultryStatus.objects.create(farm=farm, batch_name='Batch 1', opening_chicks=1000)


@pytest.fixture
def other_warehouse(other_farmer):
    other_farm = Farm.objects.create(user=other_farmer, name='Hill Top')
    return Warehouse.objects.create(farm=other_farm, name='House B')


@pytest.fixture
def carton(db):
    return MeasurementUnit.objects.create(unit_name='Carton')


@pytest.fixture
def kg(db):
    return MeasurementUnit.objects.create(unit_name='Kg')


@pytest.fixture
def feed(db):
    return MaterialName.objects.create(material_name='Layer Feed')


@pytest.fixture
def maize(db):
    return MaterialName.objects.create(material_name='Maize')


@pytest.fixture
def vaccine(db):
    return Medicine.objects.create(name='Newcastle Vaccine', day_of_age=7)


@pytest.fixture
def transport(db):
    return ExpenseType.objects.create(name='Transport')


@pytest.fixture
def feed_stock(warehouse, feed, kg):
    return Material.objects.create(
        warehouse=warehouse,
        material_name=feed,
        unit=kg,
        opening_balance=Decimal('500.00'),
        current_balance=Decimal('500.00'),
    )


@pytest.fixture
def vaccine_stock(warehouse, vaccine):
    return Material.objects.create(
        warehouse=warehouse,
        medicine=vaccine,
        opening_balance=Decimal('20.00'),
        current_balance=Decimal('20.00'),
    )


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def days_ago(today):
    def _days_ago(days):
        return today - timedelta(days=days)
    return _days_ago
