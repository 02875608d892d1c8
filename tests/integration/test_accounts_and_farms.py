"""
Users, farms, warehouses, poultry batches, one-step farm setup and catalog
lookups.
"""

from decimal import Decimal

import pytest

from accounts.models import User
from catalog.models import MaterialName, Medicine
from farms.models import Farm, PoultryStatus, Warehouse
from inventory.models import Material
from medication_management.models import MedicationAlert

pytestmark = pytest.mark.django_db


# =============================================================================
# USERS
# =============================================================================

class TestAuthentication:

    def test_login_returns_tokens_and_profile(self, api_client, farmer_user):
        response = api_client.post('/api/auth/login/', {
            'email': 'farmer@farm.test', 'password': 'testpass123',
        }, format='json')

        assert response.status_code == 200
        assert 'access' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['role'] == 'FARMER'

    def test_banned_user_cannot_login(self, api_client, farmer_user):
        farmer_user.is_active = False
        farmer_user.save()

        response = api_client.post('/api/auth/login/', {
            'email': 'farmer@farm.test', 'password': 'testpass123',
        }, format='json')

        assert response.status_code == 401

    def test_me(self, farmer_client, farm):
        response = farmer_client.get('/api/auth/me/')

        assert response.data['email'] == 'farmer@farm.test'
        assert response.data['farm_id'] == str(farm.id)

    def test_logout_blacklists_refresh_token(self, farmer_client, farmer_user):
        from rest_framework_simplejwt.tokens import RefreshToken

        refresh = str(RefreshToken.for_user(farmer_user))

        first = farmer_client.post('/api/auth/logout/', {'refresh': refresh}, format='json')
        second = farmer_client.post('/api/auth/logout/', {'refresh': refresh}, format='json')

        assert first.data == {'success': True}
        assert second.status_code == 400

    def test_logout_requires_token(self, farmer_client):
        response = farmer_client.post('/api/auth/logout/', {}, format='json')

        assert response.data['error'] == 'Refresh token is required'


class TestUserManagement:

    def test_admin_creates_user(self, admin_client):
        response = admin_client.post('/api/admin/users/', {
            'email': 'New.Farmer@Farm.test',
            'password': 'secret1',
            'full_name': 'New Farmer',
        }, format='json')

        assert response.status_code == 201
        user = User.objects.get(email='new.farmer@farm.test')
        assert user.role == User.UserRole.FARMER
        assert user.check_password('secret1')

    def test_short_password_rejected(self, admin_client):
        response = admin_client.post('/api/admin/users/', {
            'email': 'short@farm.test', 'password': '123',
        }, format='json')

        assert response.status_code == 400
        assert not User.objects.filter(email='short@farm.test').exists()

    def test_duplicate_email_rejected(self, admin_client, farmer_user):
        response = admin_client.post('/api/admin/users/', {
            'email': 'farmer@farm.test', 'password': 'secret1',
        }, format='json')

        assert response.data['error'] == 'A user with this email already exists'

    def test_cannot_delete_or_ban_self(self, admin_client, admin_user):
        delete = admin_client.delete(f'/api/admin/users/{admin_user.id}/')
        ban = admin_client.post(f'/api/admin/users/{admin_user.id}/toggle-status/')

        assert delete.data['error'] == 'Cannot delete yourself'
        assert ban.data['error'] == 'Cannot ban yourself'

    def test_ban_and_unban(self, admin_client, farmer_user):
        admin_client.post(f'/api/admin/users/{farmer_user.id}/toggle-status/')
        farmer_user.refresh_from_db()
        assert farmer_user.is_banned is True

        admin_client.post(f'/api/admin/users/{farmer_user.id}/toggle-status/')
        farmer_user.refresh_from_db()
        assert farmer_user.is_banned is False

    def test_farmer_cannot_list_users(self, farmer_client):
        assert farmer_client.get('/api/admin/users/').status_code == 403


# =============================================================================
# FARMS, WAREHOUSES, POULTRY
# =============================================================================

class TestFarms:

    def test_farm_owner_must_be_farmer(self, admin_client, sub_admin_user):
        response = admin_client.post('/api/farms/', {
            'name': 'North Farm', 'user_id': str(sub_admin_user.id),
        }, format='json')

        assert response.data['error'] == 'Only farmer accounts can be assigned a farm'

    def test_farmer_has_one_farm(self, admin_client, farm, farmer_user):
        response = admin_client.post('/api/farms/', {
            'name': 'Second Farm', 'user_id': str(farmer_user.id),
        }, format='json')

        assert response.data['error'] == 'User already has a farm assigned'

    def test_short_name_rejected(self, admin_client):
        response = admin_client.post('/api/farms/', {'name': 'X'}, format='json')

        assert response.data['error'] == 'Farm name must be at least 2 characters'

    def test_one_warehouse_per_farm(self, admin_client, warehouse, farm):
        response = admin_client.post('/api/farms/warehouses/', {
            'name': 'House Z', 'farm_id': str(farm.id),
        }, format='json')

        assert response.data['error'] == 'Farm already has a warehouse assigned'

    def test_warehouse_delete_refreshes_stock_summary(self, admin_client, feed_stock, warehouse):
        from inventory.services import MaterialService

        assert MaterialService.materials_summary().data['total_materials'] == 1

        response = admin_client.delete(f'/api/farms/warehouses/{warehouse.id}/')

        assert response.status_code == 200
        summary = MaterialService.materials_summary().data
        assert summary['total_materials'] == 0
        assert summary['total_warehouses'] == 0

    def test_farm_delete_refreshes_stock_summary(self, admin_client, feed_stock, farm):
        from inventory.services import MaterialService

        assert MaterialService.materials_summary().data['total_materials'] == 1

        admin_client.delete(f'/api/farms/{farm.id}/')

        assert MaterialService.materials_summary().data['total_materials'] == 0

    def test_remaining_chicks_derived(self, poultry):
        poultry.dead_chicks = 25
        poultry.save()

        poultry.refresh_from_db()
        assert poultry.remaining_chicks == 975

    def test_farmer_warehouses(self, farmer_client, warehouse):
        response = farmer_client.get('/api/farms/my-warehouses/')

        assert response.status_code == 200
        assert [row['name'] for row in response.data['data']] == ['House A']


class TestFarmSetup:

    def payload(self, feed, kg, vaccine):
        return {
            'user': {'email': 'setup@farm.test', 'password': 'secret1', 'full_name': 'Setup Farmer'},
            'farm': {'name': 'Sunrise Farm', 'location': 'Tamale'},
            'warehouse': {'name': 'Main House'},
            'poultry': {'batch_name': 'Batch S1', 'opening_chicks': 2000},
            'materials': [
                {'material_name_id': str(feed.id), 'unit_id': str(kg.id), 'opening_balance': 300},
                {'material_name_id': None, 'opening_balance': 5},
            ],
            'medicines': [{'medicine_id': str(vaccine.id), 'opening_balance': 12}],
        }

    def test_complete_setup(self, admin_client, feed, kg, vaccine):
        response = admin_client.post('/api/farms/setup/', self.payload(feed, kg, vaccine), format='json')

        assert response.status_code == 201
        data = response.data['data']
        farm = Farm.objects.get(pk=data['farm_id'])
        assert farm.user.email == 'setup@farm.test'
        assert Warehouse.objects.get(farm=farm).name == 'Main House'
        assert PoultryStatus.objects.get(farm=farm).remaining_chicks == 2000
        assert len(data['material_ids']) == 1
        assert len(data['medicine_ids']) == 1
        stock = Material.objects.get(warehouse_id=data['warehouse_id'], material_name=feed)
        assert stock.current_balance == Decimal('300.00')

    def test_failed_step_rolls_back_everything(self, admin_client, feed, kg, vaccine, farmer_user):
        payload = self.payload(feed, kg, vaccine)
        payload['farm']['name'] = 'X'

        response = admin_client.post('/api/farms/setup/', payload, format='json')

        assert response.status_code == 400
        assert response.data['error'].startswith('Failed to create farm')
        assert not User.objects.filter(email='setup@farm.test').exists()
        assert not Farm.objects.exists()

    def test_only_admin(self, sub_admin_client, feed, kg, vaccine):
        response = sub_admin_client.post('/api/farms/setup/', self.payload(feed, kg, vaccine), format='json')
        assert response.status_code == 403


# =============================================================================
# CATALOG
# =============================================================================

class TestCatalog:

    def test_duplicate_material_name_case_insensitive(self, admin_client, feed):
        response = admin_client.post('/api/catalog/material-names/', {'material_name': 'layer feed'}, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Material name already exists'

    def test_farmer_reads_but_cannot_write(self, farmer_client, feed):
        assert farmer_client.get('/api/catalog/material-names/').status_code == 200
        response = farmer_client.post('/api/catalog/material-names/', {'material_name': 'Oyster Shell'}, format='json')
        assert response.status_code == 403
        assert not MaterialName.objects.filter(material_name='Oyster Shell').exists()

    def test_medicine_needs_day_of_age(self, admin_client):
        response = admin_client.post('/api/catalog/medicines/', {'name': 'Antibiotic'}, format='json')

        assert response.data['error'] == 'Day of age is required'

    def test_medicine_created(self, admin_client):
        response = admin_client.post('/api/catalog/medicines/', {
            'name': 'Antibiotic', 'day_of_age': '21', 'description': 'Broad spectrum',
        }, format='json')

        assert response.status_code == 201
        assert Medicine.objects.get(name='Antibiotic').day_of_age == 21

    def test_new_scheduled_medicine_reaches_alerts_after_refresh(self, poultry, days_ago):
        from medication_management.tasks import refresh_medication_alerts

        poultry.chick_birth_date = days_ago(2)
        poultry.save()
        Medicine.objects.create(name='Coccidiostat', day_of_age=10)

        refresh_medication_alerts()

        assert MedicationAlert.objects.filter(poultry_status=poultry, scheduled_day=10).exists()
