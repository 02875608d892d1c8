"""
Medicine consumption and medication alert tests.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from catalog.models import Medicine
from medication_management.models import (
    MedicationAlert,
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
)
from medication_management.services import MedicationAlertService, alert_priority, short_priority
from medication_management.tasks import refresh_medication_alerts

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def consumption_invoice(warehouse):
    return MedicineConsumptionInvoice.objects.create(
        invoice_number='MED-001',
        invoice_date='2024-05-01',
        warehouse=warehouse,
    )


@pytest.fixture
def schedule(db):
    """Two scheduled medicines and one without a day of age."""
    return [
        Medicine.objects.create(name='Gumboro', day_of_age=7),
        Medicine.objects.create(name='Fowl Pox', day_of_age=14),
        Medicine.objects.create(name='Vitamins'),
    ]


@pytest.fixture
def hatched_batch(poultry, schedule, days_ago):
    poultry.chick_birth_date = days_ago(10)
    poultry.save()
    return poultry


# =============================================================================
# CONSUMPTION INVOICES
# =============================================================================

class TestFarmerConsumption:

    def payload(self, warehouse, medicine, quantity, **extra):
        return {
            'invoice_number': 'FARM-MED-1',
            'invoice_date': '2024-05-02',
            'warehouse_id': str(warehouse.id),
            'items': [{'medicine_id': str(medicine.id), 'quantity': str(quantity), 'price': '3'}],
            **extra,
        }

    def test_create_consumes_stock(self, farmer_client, warehouse, vaccine_stock, vaccine, transport):
        response = farmer_client.post('/api/medicine-consumption/farmer/', self.payload(
            warehouse, vaccine, 5,
            expenses=[{'expense_type_id': str(transport.id), 'amount': '10'}],
        ), format='json')

        assert response.status_code == 201
        invoice = MedicineConsumptionInvoice.objects.get(invoice_number='FARM-MED-1')
        assert invoice.total_value == Decimal('25.00')
        vaccine_stock.refresh_from_db()
        assert vaccine_stock.current_balance == Decimal('15.00')

    def test_insufficient_stock_rolls_back_invoice(self, farmer_client, warehouse, vaccine_stock, vaccine):
        response = farmer_client.post(
            '/api/medicine-consumption/farmer/', self.payload(warehouse, vaccine, 50), format='json'
        )

        assert response.status_code == 400
        assert response.data['error'].startswith('Insufficient medicine stock')
        assert not MedicineConsumptionInvoice.objects.exists()
        vaccine_stock.refresh_from_db()
        assert vaccine_stock.consumption == Decimal('0.00')

    def test_foreign_warehouse_rejected(self, farmer_client, warehouse, other_warehouse, vaccine):
        response = farmer_client.post(
            '/api/medicine-consumption/farmer/', self.payload(other_warehouse, vaccine, 1), format='json'
        )

        assert response.status_code == 403
        assert not MedicineConsumptionInvoice.objects.exists()

    def test_farmer_without_warehouse(self, farmer_client, other_warehouse, vaccine):
        response = farmer_client.post(
            '/api/medicine-consumption/farmer/', self.payload(other_warehouse, vaccine, 1), format='json'
        )

        assert response.status_code == 400
        assert response.data['error'] == 'No warehouses found for your farm'

    def test_farmer_reads_only_own_invoice(self, farmer_client, farm, other_warehouse):
        foreign = MedicineConsumptionInvoice.objects.create(
            invoice_number='MED-X', invoice_date='2024-05-01', warehouse=other_warehouse
        )

        response = farmer_client.get(f'/api/medicine-consumption/farmer/{foreign.id}/')

        assert response.status_code == 403
        assert response.data['error'] == 'Unauthorized - Invoice does not belong to your farm'


class TestAdminConsumption:

    def test_item_and_delete_reverse_stock(self, admin_client, consumption_invoice, vaccine_stock, vaccine):
        response = admin_client.post(f'/api/medicine-consumption/{consumption_invoice.id}/items/', {
            'medicine_id': str(vaccine.id), 'quantity': '6', 'price': '2',
        }, format='json')
        assert response.status_code == 201
        vaccine_stock.refresh_from_db()
        assert vaccine_stock.current_balance == Decimal('14.00')

        admin_client.delete(f'/api/medicine-consumption/{consumption_invoice.id}/')

        vaccine_stock.refresh_from_db()
        assert vaccine_stock.consumption == Decimal('0.00')
        assert vaccine_stock.current_balance == Decimal('20.00')

    def test_expense_delete_recomputes_total(self, admin_client, consumption_invoice):
        created = admin_client.post(
            f'/api/medicine-consumption/{consumption_invoice.id}/expenses/', {'amount': '12'}, format='json'
        )
        consumption_invoice.refresh_from_db()
        assert consumption_invoice.total_value == Decimal('12.00')

        admin_client.delete(f"/api/medicine-consumption/expenses/{created.data['data']['id']}/")

        assert not MedicineConsumptionExpense.objects.exists()
        consumption_invoice.refresh_from_db()
        assert consumption_invoice.total_value == Decimal('0.00')

    def test_update_requires_every_field(self, admin_client, consumption_invoice, warehouse):
        response = admin_client.put(f'/api/medicine-consumption/{consumption_invoice.id}/', {
            'invoice_number': 'MED-002',
            'invoice_date': '2024-05-03',
            'warehouse_id': str(warehouse.id),
        }, format='json')

        assert response.status_code == 200
        consumption_invoice.refresh_from_db()
        assert consumption_invoice.invoice_number == 'MED-002'


class TestPlainInvoiceRead:

    def test_returns_invoice_without_envelope(self, admin_client, consumption_invoice):
        response = admin_client.get(f'/api/medicine-invoices/{consumption_invoice.id}/')

        assert response.status_code == 200
        assert 'success' not in response.data
        assert response.data['invoice_number'] == 'MED-001'
        assert response.data['warehouse'] == {'name': 'House A', 'farm_name': 'Green Valley'}

    def test_missing_invoice(self, admin_client):
        response = admin_client.get('/api/medicine-invoices/00000000-0000-0000-0000-000000000000/')

        assert response.status_code == 404
        assert response.data == {'error': 'Invoice not found'}

    def test_malformed_id_is_not_found(self, admin_client):
        response = admin_client.get('/api/medicine-invoices/not-an-invoice/')

        assert response.status_code == 404
        assert response.data == {'error': 'Invoice not found'}

    def test_farmer_cannot_read_other_farm(self, farmer_client, other_warehouse):
        foreign = MedicineConsumptionInvoice.objects.create(
            invoice_number='MED-X', invoice_date='2024-05-01', warehouse=other_warehouse
        )

        assert farmer_client.get(f'/api/medicine-invoices/{foreign.id}/').status_code == 404


# =============================================================================
# ALERTS
# =============================================================================

class TestAlertPriority:

    @pytest.mark.parametrize('days, expected', [
        (-2, 'overdue'),
        (0, 'today'),
        (1, 'tomorrow'),
        (5, 'normal'),
        (9, 'not_urgent'),
    ])
    def test_alert_priority(self, days, expected):
        assert alert_priority(days, 7) == expected

    def test_short_priority_levels(self):
        assert short_priority(-1) == ('overdue', 1)
        assert short_priority(3) == ('upcoming', 4)


class TestAlertGeneration:

    def test_birth_date_schedules_alerts(self, hatched_batch, today):
        alerts = MedicationAlert.objects.filter(poultry_status=hatched_batch).order_by('scheduled_day')

        assert [alert.scheduled_day for alert in alerts] == [7, 14]
        assert alerts[0].scheduled_date == today - timedelta(days=3)
        assert alerts[0].alert_date == today - timedelta(days=4)
        assert alerts[0].farm_id == hatched_batch.farm_id

    def test_regeneration_skips_administered(self, hatched_batch):
        alert = MedicationAlert.objects.get(poultry_status=hatched_batch, scheduled_day=7)
        MedicationAlertService.mark_alert_administered(alert.id)

        result = MedicationAlertService.create_alerts_for_poultry(hatched_batch.id, hatched_batch.chick_birth_date)

        assert result.data == 1
        assert MedicationAlert.objects.filter(poultry_status=hatched_batch).count() == 2

    def test_refresh_task_only_touches_stale_batches(self, hatched_batch):
        assert refresh_medication_alerts() == 0

        Medicine.objects.create(name='Deworm', day_of_age=21)

        assert refresh_medication_alerts() == 1
        assert MedicationAlert.objects.filter(poultry_status=hatched_batch).count() == 3

    def test_active_alerts_sorted_by_priority(self, hatched_batch):
        result = MedicationAlertService.active_alerts_for_farm(hatched_batch.farm_id, 7)

        assert [row['priority'] for row in result.data] == ['overdue', 'normal']
        assert result.data[0]['is_overdue'] is True
        assert result.data[1]['days_until_scheduled'] == 4

    def test_mark_twice_fails(self, hatched_batch):
        alert = MedicationAlert.objects.filter(poultry_status=hatched_batch).first()

        assert MedicationAlertService.mark_alert_administered(alert.id, 'Given at 8am').success
        second = MedicationAlertService.mark_alert_administered(alert.id)

        assert second.success is False
        assert second.error == 'Alert not found or already administered'

    def test_unmark(self, hatched_batch):
        alert = MedicationAlert.objects.filter(poultry_status=hatched_batch).first()
        MedicationAlertService.mark_alert_administered(alert.id)

        MedicationAlertService.unmark_alert_administered(alert.id)

        alert.refresh_from_db()
        assert alert.is_administered is False
        assert alert.administered_at is None


class TestAlertEndpoints:

    def test_farmer_stats(self, farmer_client, hatched_batch):
        response = farmer_client.get(f'/api/medication-alerts/farms/{hatched_batch.farm_id}/stats/')

        assert response.data['data'] == {
            'total': 2, 'completed': 0, 'pending': 2, 'overdue': 1, 'today': 0, 'tomorrow': 0,
        }

    def test_farmer_blocked_from_other_farm(self, hatched_batch, other_farmer):
        from rest_framework.test import APIClient

        client = APIClient()
        client.force_authenticate(user=other_farmer)

        response = client.get(f'/api/medication-alerts/farms/{hatched_batch.farm_id}/')

        assert response.status_code == 403

    def test_upcoming_for_farmer(self, farmer_client, hatched_batch):
        response = farmer_client.get('/api/medication-alerts/upcoming/')

        rows = response.data['data']
        assert [row['priority'] for row in rows] == ['overdue', 'upcoming']
        assert rows[0]['urgency_level'] == 1

    def test_administer_endpoint(self, farmer_client, hatched_batch):
        alert = MedicationAlert.objects.filter(poultry_status=hatched_batch).first()

        response = farmer_client.post(f'/api/medication-alerts/{alert.id}/administer/', {'notes': 'done'}, format='json')

        assert response.status_code == 200
        alert.refresh_from_db()
        assert alert.is_administered is True
        assert alert.notes == 'done'

    def test_chick_age(self, farmer_client):
        response = farmer_client.get('/api/medication-alerts/chick-age/', {
            'birth_date': '2024-05-01', 'reference_date': '2024-05-15',
        })

        assert response.data['data'] == 14

    def test_chick_age_with_impossible_date(self, farmer_client):
        response = farmer_client.get('/api/medication-alerts/chick-age/', {'birth_date': '2024-02-30'})

        assert response.status_code == 400
        assert response.data['error'] == 'Invalid date'

    def test_summary_requires_admin(self, farmer_client, admin_client, hatched_batch):
        assert farmer_client.get('/api/medication-alerts/summary/').status_code == 403

        response = admin_client.get('/api/medication-alerts/summary/')

        assert response.status_code == 200
        assert response.data['data'][0]['overdue_alerts'] == 1
        assert response.data['data'][0]['current_chick_age'] == 10
