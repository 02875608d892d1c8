"""
Manufacturing batch tests: inputs consume stock, the output is added to
stock once, deletion gives everything back.
"""

from decimal import Decimal

import pytest

from inventory.models import Material
from manufacturing.models import ManufacturingInvoice, ManufacturingInvoiceItem

pytestmark = pytest.mark.django_db


@pytest.fixture
def batch(warehouse, maize, kg):
    """A batch producing 80 kg of maize blend in House A."""
    return ManufacturingInvoice.objects.create(
        invoice_number='MFG-001',
        warehouse=warehouse,
        material_name=maize,
        unit=kg,
        quantity=Decimal('80.00'),
        manufacturing_date='2024-05-05',
    )


class TestManufacturingInvoices:

    def test_farmer_creates_in_own_warehouse(self, farmer_client, warehouse, maize, kg):
        response = farmer_client.post('/api/manufacturing/', {
            'invoice_number': 'MFG-100',
            'warehouse_id': str(warehouse.id),
            'material_name_id': str(maize.id),
            'unit_id': str(kg.id),
            'quantity': '25',
            'manufacturing_date': '2024-05-05',
        }, format='json')

        assert response.status_code == 201
        assert response.data['data']['warehouse'] == {'name': 'House A', 'farm_name': 'Green Valley'}

    def test_farmer_rejected_for_foreign_warehouse(self, farmer_client, warehouse, other_warehouse):
        response = farmer_client.post('/api/manufacturing/', {
            'invoice_number': 'MFG-101',
            'warehouse_id': str(other_warehouse.id),
            'manufacturing_date': '2024-05-05',
        }, format='json')

        assert response.status_code == 403
        assert not ManufacturingInvoice.objects.exists()

    def test_sub_admin_cannot_create(self, sub_admin_client, warehouse):
        response = sub_admin_client.post('/api/manufacturing/', {
            'invoice_number': 'MFG-102',
            'warehouse_id': str(warehouse.id),
            'manufacturing_date': '2024-05-05',
        }, format='json')

        assert response.status_code == 403

    def test_farmer_list_is_scoped(self, farmer_client, batch, other_warehouse):
        ManufacturingInvoice.objects.create(
            invoice_number='MFG-OTHER', warehouse=other_warehouse, manufacturing_date='2024-05-05'
        )

        response = farmer_client.get('/api/manufacturing/')

        assert [row['invoice_number'] for row in response.data['data']] == ['MFG-001']

    def test_other_farmer_gets_404(self, batch, other_farmer):
        from rest_framework.test import APIClient

        client = APIClient()
        client.force_authenticate(user=other_farmer)

        assert client.get(f'/api/manufacturing/{batch.id}/').status_code == 404

    def test_only_admin_deletes(self, farmer_client, batch):
        assert farmer_client.delete(f'/api/manufacturing/{batch.id}/').status_code == 403
        assert ManufacturingInvoice.objects.filter(pk=batch.pk).exists()


class TestManufacturingStock:

    def test_input_consumes_stock(self, admin_client, batch, feed_stock, feed):
        response = admin_client.post(f'/api/manufacturing/{batch.id}/items/', {
            'material_name_id': str(feed.id), 'quantity': '60',
        }, format='json')

        assert response.status_code == 201
        feed_stock.refresh_from_db()
        assert feed_stock.consumption == Decimal('60.00')
        assert feed_stock.current_balance == Decimal('440.00')

    def test_input_over_stock_rejected(self, admin_client, batch, feed_stock, feed):
        response = admin_client.post(f'/api/manufacturing/{batch.id}/items/', {
            'material_name_id': str(feed.id), 'quantity': '900',
        }, format='json')

        assert response.status_code == 400
        assert not ManufacturingInvoiceItem.objects.exists()

    def test_output_added_once(self, admin_client, batch, maize):
        first = admin_client.post(f'/api/manufacturing/{batch.id}/add-output/')
        second = admin_client.post(f'/api/manufacturing/{batch.id}/add-output/')

        assert first.status_code == 200
        assert second.data['error'] == 'Output material has already been added to inventory'
        row = Material.objects.get(warehouse=batch.warehouse, material_name=maize)
        assert row.manufacturing == Decimal('80.00')
        assert row.current_balance == Decimal('80.00')

    def test_output_requires_material(self, admin_client, warehouse):
        bare = ManufacturingInvoice.objects.create(
            invoice_number='MFG-BARE', warehouse=warehouse, manufacturing_date='2024-05-05'
        )

        response = admin_client.post(f'/api/manufacturing/{bare.id}/add-output/')

        assert response.data['error'] == 'Output material and quantity are required'

    def test_delete_reverses_output_and_inputs(self, admin_client, batch, feed_stock, feed, maize):
        admin_client.post(f'/api/manufacturing/{batch.id}/items/', {
            'material_name_id': str(feed.id), 'quantity': '60',
        }, format='json')
        admin_client.post(f'/api/manufacturing/{batch.id}/add-output/')

        response = admin_client.delete(f'/api/manufacturing/{batch.id}/')

        assert response.status_code == 200
        feed_stock.refresh_from_db()
        assert feed_stock.current_balance == Decimal('500.00')
        output = Material.objects.get(warehouse=batch.warehouse, material_name=maize)
        assert output.current_balance == Decimal('0.00')

    def test_rollback_leaves_stock(self, admin_client, batch, feed_stock, feed):
        admin_client.post(f'/api/manufacturing/{batch.id}/items/', {
            'material_name_id': str(feed.id), 'quantity': '10',
        }, format='json')

        admin_client.post(f'/api/manufacturing/{batch.id}/rollback/')

        assert not ManufacturingInvoice.objects.exists()
        feed_stock.refresh_from_db()
        assert feed_stock.current_balance == Decimal('490.00')

    def test_expenses_total(self, admin_client, batch):
        admin_client.post(f'/api/manufacturing/{batch.id}/expenses/', {'amount': '18.50'}, format='json')

        batch.refresh_from_db()
        assert batch.total_expenses_value == Decimal('18.50')

    def test_export(self, admin_client, batch):
        response = admin_client.get('/api/manufacturing/export/')

        assert response.status_code == 200
        assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
