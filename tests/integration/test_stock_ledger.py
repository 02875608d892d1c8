"""
Stock ledger and material endpoint tests.
"""

from decimal import Decimal

import pytest

from core.actions import ActionError
from inventory.models import Material
from inventory.services import StockLedger

pytestmark = pytest.mark.django_db


def balance_invariant(row):
    return row.opening_balance + row.purchases + row.manufacturing - row.sales - row.consumption


class TestStockLedger:

    def test_purchase_creates_missing_row(self, warehouse, feed, kg):
        row = StockLedger.purchase(warehouse.id, 40, material_name_id=feed.id, unit_id=kg.id)

        assert row.purchases == Decimal('40')
        assert row.current_balance == Decimal('40')
        assert row.unit_id == kg.id
        assert Material.objects.filter(warehouse=warehouse).count() == 1

    def test_sell_requires_stock(self, feed_stock):
        with pytest.raises(ActionError) as exc:
            StockLedger.sell(feed_stock.warehouse_id, 600, material_name_id=feed_stock.material_name_id)

        assert str(exc.value) == 'Insufficient stock. Available: 500.00, Required: 600'
        feed_stock.refresh_from_db()
        assert feed_stock.sales == Decimal('0.00')

    def test_sell_unknown_material(self, warehouse, maize):
        with pytest.raises(ActionError, match='Material not found in warehouse inventory'):
            StockLedger.sell(warehouse.id, 1, material_name_id=maize.id)

    def test_consume_medicine_messages(self, vaccine_stock):
        with pytest.raises(ActionError, match='Insufficient medicine stock'):
            StockLedger.consume(vaccine_stock.warehouse_id, 25, medicine_id=vaccine_stock.medicine_id)

    def test_movements_keep_balance_invariant(self, feed_stock):
        warehouse_id, feed_id = feed_stock.warehouse_id, feed_stock.material_name_id
        StockLedger.purchase(warehouse_id, 100, material_name_id=feed_id)
        StockLedger.sell(warehouse_id, 50, material_name_id=feed_id)
        StockLedger.consume(warehouse_id, 25, material_name_id=feed_id)
        row = StockLedger.manufacture(warehouse_id, 10, material_name_id=feed_id)

        assert row.current_balance == Decimal('535.00')
        assert row.current_balance == balance_invariant(row)

    def test_reversal_clamps_at_zero(self, warehouse, feed):
        StockLedger.purchase(warehouse.id, 10, material_name_id=feed.id)
        StockLedger.record(warehouse.id, material_name_id=feed.id, sales=8)

        row = StockLedger.reverse_purchase(warehouse.id, 10, material_name_id=feed.id)

        assert row.purchases == Decimal('0.00')
        assert row.current_balance == Decimal('0.00')

    def test_reversal_without_row_is_skipped(self, warehouse, maize):
        assert StockLedger.reverse_sale(warehouse.id, 5, material_name_id=maize.id) is None

    def test_record_clamps_instead_of_rejecting(self, warehouse, maize):
        row = StockLedger.record(warehouse.id, material_name_id=maize.id, sales=15)

        assert row.sales == Decimal('15')
        assert row.current_balance == Decimal('0.00')


class TestMaterialEndpoints:

    def test_admin_creates_material_with_opening_balance(self, admin_client, warehouse, maize, kg):
        response = admin_client.post('/api/inventory/materials/', {
            'warehouse_id': str(warehouse.id),
            'material_name_id': str(maize.id),
            'unit_id': str(kg.id),
            'opening_balance': '75.00',
        }, format='json')

        assert response.status_code == 201
        row = Material.objects.get(warehouse=warehouse, material_name=maize)
        assert row.current_balance == Decimal('75.00')

    def test_duplicate_item_in_warehouse_rejected(self, admin_client, feed_stock):
        response = admin_client.post('/api/inventory/materials/', {
            'warehouse_id': str(feed_stock.warehouse_id),
            'material_name_id': str(feed_stock.material_name_id),
        }, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'This item already exists in the selected warehouse'

    def test_sub_admin_cannot_create(self, sub_admin_client, warehouse, maize):
        response = sub_admin_client.post('/api/inventory/materials/', {
            'warehouse_id': str(warehouse.id),
            'material_name_id': str(maize.id),
        }, format='json')

        assert response.status_code == 403

    def test_balance_lookup(self, farmer_client, feed_stock):
        response = farmer_client.get('/api/inventory/materials/balance/', {
            'warehouse_id': str(feed_stock.warehouse_id),
            'item_id': str(feed_stock.material_name_id),
        })

        assert response.status_code == 200
        assert Decimal(response.data['data']['current_balance']) == Decimal('500.00')
        assert response.data['data']['unit_name'] == 'Kg'

    def test_summary_counts_stock_levels(self, admin_client, feed_stock, warehouse, maize, vaccine_stock):
        Material.objects.create(warehouse=warehouse, material_name=maize)

        response = admin_client.get('/api/inventory/materials/summary/')

        data = response.data['data']
        assert data['total_materials'] == 3
        assert data['out_of_stock_count'] == 1
        assert data['low_stock_count'] == 1
        assert data['in_stock_count'] == 1
