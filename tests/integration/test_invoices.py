"""
Buy/Sell Invoice Integration Tests

SCENARIO:
=========
An admin buys 200 kg of feed for House A, sells part of it on, charges
transport to the invoice, then deletes lines and whole invoices. Stock and
invoice totals must follow every change.
"""

from decimal import Decimal
from unittest import mock

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from inventory.models import Material
from invoices.models import Invoice, InvoiceAttachment, InvoiceItem

pytestmark = pytest.mark.django_db


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def buy_invoice(warehouse):
    return Invoice.objects.create(
        invoice_type=Invoice.InvoiceType.BUY,
        invoice_number='BUY-001',
        invoice_date='2024-03-01',
        warehouse=warehouse,
    )


@pytest.fixture
def sell_invoice(warehouse):
    return Invoice.objects.create(
        invoice_type=Invoice.InvoiceType.SELL,
        invoice_number='SELL-001',
        invoice_date='2024-03-02',
        warehouse=warehouse,
    )


def add_item(client, invoice, material, quantity, price):
    return client.post(f'/api/invoices/{invoice.id}/items/', {
        'material_name_id': str(material.id),
        'quantity': str(quantity),
        'price': str(price),
    }, format='json')


# =============================================================================
# INVOICES
# =============================================================================

class TestInvoiceHeader:

    def test_create_invoice(self, admin_client, warehouse):
        response = admin_client.post('/api/invoices/', {
            'invoice_type': 'buy',
            'invoice_number': ' BUY-100 ',
            'invoice_date': '2024-03-01',
            'warehouse_id': str(warehouse.id),
        }, format='json')

        assert response.status_code == 201
        assert response.data['success'] is True
        assert Invoice.objects.get(invoice_number='BUY-100').warehouse_id == warehouse.id

    def test_duplicate_number_rejected(self, admin_client, buy_invoice):
        response = admin_client.post('/api/invoices/', {
            'invoice_type': 'sell',
            'invoice_number': 'BUY-001',
            'invoice_date': '2024-03-01',
        }, format='json')

        assert response.status_code == 400
        assert response.data == {'success': False, 'error': 'Invoice number already exists'}

    def test_sub_admin_reads_but_cannot_write(self, sub_admin_client, buy_invoice):
        assert sub_admin_client.get('/api/invoices/').status_code == 200
        response = sub_admin_client.delete(f'/api/invoices/{buy_invoice.id}/')
        assert response.status_code == 403
        assert Invoice.objects.filter(pk=buy_invoice.pk).exists()

    def test_toggle_checked(self, admin_client, buy_invoice):
        admin_client.post(f'/api/invoices/{buy_invoice.id}/toggle-checked/')
        buy_invoice.refresh_from_db()
        assert buy_invoice.checked is True

    def test_unknown_invoice_is_404(self, admin_client):
        response = admin_client.get('/api/invoices/00000000-0000-0000-0000-000000000000/')
        assert response.status_code == 404
        assert response.data['error'] == 'Invoice not found'


# =============================================================================
# ITEMS AND STOCK
# =============================================================================

class TestInvoiceItems:

    def test_buy_item_purchases_stock(self, admin_client, buy_invoice, feed):
        response = add_item(admin_client, buy_invoice, feed, 200, '2.50')

        assert response.status_code == 201
        row = Material.objects.get(warehouse=buy_invoice.warehouse, material_name=feed)
        assert row.purchases == Decimal('200.00')
        assert row.current_balance == Decimal('200.00')

        buy_invoice.refresh_from_db()
        assert buy_invoice.total_items_value == Decimal('500.00')
        assert buy_invoice.net_value == Decimal('500.00')

    def test_sell_item_needs_stock(self, admin_client, sell_invoice, feed_stock, feed):
        response = add_item(admin_client, sell_invoice, feed, 600, 3)

        assert response.status_code == 400
        assert response.data['error'] == 'Insufficient stock. Available: 500.00, Required: 600.00'
        assert not InvoiceItem.objects.filter(invoice=sell_invoice).exists()
        feed_stock.refresh_from_db()
        assert feed_stock.current_balance == Decimal('500.00')

    def test_sell_then_delete_item_restores_stock(self, admin_client, sell_invoice, feed_stock, feed):
        add_item(admin_client, sell_invoice, feed, 120, 3)
        feed_stock.refresh_from_db()
        assert feed_stock.current_balance == Decimal('380.00')

        item = InvoiceItem.objects.get(invoice=sell_invoice)
        response = admin_client.delete(f'/api/invoices/items/{item.id}/')

        assert response.status_code == 200
        feed_stock.refresh_from_db()
        assert feed_stock.sales == Decimal('0.00')
        assert feed_stock.current_balance == Decimal('500.00')
        sell_invoice.refresh_from_db()
        assert sell_invoice.net_value == Decimal('0.00')

    def test_quantity_change_refreshes_stock_summary(self, admin_client, sell_invoice, feed_stock, feed):
        from inventory.services import MaterialService

        add_item(admin_client, sell_invoice, feed, 10, 3)
        assert MaterialService.materials_summary().data['low_stock_count'] == 0

        item = InvoiceItem.objects.get(invoice=sell_invoice)
        response = admin_client.patch(f'/api/invoices/items/{item.id}/', {'quantity': '450'}, format='json')

        assert response.status_code == 200
        feed_stock.refresh_from_db()
        assert feed_stock.current_balance == Decimal('50.00')
        assert MaterialService.materials_summary().data['low_stock_count'] == 1

    def test_warehouse_change_rejected_once_items_exist(self, admin_client, buy_invoice, feed, other_warehouse):
        add_item(admin_client, buy_invoice, feed, 50, 1)

        response = admin_client.patch(f'/api/invoices/{buy_invoice.id}/', {
            'warehouse_id': str(other_warehouse.id),
        }, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Cannot change warehouse or invoice type while the invoice has items'
        buy_invoice.refresh_from_db()
        assert buy_invoice.warehouse_id != other_warehouse.id

    def test_type_change_rejected_once_items_exist(self, admin_client, buy_invoice, feed):
        add_item(admin_client, buy_invoice, feed, 50, 1)

        response = admin_client.patch(f'/api/invoices/{buy_invoice.id}/', {'invoice_type': 'sell'}, format='json')

        assert response.status_code == 400
        buy_invoice.refresh_from_db()
        assert buy_invoice.invoice_type == Invoice.InvoiceType.BUY

    def test_empty_invoice_can_change_warehouse(self, admin_client, buy_invoice, other_warehouse):
        response = admin_client.patch(f'/api/invoices/{buy_invoice.id}/', {
            'warehouse_id': str(other_warehouse.id),
        }, format='json')

        assert response.status_code == 200
        buy_invoice.refresh_from_db()
        assert buy_invoice.warehouse_id == other_warehouse.id

    def test_delete_invoice_reverses_every_line(self, admin_client, buy_invoice, feed, maize):
        add_item(admin_client, buy_invoice, feed, 50, 1)
        add_item(admin_client, buy_invoice, maize, 30, 1)

        response = admin_client.delete(f'/api/invoices/{buy_invoice.id}/')

        assert response.status_code == 200
        assert not Invoice.objects.filter(pk=buy_invoice.pk).exists()
        for row in Material.objects.filter(warehouse=buy_invoice.warehouse):
            assert row.purchases == Decimal('0.00')
            assert row.current_balance == Decimal('0.00')


# =============================================================================
# EXPENSES AND TOTALS
# =============================================================================

class TestInvoiceExpenses:

    def test_expenses_drive_net_value(self, admin_client, buy_invoice, feed, transport):
        add_item(admin_client, buy_invoice, feed, 10, 10)
        first = admin_client.post(f'/api/invoices/{buy_invoice.id}/expenses/', {
            'expense_type_id': str(transport.id),
            'amount': '25.00',
            'account_name': 'Cash',
        }, format='json')
        admin_client.post(f'/api/invoices/{buy_invoice.id}/expenses/', {'amount': '5.00'}, format='json')

        buy_invoice.refresh_from_db()
        assert buy_invoice.total_expenses_value == Decimal('30.00')
        assert buy_invoice.net_value == Decimal('130.00')

        admin_client.delete(f"/api/invoices/expenses/{first.data['data']['id']}/")

        buy_invoice.refresh_from_db()
        assert buy_invoice.total_expenses_value == Decimal('5.00')
        assert buy_invoice.net_value == Decimal('105.00')

    def test_update_expense_recomputes(self, admin_client, buy_invoice):
        created = admin_client.post(f'/api/invoices/{buy_invoice.id}/expenses/', {'amount': '40'}, format='json')

        admin_client.patch(f"/api/invoices/expenses/{created.data['data']['id']}/", {'amount': '15'}, format='json')

        buy_invoice.refresh_from_db()
        assert buy_invoice.total_expenses_value == Decimal('15.00')

    def test_expense_on_missing_invoice(self, admin_client):
        response = admin_client.post(
            '/api/invoices/00000000-0000-0000-0000-000000000000/expenses/', {'amount': '1'}, format='json'
        )
        assert response.status_code == 404
        assert response.data['error'] == 'Invoice not found'


# =============================================================================
# ATTACHMENTS
# =============================================================================

class TestInvoiceAttachments:

    def upload(self, client, invoice):
        return client.post(
            f'/api/invoices/{invoice.id}/attachments/',
            {'file': SimpleUploadedFile('receipt.pdf', b'%PDF-1.4 receipt', content_type='application/pdf')},
            format='multipart',
        )

    def test_upload_goes_to_type_folder(self, admin_client, sell_invoice):
        response = self.upload(admin_client, sell_invoice)

        assert response.status_code == 201
        attachment = InvoiceAttachment.objects.get(invoice=sell_invoice)
        assert attachment.file_name == 'receipt.pdf'
        assert '/files/invoices/sell/' in attachment.file_url
        assert len(default_storage.listdir('files/invoices/sell')[1]) == 1

    def test_delete_removes_stored_file(self, admin_client, buy_invoice):
        self.upload(admin_client, buy_invoice)
        attachment = InvoiceAttachment.objects.get(invoice=buy_invoice)

        response = admin_client.delete(f'/api/invoices/attachments/{attachment.id}/')

        assert response.status_code == 200
        assert not InvoiceAttachment.objects.exists()
        assert default_storage.listdir('files/invoices/buy')[1] == []

    def test_failed_insert_removes_uploaded_file(self, admin_client, buy_invoice):
        with mock.patch.object(InvoiceAttachment.objects, 'create', side_effect=DatabaseError('insert failed')):
            response = self.upload(admin_client, buy_invoice)

        assert response.status_code == 400
        assert response.data['success'] is False
        assert default_storage.listdir('files/invoices/buy')[1] == []
