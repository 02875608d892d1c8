"""
Daily Report Integration Tests

SCENARIO:
=========
House A starts with a batch of 1,000 chicks. The farmer files a report with
900 healthy and 20 deformed eggs, 10 eggs given away, 5 dead chicks and 50 kg
of feed, selling 300 eggs and 10 bags of droppings on the same form.

Expected:
- production_eggs 920, egg rate 92.00%, chicks 1000 -> 995
- egg stock: +900 purchases, 10 consumption, 300 sales -> 590
- one EGG-SALE invoice worth 600, one DROP-SALE invoice worth 50
"""

from decimal import Decimal

import pytest

from daily_reports.models import DailyReport
from daily_reports.services import chicks_before_value, egg_rate, monthly_feed
from inventory.models import Material
from invoices.models import Invoice
from medication_management.models import MedicineConsumptionInvoice

pytestmark = pytest.mark.django_db


@pytest.fixture
def report_payload(warehouse, poultry, carton):
    return {
        'warehouse_id': str(warehouse.id),
        'report_date': '2024-05-10',
        'production_eggs_healthy': '900',
        'production_eggs_deformed': '20',
        'eggs_gift': '10',
        'previous_eggs_balance': '100',
        'chicks_dead': 5,
        'feed_daily_kg': '50',
        'egg_sale_invoices': [
            {'items': [{'quantity': '300', 'price': '2', 'unit_id': str(carton.id)}]},
        ],
        'droppings_sale_invoice': {'quantity': '10', 'price': '5'},
    }


def post_report(client, payload):
    return client.post('/api/daily-reports/integrated/', payload, format='json')


class TestIntegratedReport:

    def test_report_figures(self, farmer_client, report_payload):
        response = post_report(farmer_client, report_payload)

        assert response.status_code == 201
        assert response.data['message'] == 'Daily report and invoices created successfully'
        report = DailyReport.objects.get()
        assert report.production_eggs == Decimal('920.00')
        assert report.production_egg_rate == Decimal('92.00')
        assert report.chicks_before == 1000
        assert report.chicks_after == 995
        assert report.current_eggs_balance == Decimal('990.00')
        assert report.feed_monthly_kg == Decimal('50.00')
        assert report.checked is False

    def test_egg_stock_and_sale_invoices(self, farmer_client, report_payload, warehouse):
        post_report(farmer_client, report_payload)

        eggs = Material.objects.get(warehouse=warehouse, material_name__material_name='Eggs')
        assert eggs.purchases == Decimal('900.00')
        assert eggs.consumption == Decimal('10.00')
        assert eggs.sales == Decimal('300.00')
        assert eggs.current_balance == Decimal('590.00')

        egg_sale = Invoice.objects.get(invoice_number__startswith='EGG-SALE-')
        assert egg_sale.invoice_type == Invoice.InvoiceType.SELL
        assert egg_sale.net_value == Decimal('600.00')

        droppings_sale = Invoice.objects.get(invoice_number__startswith='DROP-SALE-')
        assert droppings_sale.net_value == Decimal('50.00')
        droppings = Material.objects.get(warehouse=warehouse, material_name__material_name='Droppings')
        assert droppings.sales == Decimal('10.00')
        assert droppings.current_balance == Decimal('0.00')

    def test_next_report_continues_from_previous(self, farmer_client, report_payload):
        post_report(farmer_client, report_payload)
        report_payload.update({
            'report_date': '2024-05-11',
            'chicks_dead': 3,
            'feed_daily_kg': '40',
            'egg_sale_invoices': [],
            'droppings_sale_invoice': None,
        })

        post_report(farmer_client, report_payload)

        latest = DailyReport.objects.get(report_date='2024-05-11')
        assert latest.chicks_before == 995
        assert latest.chicks_after == 992
        assert latest.feed_monthly_kg == Decimal('90.00')
        assert Invoice.objects.count() == 2

    def test_medicine_consumption_invoice(self, farmer_client, report_payload, vaccine_stock, vaccine):
        report_payload['medicine_consumption_items'] = [
            {'medicine_id': str(vaccine.id), 'quantity': '4', 'price': '12.50'},
        ]

        post_report(farmer_client, report_payload)

        invoice = MedicineConsumptionInvoice.objects.get()
        assert invoice.invoice_number.startswith('MED-CONS-')
        assert invoice.total_value == Decimal('50.00')
        vaccine_stock.refresh_from_db()
        assert vaccine_stock.consumption == Decimal('4.00')
        assert vaccine_stock.current_balance == Decimal('16.00')

    def test_medicine_without_stock_row_is_not_moved(self, farmer_client, report_payload, vaccine, warehouse):
        report_payload['medicine_consumption_items'] = [{'medicine_id': str(vaccine.id), 'quantity': '2'}]

        response = post_report(farmer_client, report_payload)

        assert response.status_code == 201
        assert MedicineConsumptionInvoice.objects.get().items.count() == 1
        assert not Material.objects.filter(warehouse=warehouse, medicine=vaccine).exists()

    def test_other_farm_warehouse_rejected(self, farmer_client, report_payload, other_warehouse):
        report_payload['warehouse_id'] = str(other_warehouse.id)

        response = post_report(farmer_client, report_payload)

        assert response.status_code == 403
        assert response.data['error'] == 'Unauthorized'
        assert not DailyReport.objects.exists()

    def test_missing_default_unit(self, farmer_client, report_payload, carton):
        report_payload['egg_sale_invoices'] = []
        carton.delete()

        response = post_report(farmer_client, report_payload)

        assert response.status_code == 400
        assert response.data['error'] == 'Default measurement unit not found'


class TestReportHelpers:

    def test_egg_rate_without_chicks(self):
        assert egg_rate(Decimal('500'), 0) == Decimal('0.00')

    def test_chicks_before_falls_back_to_batch(self, warehouse, poultry):
        poultry.dead_chicks = 40
        poultry.save()
        assert chicks_before_value(warehouse.id) == 960

    def test_monthly_feed_ignores_other_months(self, warehouse):
        DailyReport.objects.create(warehouse=warehouse, report_date='2024-04-30', feed_daily_kg=Decimal('70'))
        DailyReport.objects.create(warehouse=warehouse, report_date='2024-05-02', feed_daily_kg=Decimal('30'))

        assert monthly_feed(warehouse.id, '2024-05-20', '25') == Decimal('55.00')


class TestDailyReportEndpoints:

    def test_farmer_lists_only_own_reports(self, farmer_client, warehouse, other_warehouse):
        DailyReport.objects.create(warehouse=warehouse, report_date='2024-05-01')
        DailyReport.objects.create(warehouse=other_warehouse, report_date='2024-05-01')

        response = farmer_client.get('/api/daily-reports/', {'warehouse_id': str(other_warehouse.id)})

        assert response.status_code == 200
        assert len(response.data['data']) == 1
        assert response.data['pagination'] == {'page': 1, 'limit': 10, 'total': 1, 'totalPages': 1}

    def test_pagination(self, admin_client, warehouse):
        for day in range(1, 13):
            DailyReport.objects.create(warehouse=warehouse, report_date=f'2024-05-{day:02d}')

        response = admin_client.get('/api/daily-reports/', {'page': 2, 'limit': 5})

        assert [row['report_date'] for row in response.data['data']] == [
            '2024-05-07', '2024-05-06', '2024-05-05', '2024-05-04', '2024-05-03',
        ]
        assert response.data['pagination']['totalPages'] == 3

    def test_farmer_cannot_toggle_or_delete(self, farmer_client, warehouse):
        report = DailyReport.objects.create(warehouse=warehouse, report_date='2024-05-01')

        assert farmer_client.post(f'/api/daily-reports/{report.id}/toggle-status/').status_code == 403
        assert farmer_client.delete(f'/api/daily-reports/{report.id}/').status_code == 403
        assert DailyReport.objects.filter(pk=report.pk).exists()

    def test_admin_toggles_status(self, admin_client, warehouse):
        report = DailyReport.objects.create(warehouse=warehouse, report_date='2024-05-01')

        response = admin_client.post(f'/api/daily-reports/{report.id}/toggle-status/')

        assert response.data['data']['checked'] is True

    def test_farmer_cannot_read_other_farm_report(self, farmer_client, other_warehouse):
        report = DailyReport.objects.create(warehouse=other_warehouse, report_date='2024-05-01')

        response = farmer_client.get(f'/api/daily-reports/{report.id}/')

        assert response.status_code == 404

    def test_monthly_feed_preview(self, farmer_client, warehouse):
        DailyReport.objects.create(warehouse=warehouse, report_date='2024-05-02', feed_daily_kg=Decimal('30'))

        response = farmer_client.get('/api/daily-reports/monthly-feed/', {
            'warehouse_id': str(warehouse.id), 'report_date': '2024-05-03', 'daily_feed': '12.5',
        })

        assert Decimal(response.data['data']) == Decimal('42.50')

    def test_monthly_feed_preview_with_impossible_date(self, farmer_client, warehouse):
        response = farmer_client.get('/api/daily-reports/monthly-feed/', {
            'warehouse_id': str(warehouse.id), 'report_date': '2024-02-30', 'daily_feed': '10',
        })

        assert response.status_code == 400
        assert response.data['error'] == 'Invalid date'

    def test_chicks_before_for_other_farm(self, farmer_client, other_warehouse):
        response = farmer_client.get('/api/daily-reports/chicks-before/', {'warehouse_id': str(other_warehouse.id)})
        assert response.status_code == 403

    def test_warehouse_medicines(self, farmer_client, vaccine_stock):
        response = farmer_client.get('/api/daily-reports/medicines/', {'warehouse_id': str(vaccine_stock.warehouse_id)})

        assert response.data['data'][0]['medicine']['name'] == 'Newcastle Vaccine'
