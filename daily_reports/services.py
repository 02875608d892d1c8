"""
Daily report services.

create_integrated_daily_report files the farmer's daily report together with
everything it implies, in one transaction:

    1. derived figures (chicks_before, feed_monthly_kg, egg rate, balances)
    2. egg stock: healthy eggs as purchases, gifts as consumption
    3. egg sale invoices        EGG-SALE-{millis}
    4. droppings sale invoice   DROP-SALE-{millis}
    5. medicine consumption     MED-CONS-{millis}

Stock movements here go through StockLedger.record, which clamps balances at
zero instead of rejecting the report.
"""

import logging
import math
import time
from calendar import monthrange
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils.dateparse import parse_date

from catalog.models import MaterialName, MeasurementUnit
from core.actions import ActionError, ActionResult, Forbidden, NotFound, action, get_or_404
from core.attachments import AttachmentService
from core.cache import revalidate_path
from core.storage import DAILY_REPORTS_FOLDER
from farms.models import PoultryStatus, Warehouse
from inventory.models import Material
from inventory.services import StockLedger, revalidate_stock_pages
from invoices.models import Invoice, InvoiceItem
from invoices.services import InvoiceTotals
from medication_management.models import MedicineConsumptionInvoice, MedicineConsumptionItem
from medication_management.services import MedicineInvoiceTotals

from .models import DailyReport, DailyReportAttachment

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

REPORT_FIELDS = (
    'report_date', 'report_time',
    'production_eggs_healthy', 'production_eggs_deformed', 'production_eggs', 'production_egg_rate',
    'eggs_sold', 'eggs_gift', 'previous_eggs_balance', 'current_eggs_balance', 'carton_consumption',
    'chicks_before', 'chicks_dead', 'chicks_after',
    'feed_daily_kg', 'feed_monthly_kg', 'feed_ratio', 'production_droppings',
    'notes', 'checked',
)


def daily_report_paths(report_id=None):
    paths = ['/farmer/daily-report', '/farmer/reports', '/admin/reports', '/admin/daily-reports']
    if report_id:
        paths.append(f'/admin/daily-reports/{report_id}')
    return paths


def document_number(prefix, model):
    """`{prefix}-{epoch millis}`, bumped until unused for the model."""
    millis = int(time.time() * 1000)
    while model.objects.filter(invoice_number=f'{prefix}-{millis}').exists():
        millis += 1
    return f'{prefix}-{millis}'


def _decimal(value):
    return Decimal(str(value or 0))


def _as_date(value):
    if hasattr(value, 'year'):
        return value
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ActionError('Invalid date')
    return parsed


# =============================================================================
# DERIVED FIGURES
# =============================================================================

def chicks_before_value(warehouse_id):
    """
    The batch's remaining chicks on the warehouse's first report, otherwise
    the latest report's chicks_after.
    """
    if not warehouse_id:
        return 0
    last_report = (
        DailyReport.objects.filter(warehouse_id=warehouse_id)
        .order_by('-report_date', '-report_time', '-created_at')
        .first()
    )
    if last_report is not None:
        return last_report.chicks_after or 0

    batch = PoultryStatus.objects.filter(farm__warehouse__id=warehouse_id).first()
    return batch.remaining_chicks if batch else 0


def monthly_feed(warehouse_id, report_date, daily_feed):
    """Month-to-date feed of the warehouse plus today's daily feed."""
    daily_feed = _decimal(daily_feed)
    report_date = _as_date(report_date) if report_date else None
    if not warehouse_id or report_date is None:
        return daily_feed

    first_day = report_date.replace(day=1)
    last_day = report_date.replace(day=monthrange(report_date.year, report_date.month)[1])
    previous = DailyReport.objects.filter(
        warehouse_id=warehouse_id, report_date__range=(first_day, last_day)
    ).aggregate(total=Sum('feed_daily_kg'))['total'] or ZERO
    return previous + daily_feed


def egg_rate(production_eggs, chicks_before):
    if not chicks_before:
        return ZERO
    rate = Decimal(production_eggs) / Decimal(chicks_before) * 100
    return rate.quantize(Decimal('0.01'))


def compute_report_figures(data, chicks_before, feed_monthly_kg):
    healthy = _decimal(data.get('production_eggs_healthy'))
    deformed = _decimal(data.get('production_eggs_deformed'))
    production_eggs = healthy + deformed
    chicks_dead = int(data.get('chicks_dead') or 0)
    return {
        'production_eggs': production_eggs,
        'production_egg_rate': egg_rate(production_eggs, chicks_before),
        'current_eggs_balance': (
            _decimal(data.get('previous_eggs_balance')) + healthy
            - _decimal(data.get('eggs_sold')) - _decimal(data.get('eggs_gift'))
        ),
        'chicks_before': chicks_before,
        'chicks_after': chicks_before - chicks_dead,
        'feed_monthly_kg': feed_monthly_kg,
    }


def stock_material(warehouse_id, material_name, unit_id):
    """Fetch or create the named material and its stock row in the warehouse."""
    name, _ = MaterialName.objects.get_or_create(material_name=material_name)
    if not Material.objects.filter(warehouse_id=warehouse_id, material_name=name).exists():
        Material.objects.create(warehouse_id=warehouse_id, material_name=name, unit_id=unit_id)
    return name


def _sale_invoice(prefix, data, client_id):
    return Invoice.objects.create(
        invoice_type=Invoice.InvoiceType.SELL,
        invoice_number=document_number(prefix, Invoice),
        invoice_date=data['report_date'],
        invoice_time=data.get('report_time'),
        warehouse_id=data['warehouse_id'],
        client_id=client_id or None,
    )


class DailyReportService:

    # =========================================================================
    # INTEGRATED REPORT
    # =========================================================================

    @staticmethod
    @action('Failed to create daily report')
    def create_integrated_daily_report(user, data):
        warehouse_id = data.get('warehouse_id')
        if not warehouse_id or not data.get('report_date'):
            raise ActionError('Warehouse and report date are required')
        if user.is_farmer and not Warehouse.objects.filter(pk=warehouse_id, farm__user=user).exists():
            raise Forbidden('Unauthorized')

        egg_unit = MeasurementUnit.objects.filter(unit_name=settings.EGG_DEFAULT_UNIT_NAME).first()
        if egg_unit is None:
            raise ActionError('Default measurement unit not found')

        with transaction.atomic():
            chicks_before = chicks_before_value(warehouse_id)
            feed_monthly_kg = monthly_feed(warehouse_id, data['report_date'], data.get('feed_daily_kg'))
            figures = compute_report_figures(data, chicks_before, feed_monthly_kg)

            eggs = stock_material(warehouse_id, settings.EGG_MATERIAL_NAME, egg_unit.id)
            healthy = _decimal(data.get('production_eggs_healthy'))
            gifts = _decimal(data.get('eggs_gift'))
            if healthy > 0:
                StockLedger.record(warehouse_id, material_name_id=eggs.id, purchases=healthy)
            if gifts > 0:
                StockLedger.record(warehouse_id, material_name_id=eggs.id, consumption=gifts)

            report = DailyReport.objects.create(
                warehouse_id=warehouse_id,
                report_date=data['report_date'],
                report_time=data.get('report_time'),
                production_eggs_healthy=healthy,
                production_eggs_deformed=_decimal(data.get('production_eggs_deformed')),
                eggs_sold=_decimal(data.get('eggs_sold')),
                eggs_gift=gifts,
                previous_eggs_balance=_decimal(data.get('previous_eggs_balance')),
                carton_consumption=_decimal(data.get('carton_consumption')),
                chicks_dead=int(data.get('chicks_dead') or 0),
                feed_daily_kg=_decimal(data.get('feed_daily_kg')),
                feed_ratio=_decimal(data.get('feed_ratio')),
                production_droppings=_decimal(data.get('production_droppings')),
                notes=data.get('notes') or None,
                checked=False,
                **figures,
            )

            for sale in data.get('egg_sale_invoices') or []:
                DailyReportService._egg_sale(data, eggs, sale)

            droppings = data.get('droppings_sale_invoice')
            if droppings and _decimal(droppings.get('quantity')) > 0:
                DailyReportService._droppings_sale(data, droppings)

            medicines = data.get('medicine_consumption_items') or []
            if medicines:
                DailyReportService._medicine_consumption(data, medicines)

        logger.info(
            f"Daily report {report.report_date} filed for warehouse {warehouse_id} by {user.email}: "
            f"{figures['production_eggs']} eggs, {report.chicks_dead} dead"
        )
        revalidate_path(*daily_report_paths(), '/admin/invoices', '/admin/medicines-invoices')
        revalidate_stock_pages()
        return ActionResult.ok(report, message='Daily report and invoices created successfully')

    @staticmethod
    def _egg_sale(data, eggs, sale):
        invoice = _sale_invoice('EGG-SALE', data, sale.get('client_id'))
        for line in sale.get('items') or []:
            quantity = _decimal(line.get('quantity'))
            InvoiceItem.objects.create(
                invoice=invoice,
                material_name=eggs,
                unit_id=line.get('unit_id') or None,
                egg_weight_id=line.get('egg_weight_id') or None,
                quantity=quantity,
                price=_decimal(line.get('price')),
            )
            StockLedger.record(data['warehouse_id'], material_name_id=eggs.id, sales=quantity)
        InvoiceTotals.recompute(invoice.pk)
        logger.info(f"Egg sale invoice {invoice.invoice_number} created from daily report")

    @staticmethod
    def _droppings_sale(data, droppings):
        unit_id = droppings.get('unit_id') or None
        material = stock_material(data['warehouse_id'], settings.DROPPINGS_MATERIAL_NAME, unit_id)
        quantity = _decimal(droppings.get('quantity'))

        invoice = _sale_invoice('DROP-SALE', data, droppings.get('client_id'))
        InvoiceItem.objects.create(
            invoice=invoice,
            material_name=material,
            unit_id=unit_id,
            quantity=quantity,
            price=_decimal(droppings.get('price')),
        )
        StockLedger.record(data['warehouse_id'], material_name_id=material.id, sales=quantity)
        InvoiceTotals.recompute(invoice.pk)
        logger.info(f"Droppings sale invoice {invoice.invoice_number} created from daily report")

    @staticmethod
    def _medicine_consumption(data, medicines):
        invoice = MedicineConsumptionInvoice.objects.create(
            invoice_number=document_number('MED-CONS', MedicineConsumptionInvoice),
            invoice_date=data['report_date'],
            invoice_time=data.get('report_time'),
            warehouse_id=data['warehouse_id'],
            poultry_status_id=data.get('poultry_status_id') or None,
            notes=data.get('notes') or None,
        )
        for line in medicines:
            quantity = _decimal(line.get('quantity'))
            MedicineConsumptionItem.objects.create(
                consumption_invoice=invoice,
                medicine_id=line['medicine_id'],
                unit_id=line.get('unit_id') or None,
                administration_date=data['report_date'],
                quantity=quantity,
                price=_decimal(line.get('price')),
            )
            row = StockLedger.get_row(data['warehouse_id'], medicine_id=line['medicine_id'])
            if row is None:
                logger.warning(f"Medicine {line['medicine_id']} has no stock row in warehouse {data['warehouse_id']}")
                continue
            StockLedger.record(data['warehouse_id'], medicine_id=line['medicine_id'], consumption=quantity)
        MedicineInvoiceTotals.recompute(invoice.pk)
        logger.info(f"Medicine consumption invoice {invoice.invoice_number} created from daily report")

    # =========================================================================
    # SUPPORTING READS
    # =========================================================================

    @staticmethod
    @action('Failed to calculate monthly feed')
    def monthly_feed_preview(warehouse_id, report_date, daily_feed):
        return monthly_feed(warehouse_id, report_date, daily_feed)

    @staticmethod
    @action('Failed to get chicks count')
    def chicks_before_for_new_report(user, warehouse_id):
        if not warehouse_id:
            return 0
        warehouse = Warehouse.objects.select_related('farm').filter(pk=warehouse_id).first()
        if warehouse is None:
            raise NotFound('Warehouse not found')
        if warehouse.farm.user_id != user.id:
            raise Forbidden('Unauthorized')
        return chicks_before_value(warehouse_id)

    @staticmethod
    @action('Failed to get available quantity')
    def available_medicine_quantity(warehouse_id, medicine_id):
        row = StockLedger.get_row(warehouse_id, medicine_id=medicine_id, lock=False) if medicine_id else None
        return row.current_balance if row else ZERO

    @staticmethod
    @action('Failed to get medicines')
    def warehouse_medicines(warehouse_id):
        rows = (
            Material.objects.select_related('medicine')
            .filter(warehouse_id=warehouse_id, medicine__isnull=False, current_balance__gt=0)
            .order_by('medicine__name')
        )
        return [
            {
                'id': row.id,
                'medicine_id': row.medicine_id,
                'current_balance': row.current_balance,
                'medicine': {
                    'id': row.medicine_id,
                    'name': row.medicine.name,
                    'day_of_age': row.medicine.day_of_age,
                },
            }
            for row in rows
        ]

    # =========================================================================
    # CRUD
    # =========================================================================

    @staticmethod
    @action('Failed to create daily report')
    def create_daily_report(user, data):
        warehouse_id = data.get('warehouse_id')
        if not warehouse_id or not data.get('report_date'):
            raise ActionError('Warehouse and report date are required')
        if user.is_farmer and not Warehouse.objects.filter(pk=warehouse_id, farm__user=user).exists():
            raise Forbidden('Unauthorized')

        report = DailyReport.objects.create(
            warehouse_id=warehouse_id,
            **{field: data[field] for field in REPORT_FIELDS if field in data},
        )
        revalidate_path(*daily_report_paths())
        return ActionResult.ok(report)

    @staticmethod
    @action('Failed to get daily reports')
    def list_daily_reports(warehouse_id=None, page=1, limit=10):
        page = max(1, int(page or 1))
        limit = max(1, int(limit or 10))

        reports = DailyReport.objects.select_related('warehouse__farm').order_by('-report_date', '-report_time')
        if warehouse_id:
            reports = reports.filter(warehouse_id=warehouse_id)

        total = reports.count()
        offset = (page - 1) * limit
        return ActionResult.ok(
            list(reports[offset:offset + limit]),
            pagination={
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit),
            },
        )

    @staticmethod
    @action('Failed to get daily report')
    def get_daily_report(report_id):
        return get_or_404(DailyReport, 'Daily report not found', pk=report_id)

    @staticmethod
    @action('Failed to update daily report')
    def update_daily_report(report_id, data):
        report = get_or_404(DailyReport, 'Daily report not found', pk=report_id)
        for field in REPORT_FIELDS:
            if field in data:
                setattr(report, field, data[field])
        report.save()
        revalidate_path(*daily_report_paths(report.pk))
        return ActionResult.ok(report)

    @staticmethod
    @action('Failed to update daily report status')
    def toggle_daily_report_status(user, report_id):
        if user.is_farmer:
            raise Forbidden('Unauthorized')
        report = get_or_404(DailyReport, 'Daily report not found', pk=report_id)
        report.checked = not report.checked
        report.save(update_fields=['checked', 'updated_at'])
        revalidate_path(*daily_report_paths(report.pk))
        return ActionResult.ok(report)

    @staticmethod
    @action('Failed to delete daily report')
    def delete_daily_report(user, report_id):
        if user.is_farmer:
            raise Forbidden('Unauthorized')
        report = get_or_404(DailyReport, 'Daily report not found', pk=report_id)
        report.delete()
        logger.info(f"Daily report {report_id} deleted by {user.email}")
        revalidate_path(*daily_report_paths(report_id))
        return ActionResult.ok()


class DailyReportAttachmentService(AttachmentService):
    model = DailyReportAttachment
    parent_model = DailyReport
    parent_field = 'daily_report'
    folder = DAILY_REPORTS_FOLDER
    parent_label = 'Daily report'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return daily_report_paths(parent_id)
