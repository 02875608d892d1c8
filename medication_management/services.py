"""
Medication management services.

Medicine consumption invoices draw medicine stock from a warehouse through
the StockLedger; their total_value is the sum of item values plus expense
amounts. MedicationAlertService turns the catalog's medicine schedule
(day_of_age) into dated alerts for each poultry batch.
"""

import logging
from datetime import date, timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from catalog.models import Medicine
from core.actions import ActionError, ActionResult, Forbidden, NotFound, action, get_or_404
from core.attachments import AttachmentService
from core.cache import cached_page, revalidate_path
from core.storage import MEDICINE_CONSUMPTION_FOLDER
from core.totals import DerivedTotals, ExpenseService, to_amount
from farms.access import get_farmer_farm, require_farmer_warehouse
from farms.models import Farm, PoultryStatus, Warehouse
from inventory.services import StockLedger, revalidate_stock_pages

from .models import (
    MedicationAlert,
    MedicineConsumptionAttachment,
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
    MedicineConsumptionItem,
)

logger = logging.getLogger(__name__)

MEDICINE_INVOICES_PATH = '/admin/medicines-invoices'
FARMER_MEDICINE_INVOICES_PATH = '/farmer/medicine-invoices'
ALERTS_PATH = '/admin/medication-alerts'
ALERTS_SUMMARY_PATH = '/admin/medication-alerts/summary'


def medicine_invoice_paths(invoice_id=None):
    paths = [MEDICINE_INVOICES_PATH, FARMER_MEDICINE_INVOICES_PATH]
    if invoice_id:
        paths.append(f'{MEDICINE_INVOICES_PATH}/{invoice_id}')
        paths.append(f'{FARMER_MEDICINE_INVOICES_PATH}/{invoice_id}')
    return paths


def alert_paths():
    return ('/farmer', '/admin/farms', ALERTS_PATH, ALERTS_SUMMARY_PATH)


class MedicineInvoiceTotals(DerivedTotals):
    parent_model = MedicineConsumptionInvoice
    total_fields = ('total_value',)

    @classmethod
    def assign(cls, parent, items_total, expenses_total):
        parent.total_value = items_total + expenses_total


def consume_item(invoice, medicine_id, quantity, price=0, unit_id=None,
                 administration_day=None, administration_date=None):
    """Consume the medicine's stock in the invoice's warehouse and store the line."""
    if not medicine_id:
        raise ActionError('Medicine is required')
    item = MedicineConsumptionItem(
        consumption_invoice=invoice,
        medicine_id=medicine_id,
        unit_id=unit_id or None,
        administration_day=administration_day,
        administration_date=administration_date,
        quantity=to_amount(quantity, 'Quantity'),
        price=to_amount(price or 0, 'Price'),
    )
    StockLedger.consume(invoice.warehouse_id, item.quantity, medicine_id=medicine_id)
    item.save()
    return item


def _invoice_number(value, exclude_id=None):
    number = (value or '').strip()
    if not number:
        raise ActionError('Missing required fields')
    duplicates = MedicineConsumptionInvoice.objects.filter(invoice_number=number)
    if exclude_id:
        duplicates = duplicates.exclude(pk=exclude_id)
    if duplicates.exists():
        raise ActionError('Invoice number already exists')
    return number


class MedicineInvoiceService:

    @staticmethod
    def _queryset():
        return MedicineConsumptionInvoice.objects.select_related(
            'warehouse__farm', 'poultry_status'
        ).order_by('-invoice_date', '-created_at')

    @staticmethod
    @action('Failed to get medicine invoices')
    def list():
        return list(MedicineInvoiceService._queryset())

    @staticmethod
    @action('Failed to get medicine invoice')
    def get(invoice_id):
        return get_or_404(MedicineConsumptionInvoice, 'Invoice not found', pk=invoice_id)

    @staticmethod
    @action('Failed to create medicine invoice')
    def create(invoice_number, invoice_date, warehouse_id, invoice_time=None,
               poultry_status_id=None, notes=None):
        if not invoice_date or not warehouse_id:
            raise ActionError('Missing required fields')
        invoice = MedicineConsumptionInvoice.objects.create(
            invoice_number=_invoice_number(invoice_number),
            invoice_date=invoice_date,
            invoice_time=invoice_time,
            warehouse_id=warehouse_id,
            poultry_status_id=poultry_status_id or None,
            notes=(notes or '').strip() or None,
        )
        logger.info(f"Medicine invoice {invoice.invoice_number} created")
        revalidate_path(*medicine_invoice_paths())
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to update medicine invoice')
    def update(invoice_id, invoice_number, invoice_date, warehouse_id, invoice_time=None,
               poultry_status_id=None, notes=None):
        if not invoice_id or not invoice_date or not warehouse_id:
            raise ActionError('Missing required fields')
        invoice = get_or_404(MedicineConsumptionInvoice, 'Invoice not found', pk=invoice_id)

        invoice.invoice_number = _invoice_number(invoice_number, exclude_id=invoice.pk)
        invoice.invoice_date = invoice_date
        invoice.invoice_time = invoice_time
        invoice.warehouse_id = warehouse_id
        invoice.poultry_status_id = poultry_status_id or None
        invoice.notes = (notes or '').strip() or None
        invoice.save()

        revalidate_path(*medicine_invoice_paths(invoice.pk))
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to delete medicine invoice')
    def delete(invoice_id):
        invoice = get_or_404(MedicineConsumptionInvoice, 'Invoice not found', pk=invoice_id)

        with transaction.atomic():
            if invoice.warehouse_id:
                for item in invoice.items.filter(medicine__isnull=False):
                    StockLedger.reverse_consumption(invoice.warehouse_id, item.quantity, medicine_id=item.medicine_id)
            invoice.delete()

        logger.info(f"Medicine invoice {invoice.invoice_number} deleted with stock reversed")
        revalidate_path(*medicine_invoice_paths(invoice_id))
        revalidate_stock_pages()
        return ActionResult.ok()

    # Farmer variants ---------------------------------------------------------

    @staticmethod
    @action('Failed to get medicine invoices')
    def farmer_list(user):
        farm = get_farmer_farm(user)
        return list(MedicineInvoiceService._queryset().filter(warehouse__farm=farm))

    @staticmethod
    @action('Failed to get medicine invoice')
    def farmer_get(user, invoice_id):
        farm = get_farmer_farm(user)
        invoice = get_or_404(MedicineConsumptionInvoice, 'Medicine invoice not found', pk=invoice_id)
        if invoice.warehouse is None or invoice.warehouse.farm_id != farm.id:
            raise Forbidden('Unauthorized - Invoice does not belong to your farm')
        return invoice

    @staticmethod
    @action('Failed to create medicine invoice')
    def farmer_create(user, invoice_number, invoice_date, warehouse_id, invoice_time=None,
                      poultry_status_id=None, notes=None, items=None, expenses=None):
        """
        Create the invoice with its lines in one transaction. Any rejected
        item (unknown medicine, insufficient stock) rolls the whole invoice back.
        """
        if not Warehouse.objects.filter(farm__user=user).exists():
            raise ActionError('No warehouses found for your farm')
        require_farmer_warehouse(user, warehouse_id, 'Unauthorized - Warehouse does not belong to your farm')
        if not invoice_date:
            raise ActionError('Missing required fields')

        with transaction.atomic():
            invoice = MedicineConsumptionInvoice.objects.create(
                invoice_number=_invoice_number(invoice_number),
                invoice_date=invoice_date,
                invoice_time=invoice_time,
                warehouse_id=warehouse_id,
                poultry_status_id=poultry_status_id or None,
                notes=(notes or '').strip() or None,
            )
            for line in items or []:
                consume_item(invoice, **line)
            for line in expenses or []:
                MedicineConsumptionExpense.objects.create(
                    consumption_invoice=invoice,
                    expense_type_id=line.get('expense_type_id') or None,
                    amount=to_amount(line.get('amount') or 0),
                    account_name=(line.get('account_name') or '').strip() or None,
                )
            invoice = MedicineInvoiceTotals.recompute(invoice.pk)

        logger.info(f"Medicine invoice {invoice.invoice_number} created by farmer {user.email}")
        revalidate_path(*medicine_invoice_paths())
        revalidate_stock_pages()
        return ActionResult.ok(invoice)


class MedicineItemService:

    @staticmethod
    @action('Failed to get medicine items')
    def list(invoice_id):
        return list(
            MedicineConsumptionItem.objects.select_related('medicine', 'unit')
            .filter(consumption_invoice_id=invoice_id)
            .order_by('created_at')
        )

    @staticmethod
    @action('Failed to create medicine item')
    def create(invoice_id, medicine_id, quantity, price=0, unit_id=None,
               administration_day=None, administration_date=None):
        invoice = MedicineConsumptionInvoice.objects.filter(pk=invoice_id).first()
        if invoice is None or not invoice.warehouse_id:
            raise ActionError('Invoice or warehouse not found')

        with transaction.atomic():
            item = consume_item(
                invoice, medicine_id, quantity, price, unit_id=unit_id,
                administration_day=administration_day, administration_date=administration_date,
            )
            MedicineInvoiceTotals.recompute(invoice.pk)

        revalidate_path(*medicine_invoice_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok(item)

    @staticmethod
    @action('Failed to delete medicine item')
    def delete(item_id):
        item = get_or_404(MedicineConsumptionItem, 'Item not found', pk=item_id)
        invoice = item.consumption_invoice

        with transaction.atomic():
            if invoice.warehouse_id and item.medicine_id:
                StockLedger.reverse_consumption(invoice.warehouse_id, item.quantity, medicine_id=item.medicine_id)
            item.delete()
            MedicineInvoiceTotals.recompute(invoice.pk)

        revalidate_path(*medicine_invoice_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok()


class MedicineExpenseService(ExpenseService):
    model = MedicineConsumptionExpense
    parent_field = 'consumption_invoice'
    totals = MedicineInvoiceTotals
    parent_label = 'Medicine invoice'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return medicine_invoice_paths(parent_id)


class MedicineAttachmentService(AttachmentService):
    model = MedicineConsumptionAttachment
    parent_model = MedicineConsumptionInvoice
    parent_field = 'consumption_invoice'
    folder = MEDICINE_CONSUMPTION_FOLDER
    parent_label = 'Medicine invoice'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return medicine_invoice_paths(parent_id)


# =============================================================================
# ALERTS
# =============================================================================

PRIORITY_ORDER = {
    'overdue': 1,
    'today': 2,
    'tomorrow': 3,
    'normal': 4,
    'not_urgent': 5,
}


def as_date(value):
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(str(value)) if value else None
    except ValueError:
        # Well formed but impossible, e.g. 2024-02-30
        parsed = None
    if parsed is None:
        raise ActionError('Invalid date')
    return parsed


def days_until(scheduled_date, today=None):
    return (scheduled_date - (today or timezone.localdate())).days


def alert_priority(days, days_ahead):
    if days < 0:
        return 'overdue'
    if days == 0:
        return 'today'
    if days == 1:
        return 'tomorrow'
    if days <= days_ahead:
        return 'normal'
    return 'not_urgent'


def short_priority(days):
    """Priority without the days_ahead window; doubles as urgency level 1-4."""
    if days < 0:
        return 'overdue', 1
    if days == 0:
        return 'today', 2
    if days == 1:
        return 'tomorrow', 3
    return 'upcoming', 4


class MedicationAlertService:

    @staticmethod
    @action('Failed to calculate chick age')
    def calculate_chick_age(birth_date, reference_date=None):
        reference = as_date(reference_date) if reference_date else timezone.localdate()
        return max(0, (reference - as_date(birth_date)).days)

    @staticmethod
    @action('Failed to create medication alerts')
    def create_alerts_for_poultry(poultry_status_id, chick_birth_date):
        """
        Schedule one alert per medicine with a day_of_age.

        Pending alerts of the batch are replaced; administered ones stay and
        their medicines are not scheduled again.
        """
        poultry_status = get_or_404(PoultryStatus, 'Poultry status not found', pk=poultry_status_id)
        birth_date = as_date(chick_birth_date)
        lead_days = settings.MEDICATION_ALERT_LEAD_DAYS

        with transaction.atomic():
            existing = MedicationAlert.objects.filter(poultry_status=poultry_status)
            existing.filter(is_administered=False).delete()
            administered = set(existing.filter(is_administered=True).values_list('medicine_id', flat=True))

            alerts = []
            for medicine in Medicine.objects.filter(day_of_age__isnull=False).exclude(pk__in=administered):
                scheduled_date = birth_date + timedelta(days=medicine.day_of_age)
                alerts.append(MedicationAlert(
                    farm_id=poultry_status.farm_id,
                    poultry_status=poultry_status,
                    medicine=medicine,
                    scheduled_day=medicine.day_of_age,
                    scheduled_date=scheduled_date,
                    alert_date=scheduled_date - timedelta(days=lead_days),
                ))
            MedicationAlert.objects.bulk_create(alerts)

        logger.info(f"Created {len(alerts)} medication alerts for batch {poultry_status.batch_name}")
        revalidate_path(*alert_paths())
        return ActionResult.ok(len(alerts))

    @staticmethod
    @action('Failed to get active alerts')
    def active_alerts_for_farm(farm_id, days_ahead=None):
        days_ahead = settings.MEDICATION_ALERT_DAYS_AHEAD if days_ahead is None else int(days_ahead)
        today = timezone.localdate()
        alerts = (
            MedicationAlert.objects.select_related('medicine')
            .filter(farm_id=farm_id, is_administered=False, alert_date__lte=today + timedelta(days=days_ahead))
            .order_by('scheduled_date')
        )

        rows = []
        for alert in alerts:
            days = days_until(alert.scheduled_date, today)
            rows.append({
                'alert_id': alert.id,
                'medicine_id': alert.medicine_id,
                'medicine_name': alert.medicine.name,
                'medicine_description': alert.medicine.description or '',
                'scheduled_day': alert.scheduled_day,
                'scheduled_date': alert.scheduled_date,
                'alert_date': alert.alert_date,
                'is_administered': alert.is_administered,
                'days_until_scheduled': days,
                'is_overdue': days < 0,
                'priority': alert_priority(days, days_ahead),
                'notes': alert.notes or '',
            })
        rows.sort(key=lambda row: PRIORITY_ORDER[row['priority']])
        return rows

    @staticmethod
    @action('Failed to get upcoming alerts')
    def upcoming_alerts_for_user(user):
        """Every overdue, today and tomorrow alert of the user's farms, then the next upcoming one."""
        today = timezone.localdate()
        alerts = (
            MedicationAlert.objects.select_related('farm', 'medicine')
            .filter(farm__user=user, is_administered=False)
            .order_by('scheduled_date')
        )

        groups = {'overdue': [], 'today': [], 'tomorrow': [], 'upcoming': []}
        for alert in alerts:
            days = days_until(alert.scheduled_date, today)
            priority, urgency = short_priority(days)
            groups[priority].append({
                'alert_id': alert.id,
                'farm_id': alert.farm_id,
                'farm_name': alert.farm.name,
                'medicine_name': alert.medicine.name,
                'scheduled_date': alert.scheduled_date,
                'days_until': days,
                'priority': priority,
                'urgency_level': urgency,
            })

        groups['overdue'].sort(key=lambda row: row['days_until'])
        return groups['overdue'] + groups['today'] + groups['tomorrow'] + groups['upcoming'][:1]

    @staticmethod
    @action('Failed to update alert')
    def mark_alert_administered(alert_id, notes=None):
        changes = {'is_administered': True, 'administered_at': timezone.now(), 'updated_at': timezone.now()}
        if notes is not None:
            changes['notes'] = notes
        updated = MedicationAlert.objects.filter(pk=alert_id, is_administered=False).update(**changes)
        if not updated:
            raise NotFound('Alert not found or already administered')

        logger.info(f"Medication alert {alert_id} marked as administered")
        revalidate_path(*alert_paths())
        return ActionResult.ok()

    @staticmethod
    @action('Failed to update alert')
    def unmark_alert_administered(alert_id):
        updated = MedicationAlert.objects.filter(pk=alert_id).update(
            is_administered=False, administered_at=None, updated_at=timezone.now()
        )
        if not updated:
            raise NotFound('Alert not found')

        logger.info(f"Medication alert {alert_id} unmarked")
        revalidate_path(*alert_paths())
        return ActionResult.ok()

    @staticmethod
    def _build_summary():
        today = timezone.localdate()
        tomorrow = today + timedelta(days=1)
        pending = Q(medication_alerts__is_administered=False)

        farms = (
            Farm.objects.filter(medication_alerts__isnull=False)
            .select_related('poultry_status')
            .annotate(
                total_alerts=Count('medication_alerts', distinct=True),
                completed_alerts=Count(
                    'medication_alerts', filter=Q(medication_alerts__is_administered=True), distinct=True
                ),
                pending_alerts=Count('medication_alerts', filter=pending, distinct=True),
                overdue_alerts=Count(
                    'medication_alerts', filter=pending & Q(medication_alerts__scheduled_date__lt=today), distinct=True
                ),
                today_alerts=Count(
                    'medication_alerts', filter=pending & Q(medication_alerts__scheduled_date=today), distinct=True
                ),
                tomorrow_alerts=Count(
                    'medication_alerts', filter=pending & Q(medication_alerts__scheduled_date=tomorrow), distinct=True
                ),
            )
            .distinct()
        )

        rows = []
        for farm in farms:
            batch = getattr(farm, 'poultry_status', None)
            birth_date = batch.chick_birth_date if batch else None
            rows.append({
                'farm_id': str(farm.id),
                'farm_name': farm.name,
                'chick_birth_date': birth_date.isoformat() if birth_date else None,
                'current_chick_age': max(0, (today - birth_date).days) if birth_date else 0,
                'total_alerts': farm.total_alerts,
                'completed_alerts': farm.completed_alerts,
                'pending_alerts': farm.pending_alerts,
                'overdue_alerts': farm.overdue_alerts,
                'today_alerts': farm.today_alerts,
                'tomorrow_alerts': farm.tomorrow_alerts,
            })
        rows.sort(key=lambda row: (-row['overdue_alerts'], -row['today_alerts']))
        return rows

    @staticmethod
    @action('Failed to get alerts summary')
    def alerts_summary():
        return cached_page(ALERTS_SUMMARY_PATH, MedicationAlertService._build_summary)

    @staticmethod
    @action('Failed to get farm alert stats')
    def farm_alert_stats(farm_id):
        today = timezone.localdate()
        tomorrow = today + timedelta(days=1)
        pending = Q(is_administered=False)
        return MedicationAlert.objects.filter(farm_id=farm_id).aggregate(
            total=Count('id'),
            completed=Count('id', filter=Q(is_administered=True)),
            pending=Count('id', filter=pending),
            overdue=Count('id', filter=pending & Q(scheduled_date__lt=today)),
            today=Count('id', filter=pending & Q(scheduled_date=today)),
            tomorrow=Count('id', filter=pending & Q(scheduled_date=tomorrow)),
        )

    @staticmethod
    @action('Failed to get alerts')
    def all_alerts_for_farm(farm_id):
        return list(
            MedicationAlert.objects.select_related('medicine')
            .filter(farm_id=farm_id)
            .order_by('scheduled_date')
        )

    @staticmethod
    @action('Failed to get alert')
    def get_alert(alert_id):
        return get_or_404(MedicationAlert, 'Alert not found', pk=alert_id)

    @staticmethod
    @action('Failed to update alert notes')
    def update_alert_notes(alert_id, notes):
        alert = get_or_404(MedicationAlert, 'Alert not found', pk=alert_id)
        alert.notes = notes
        alert.save(update_fields=['notes', 'updated_at'])
        revalidate_path(*alert_paths())
        return ActionResult.ok(alert)

    @staticmethod
    @action('Failed to get alerts')
    def all_alerts_for_admin(farm_id=None):
        today = timezone.localdate()
        alerts = MedicationAlert.objects.select_related('farm', 'medicine').order_by('-scheduled_date')
        if farm_id:
            alerts = alerts.filter(farm_id=farm_id)

        rows = []
        for alert in alerts:
            days = days_until(alert.scheduled_date, today)
            rows.append({
                'id': alert.id,
                'farm_id': alert.farm_id,
                'farm_name': alert.farm.name,
                'medicine_id': alert.medicine_id,
                'medicine_name': alert.medicine.name,
                'scheduled_day': alert.scheduled_day,
                'scheduled_date': alert.scheduled_date,
                'is_administered': alert.is_administered,
                'administered_at': alert.administered_at,
                'notes': alert.notes,
                'days_until_scheduled': days,
                'priority': short_priority(days)[0],
            })
        return rows
