"""
Manufacturing services.

Flow for a new batch: create the invoice, add each input item (consuming its
stock), then add the output material to inventory. If an item cannot be
added the client rolls the invoice back, which deletes it without touching
stock.
"""

import logging

from django.db import transaction

from core.actions import ActionError, ActionResult, Forbidden, NotFound, action, get_or_404
from core.attachments import AttachmentService
from core.cache import revalidate_path
from core.storage import MANUFACTURING_FOLDER
from core.totals import DerivedTotals, ExpenseService, to_amount
from farms.access import farmer_warehouse_ids, require_farmer_warehouse
from inventory.services import StockLedger, revalidate_stock_pages

from .models import ManufacturingAttachment, ManufacturingExpense, ManufacturingInvoice, ManufacturingInvoiceItem

logger = logging.getLogger(__name__)

MANUFACTURING_PATH = '/admin/manufacturing'
FARMER_MANUFACTURING_PATH = '/farmer/manufacturing'


def manufacturing_paths(invoice_id=None):
    paths = [MANUFACTURING_PATH, '/farmer', FARMER_MANUFACTURING_PATH]
    if invoice_id:
        paths.append(f'{MANUFACTURING_PATH}/{invoice_id}')
    return paths


class ManufacturingTotals(DerivedTotals):
    parent_model = ManufacturingInvoice
    item_relation = None
    total_fields = ('total_expenses_value',)

    @classmethod
    def assign(cls, parent, items_total, expenses_total):
        parent.total_expenses_value = expenses_total


class ManufacturingService:

    @staticmethod
    @action('Failed to get manufacturing invoices')
    def list(user):
        """Farmers only see batches from their own farm's warehouses."""
        invoices = ManufacturingInvoice.objects.select_related(
            'warehouse__farm', 'material_name', 'unit'
        ).order_by('-manufacturing_date', '-created_at')
        if user.is_farmer:
            invoices = invoices.filter(warehouse_id__in=farmer_warehouse_ids(user))
        return list(invoices)

    @staticmethod
    @action('Failed to get manufacturing invoice')
    def get(invoice_id, user=None):
        invoice = get_or_404(ManufacturingInvoice, 'Invoice not found', pk=invoice_id)
        if user is not None and user.is_farmer and invoice.warehouse_id not in farmer_warehouse_ids(user):
            raise NotFound('Invoice not found')
        return invoice

    @staticmethod
    @action('Failed to create manufacturing invoice')
    def create(user, invoice_number, warehouse_id, manufacturing_date, material_name_id=None,
               unit_id=None, quantity=0, blend_name=None, manufacturing_time=None, notes=None):
        if not (user.is_admin or user.is_farmer):
            raise Forbidden('Unauthorized - Access denied')
        if user.is_farmer:
            require_farmer_warehouse(user, warehouse_id)

        invoice_number = (invoice_number or '').strip()
        if not invoice_number:
            raise ActionError('Invoice number is required')
        if ManufacturingInvoice.objects.filter(invoice_number=invoice_number).exists():
            raise ActionError('Invoice number already exists')

        invoice = ManufacturingInvoice.objects.create(
            invoice_number=invoice_number,
            warehouse_id=warehouse_id,
            blend_name=(blend_name or '').strip() or None,
            material_name_id=material_name_id or None,
            unit_id=unit_id or None,
            quantity=to_amount(quantity or 0, 'Quantity'),
            manufacturing_date=manufacturing_date,
            manufacturing_time=manufacturing_time,
            notes=(notes or '').strip() or None,
        )
        logger.info(f"Manufacturing invoice {invoice.invoice_number} created by {user.email}")
        revalidate_path(*manufacturing_paths())
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to add output material to inventory')
    def add_output_material_to_inventory(invoice_id):
        with transaction.atomic():
            try:
                invoice = ManufacturingInvoice.objects.select_for_update().get(pk=invoice_id)
            except (ManufacturingInvoice.DoesNotExist, ValueError):
                raise NotFound('Invoice not found')

            if not invoice.material_name_id or not invoice.unit_id or not invoice.quantity or invoice.quantity <= 0:
                raise ActionError('Output material and quantity are required')
            if not invoice.warehouse_id:
                raise ActionError('Manufacturing invoice or warehouse not found')
            if invoice.output_added:
                raise ActionError('Output material has already been added to inventory')

            StockLedger.manufacture(
                invoice.warehouse_id, invoice.quantity,
                material_name_id=invoice.material_name_id, unit_id=invoice.unit_id,
            )
            invoice.output_added = True
            invoice.save(update_fields=['output_added', 'updated_at'])

        revalidate_path(*manufacturing_paths(invoice_id))
        revalidate_stock_pages()
        return ActionResult.ok()

    @staticmethod
    @action('Failed to rollback manufacturing invoice')
    def rollback(invoice_id):
        """Delete a half-created batch without touching stock."""
        invoice = get_or_404(ManufacturingInvoice, 'Invoice not found', pk=invoice_id)
        invoice.delete()
        logger.warning(f"Manufacturing invoice {invoice.invoice_number} rolled back")
        revalidate_path(*manufacturing_paths())
        return ActionResult.ok()

    @staticmethod
    @action('Failed to delete manufacturing invoice')
    def delete(invoice_id):
        invoice = get_or_404(ManufacturingInvoice, 'Invoice not found', pk=invoice_id)

        with transaction.atomic():
            if invoice.warehouse_id and invoice.material_name_id and invoice.output_added and invoice.quantity > 0:
                StockLedger.reverse_manufacture(
                    invoice.warehouse_id, invoice.quantity, material_name_id=invoice.material_name_id
                )
            if invoice.warehouse_id:
                for item in invoice.items.filter(material_name__isnull=False):
                    StockLedger.reverse_consumption(
                        invoice.warehouse_id, item.weight or item.quantity,
                        material_name_id=item.material_name_id,
                    )
            invoice.delete()

        logger.info(f"Manufacturing invoice {invoice.invoice_number} deleted with stock reversed")
        revalidate_path(*manufacturing_paths(invoice_id))
        revalidate_stock_pages()
        return ActionResult.ok()


class ManufacturingItemService:

    @staticmethod
    @action('Failed to get manufacturing items')
    def list(invoice_id):
        return list(
            ManufacturingInvoiceItem.objects.select_related('material_name', 'unit')
            .filter(manufacturing_invoice_id=invoice_id)
            .order_by('created_at')
        )

    @staticmethod
    @action('Failed to create manufacturing item')
    def create(invoice_id, material_name_id, quantity, unit_id=None, blend_count=1, weight=None):
        invoice = ManufacturingInvoice.objects.filter(pk=invoice_id).first()
        if invoice is None or not invoice.warehouse_id:
            raise ActionError('Manufacturing invoice or warehouse not found')
        if not material_name_id:
            raise ActionError('Material is required')
        quantity = to_amount(quantity, 'Quantity')

        with transaction.atomic():
            StockLedger.consume(invoice.warehouse_id, quantity, material_name_id=material_name_id)
            item = ManufacturingInvoiceItem.objects.create(
                manufacturing_invoice=invoice,
                material_name_id=material_name_id,
                unit_id=unit_id or None,
                quantity=quantity,
                blend_count=blend_count or 1,
                weight=to_amount(weight, 'Weight') if weight not in (None, '') else None,
            )

        revalidate_path(*manufacturing_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok(item)

    @staticmethod
    @action('Failed to delete manufacturing item')
    def delete(item_id):
        item = get_or_404(ManufacturingInvoiceItem, 'Item not found', pk=item_id)
        invoice = item.manufacturing_invoice

        with transaction.atomic():
            if invoice.warehouse_id and item.material_name_id:
                StockLedger.reverse_consumption(
                    invoice.warehouse_id, item.quantity, material_name_id=item.material_name_id
                )
            item.delete()

        revalidate_path(*manufacturing_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok()


class ManufacturingExpenseService(ExpenseService):
    model = ManufacturingExpense
    parent_field = 'manufacturing_invoice'
    totals = ManufacturingTotals
    parent_label = 'Manufacturing invoice'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return manufacturing_paths(parent_id)


class ManufacturingAttachmentService(AttachmentService):
    model = ManufacturingAttachment
    parent_model = ManufacturingInvoice
    parent_field = 'manufacturing_invoice'
    folder = MANUFACTURING_FOLDER
    parent_label = 'Manufacturing invoice'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return manufacturing_paths(parent_id)


