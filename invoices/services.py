"""
Invoice services.

Item changes move stock through the StockLedger and recompute the invoice
totals in the same transaction; a rejected movement (unknown material,
insufficient stock) leaves neither the item nor the stock changed.
"""

import logging

from django.db import transaction

from core.actions import ActionError, ActionResult, action, get_or_404
from core.attachments import AttachmentService
from core.cache import revalidate_path
from core.storage import INVOICE_BUY_FOLDER, INVOICE_SELL_FOLDER
from core.totals import DerivedTotals, ExpenseService, to_amount
from inventory.services import StockLedger, revalidate_stock_pages

from .models import Invoice, InvoiceAttachment, InvoiceExpense, InvoiceItem

logger = logging.getLogger(__name__)

INVOICES_PATH = '/admin/invoices'


def invoice_paths(invoice_id):
    return (INVOICES_PATH, f'{INVOICES_PATH}/{invoice_id}')


class InvoiceTotals(DerivedTotals):
    parent_model = Invoice
    total_fields = ('total_items_value', 'total_expenses_value', 'net_value')

    @classmethod
    def assign(cls, parent, items_total, expenses_total):
        parent.total_items_value = items_total
        parent.total_expenses_value = expenses_total
        parent.net_value = items_total + expenses_total


def apply_item_movement(invoice, item, quantity):
    """Sell invoices sell stock; buy invoices purchase it."""
    if not invoice.warehouse_id or not (item.material_name_id or item.medicine_id):
        return
    if invoice.is_sell:
        StockLedger.sell(
            invoice.warehouse_id, quantity,
            material_name_id=item.material_name_id, medicine_id=item.medicine_id,
        )
    else:
        StockLedger.purchase(
            invoice.warehouse_id, quantity,
            material_name_id=item.material_name_id, medicine_id=item.medicine_id, unit_id=item.unit_id,
        )


def reverse_item_movement(invoice, item, quantity):
    if not invoice.warehouse_id or not (item.material_name_id or item.medicine_id):
        return
    if invoice.is_sell:
        StockLedger.reverse_sale(
            invoice.warehouse_id, quantity,
            material_name_id=item.material_name_id, medicine_id=item.medicine_id,
        )
    else:
        StockLedger.reverse_purchase(
            invoice.warehouse_id, quantity,
            material_name_id=item.material_name_id, medicine_id=item.medicine_id,
        )


class InvoiceService:

    @staticmethod
    @action('Failed to get invoices')
    def list_invoices(invoice_type=None, warehouse_id=None, checked=None):
        invoices = Invoice.objects.select_related('warehouse__farm', 'client').order_by('-invoice_date', '-created_at')
        if invoice_type:
            invoices = invoices.filter(invoice_type=invoice_type)
        if warehouse_id:
            invoices = invoices.filter(warehouse_id=warehouse_id)
        if checked is not None:
            invoices = invoices.filter(checked=checked)
        return list(invoices)

    @staticmethod
    @action('Failed to get invoice')
    def get_invoice(invoice_id):
        return get_or_404(Invoice, 'Invoice not found', pk=invoice_id)

    @staticmethod
    @action('Failed to create invoice')
    def create_invoice(invoice_type, invoice_number, invoice_date, invoice_time=None,
                       warehouse_id=None, client_id=None, notes=None):
        invoice_number = (invoice_number or '').strip()
        if not invoice_number:
            raise ActionError('Invoice number is required')
        if invoice_type not in Invoice.InvoiceType.values:
            raise ActionError('Invoice type must be either buy or sell')
        if Invoice.objects.filter(invoice_number=invoice_number).exists():
            raise ActionError('Invoice number already exists')

        invoice = Invoice.objects.create(
            invoice_type=invoice_type,
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            invoice_time=invoice_time,
            warehouse_id=warehouse_id or None,
            client_id=client_id or None,
            notes=notes or None,
        )
        logger.info(f"Invoice {invoice.invoice_number} ({invoice.invoice_type}) created")
        revalidate_path(INVOICES_PATH)
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to update invoice')
    def update_invoice(invoice_id, **fields):
        invoice = get_or_404(Invoice, 'Invoice not found', pk=invoice_id)

        # Item stock movements are bound to the current warehouse and direction
        moves_stock = (
            ('warehouse_id' in fields and str(fields['warehouse_id'] or '') != str(invoice.warehouse_id or ''))
            or ('invoice_type' in fields and fields['invoice_type'] != invoice.invoice_type)
        )
        if moves_stock and invoice.items.exists():
            raise ActionError('Cannot change warehouse or invoice type while the invoice has items')

        if 'invoice_number' in fields:
            number = (fields['invoice_number'] or '').strip()
            if not number:
                raise ActionError('Invoice number is required')
            if Invoice.objects.filter(invoice_number=number).exclude(pk=invoice.pk).exists():
                raise ActionError('Invoice number already exists')
            invoice.invoice_number = number
        if 'invoice_type' in fields:
            if fields['invoice_type'] not in Invoice.InvoiceType.values:
                raise ActionError('Invoice type must be either buy or sell')
            invoice.invoice_type = fields['invoice_type']
        for field in ('invoice_date', 'invoice_time', 'checked'):
            if field in fields:
                setattr(invoice, field, fields[field])
        for field in ('warehouse_id', 'client_id', 'notes'):
            if field in fields:
                setattr(invoice, field, fields[field] or None)

        invoice.save()
        revalidate_path(*invoice_paths(invoice.pk))
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to update invoice status')
    def toggle_checked(invoice_id):
        invoice = get_or_404(Invoice, 'Invoice not found', pk=invoice_id)
        invoice.checked = not invoice.checked
        invoice.save(update_fields=['checked', 'updated_at'])
        revalidate_path(*invoice_paths(invoice.pk))
        return ActionResult.ok(invoice)

    @staticmethod
    @action('Failed to delete invoice')
    def delete_invoice(invoice_id):
        """Undo every item's stock movement, then delete the invoice and its lines."""
        invoice = get_or_404(Invoice, 'Invoice not found', pk=invoice_id)

        with transaction.atomic():
            for item in invoice.items.all():
                reverse_item_movement(invoice, item, item.quantity)
            invoice.delete()

        logger.info(f"Invoice {invoice.invoice_number} deleted with stock reversed")
        revalidate_path(*invoice_paths(invoice_id))
        revalidate_stock_pages()
        return ActionResult.ok()


class InvoiceItemService:

    @staticmethod
    @action('Failed to get invoice items')
    def list(invoice_id):
        return list(
            InvoiceItem.objects.select_related('material_name', 'medicine', 'unit', 'egg_weight')
            .filter(invoice_id=invoice_id)
            .order_by('created_at')
        )

    @staticmethod
    @action('Failed to create invoice item')
    def create(invoice_id, quantity, price, material_name_id=None, medicine_id=None,
               unit_id=None, egg_weight_id=None, weight=None):
        invoice = get_or_404(Invoice, 'Invoice not found', pk=invoice_id)
        if material_name_id and medicine_id:
            raise ActionError('Cannot provide both material name and medicine')

        item = InvoiceItem(
            invoice=invoice,
            material_name_id=material_name_id or None,
            medicine_id=medicine_id or None,
            unit_id=unit_id or None,
            egg_weight_id=egg_weight_id or None,
            quantity=to_amount(quantity, 'Quantity'),
            weight=to_amount(weight, 'Weight') if weight not in (None, '') else None,
            price=to_amount(price, 'Price'),
        )

        with transaction.atomic():
            apply_item_movement(invoice, item, item.quantity)
            item.save()
            InvoiceTotals.recompute(invoice.pk)

        revalidate_path(*invoice_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok(item)

    @staticmethod
    @action('Failed to update invoice item')
    def update(item_id, quantity=None, price=None, weight=None):
        """
        Re-price or re-count a line. A quantity change moves the stock
        difference so the ledger keeps matching the invoice.
        """
        item = get_or_404(InvoiceItem, 'Item not found', pk=item_id)
        invoice = item.invoice

        with transaction.atomic():
            if quantity is not None:
                new_quantity = to_amount(quantity, 'Quantity')
                if new_quantity != item.quantity:
                    reverse_item_movement(invoice, item, item.quantity)
                    apply_item_movement(invoice, item, new_quantity)
                    item.quantity = new_quantity
            if price is not None:
                item.price = to_amount(price, 'Price')
            if weight is not None:
                item.weight = to_amount(weight, 'Weight')

            item.save()
            InvoiceTotals.recompute(invoice.pk)

        revalidate_path(*invoice_paths(invoice.pk))
        if quantity is not None:
            revalidate_stock_pages()
        return ActionResult.ok(item)

    @staticmethod
    @action('Failed to delete invoice item')
    def delete(item_id):
        item = get_or_404(InvoiceItem, 'Item not found', pk=item_id)
        invoice = item.invoice

        with transaction.atomic():
            reverse_item_movement(invoice, item, item.quantity)
            item.delete()
            InvoiceTotals.recompute(invoice.pk)

        revalidate_path(*invoice_paths(invoice.pk))
        revalidate_stock_pages()
        return ActionResult.ok()


class InvoiceExpenseService(ExpenseService):
    model = InvoiceExpense
    parent_field = 'invoice'
    totals = InvoiceTotals

    @classmethod
    def revalidate_paths(cls, parent_id):
        return invoice_paths(parent_id)


class InvoiceAttachmentService(AttachmentService):
    model = InvoiceAttachment
    parent_model = Invoice
    parent_field = 'invoice'
    parent_label = 'Invoice'

    @classmethod
    def get_folder(cls, parent):
        return INVOICE_SELL_FOLDER if parent.is_sell else INVOICE_BUY_FOLDER

    @classmethod
    def revalidate_paths(cls, parent_id):
        return invoice_paths(parent_id)
