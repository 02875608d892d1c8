"""
Derived totals and the expense actions that drive them.

Invoice-like parents store totals computed from their item and expense rows.
Recomputation always reads the rows back from the database under a row lock
on the parent, so the stored value equals the sum of what remains after a
create, update or delete, even with concurrent edits.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation

from django.db import models, transaction
from django.db.models import Sum

from .actions import ActionError, ActionResult, action, get_or_404
from .cache import revalidate_path

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def sum_field(queryset, field_name):
    return queryset.aggregate(total=Sum(field_name))['total'] or ZERO


def locked(model, pk):
    """Row-lock the parent for the remainder of the surrounding transaction."""
    return model.objects.select_for_update().get(pk=pk)


def to_amount(value, label='Amount'):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ActionError(f'{label} must be a number')
    if amount < 0:
        raise ActionError(f'{label} cannot be negative')
    return amount


class DerivedTotals:
    """
    Recomputes the stored totals of one parent kind.

    Subclasses set the parent model and implement assign(), which receives
    the summed item values and expense amounts.
    """
    parent_model = None
    item_relation = 'items'
    item_field = 'value'
    expense_relation = 'expenses'
    expense_field = 'amount'
    total_fields = ()

    @classmethod
    def assign(cls, parent, items_total, expenses_total):
        raise NotImplementedError

    @classmethod
    def recompute(cls, parent_id):
        with transaction.atomic():
            parent = locked(cls.parent_model, parent_id)
            items_total = ZERO
            if cls.item_relation:
                items_total = sum_field(getattr(parent, cls.item_relation).all(), cls.item_field)
            expenses_total = sum_field(getattr(parent, cls.expense_relation).all(), cls.expense_field)
            cls.assign(parent, items_total, expenses_total)
            parent.save(update_fields=[*cls.total_fields, 'updated_at'])
        logger.debug(f"Totals recomputed for {cls.parent_model.__name__} {parent_id}")
        return parent


class ExpenseBase(models.Model):
    """An expense line charged to an invoice-like parent."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense_type = models.ForeignKey(
        'catalog.ExpenseType',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_set',
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=ZERO)
    account_name = models.CharField(max_length=200, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['created_at']

    def __str__(self):
        return f"{self.expense_type or 'Expense'}: {self.amount}"


class ExpenseService:
    """
    list/create/update/delete for one expense kind.

    Every change recomputes the parent's totals in the same transaction.
    """
    model = None
    parent_field = None
    totals = None
    parent_label = 'Invoice'

    @classmethod
    def revalidate_paths(cls, parent_id):
        return ()

    @staticmethod
    def _account_name(value):
        return (value or '').strip() or None

    @classmethod
    @action('Failed to get expenses')
    def list(cls, parent_id):
        return list(
            cls.model.objects.select_related('expense_type')
            .filter(**{f"{cls.parent_field}_id": parent_id})
            .order_by('created_at')
        )

    @classmethod
    @action('Failed to create expense')
    def create(cls, parent_id, expense_type_id=None, amount=0, account_name=None):
        parent = get_or_404(cls.totals.parent_model, f'{cls.parent_label} not found', pk=parent_id)
        amount = to_amount(amount)

        with transaction.atomic():
            expense = cls.model.objects.create(
                **{cls.parent_field: parent},
                expense_type_id=expense_type_id or None,
                amount=amount,
                account_name=cls._account_name(account_name),
            )
            cls.totals.recompute(parent.pk)

        revalidate_path(*cls.revalidate_paths(parent.pk))
        return ActionResult.ok(expense)

    @classmethod
    @action('Failed to update expense')
    def update(cls, expense_id, **fields):
        expense = get_or_404(cls.model, 'Expense not found', pk=expense_id)

        if 'expense_type_id' in fields:
            expense.expense_type_id = fields['expense_type_id'] or None
        if fields.get('amount') is not None:
            expense.amount = to_amount(fields['amount'])
        if 'account_name' in fields:
            expense.account_name = cls._account_name(fields['account_name'])

        parent_id = getattr(expense, f"{cls.parent_field}_id")
        with transaction.atomic():
            expense.save()
            cls.totals.recompute(parent_id)

        revalidate_path(*cls.revalidate_paths(parent_id))
        return ActionResult.ok(expense)

    @classmethod
    @action('Failed to delete expense')
    def delete(cls, expense_id):
        expense = get_or_404(cls.model, 'Expense not found', pk=expense_id)
        parent_id = getattr(expense, f"{cls.parent_field}_id")

        with transaction.atomic():
            expense.delete()
            cls.totals.recompute(parent_id)

        revalidate_path(*cls.revalidate_paths(parent_id))
        return ActionResult.ok()
