from django.urls import path

from . import views

app_name = 'invoices'

urlpatterns = [
    path('', views.InvoiceListView.as_view(), name='invoice-list'),
    path('export/', views.InvoiceExportView.as_view(), name='invoice-export'),
    path('<uuid:invoice_id>/', views.InvoiceDetailView.as_view(), name='invoice-detail'),
    path('<uuid:invoice_id>/toggle-checked/', views.InvoiceToggleCheckedView.as_view(), name='invoice-toggle-checked'),

    # Items
    path('<uuid:invoice_id>/items/', views.InvoiceItemListView.as_view(), name='item-list'),
    path('items/<uuid:item_id>/', views.InvoiceItemDetailView.as_view(), name='item-detail'),

    # Expenses
    path('<uuid:parent_id>/expenses/', views.InvoiceExpenseListView.as_view(), name='expense-list'),
    path('expenses/<uuid:expense_id>/', views.InvoiceExpenseDetailView.as_view(), name='expense-detail'),

    # Attachments
    path('<uuid:parent_id>/attachments/', views.InvoiceAttachmentListView.as_view(), name='attachment-list'),
    path('attachments/<uuid:attachment_id>/', views.InvoiceAttachmentDetailView.as_view(), name='attachment-detail'),
]
