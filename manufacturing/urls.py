from django.urls import path

from . import views

app_name = 'manufacturing'

urlpatterns = [
    path('', views.ManufacturingListView.as_view(), name='manufacturing-list'),
    path('export/', views.ManufacturingExportView.as_view(), name='manufacturing-export'),
    path('<uuid:invoice_id>/', views.ManufacturingDetailView.as_view(), name='manufacturing-detail'),
    path('<uuid:invoice_id>/add-output/', views.ManufacturingAddOutputView.as_view(), name='manufacturing-add-output'),
    path('<uuid:invoice_id>/rollback/', views.ManufacturingRollbackView.as_view(), name='manufacturing-rollback'),

    # Items
    path('<uuid:invoice_id>/items/', views.ManufacturingItemListView.as_view(), name='item-list'),
    path('items/<uuid:item_id>/', views.ManufacturingItemDetailView.as_view(), name='item-detail'),

    # Expenses
    path('<uuid:parent_id>/expenses/', views.ManufacturingExpenseListView.as_view(), name='expense-list'),
    path('expenses/<uuid:expense_id>/', views.ManufacturingExpenseDetailView.as_view(), name='expense-detail'),

    # Attachments
    path('<uuid:parent_id>/attachments/', views.ManufacturingAttachmentListView.as_view(), name='attachment-list'),
    path('attachments/<uuid:attachment_id>/', views.ManufacturingAttachmentDetailView.as_view(), name='attachment-detail'),
]
