from django.urls import path

from . import views

app_name = 'medication_management'

urlpatterns = [
    path('', views.MedicineInvoiceListView.as_view(), name='invoice-list'),
    path('farmer/', views.FarmerMedicineInvoiceListView.as_view(), name='farmer-invoice-list'),
    path('farmer/<uuid:invoice_id>/', views.FarmerMedicineInvoiceDetailView.as_view(), name='farmer-invoice-detail'),
    path('<uuid:invoice_id>/', views.MedicineInvoiceDetailView.as_view(), name='invoice-detail'),

    # Items
    path('<uuid:invoice_id>/items/', views.MedicineItemListView.as_view(), name='item-list'),
    path('items/<uuid:item_id>/', views.MedicineItemDetailView.as_view(), name='item-detail'),

    # Expenses
    path('<uuid:parent_id>/expenses/', views.MedicineExpenseListView.as_view(), name='expense-list'),
    path('expenses/<uuid:expense_id>/', views.MedicineExpenseDetailView.as_view(), name='expense-detail'),

    # Attachments
    path('<uuid:parent_id>/attachments/', views.MedicineAttachmentListView.as_view(), name='attachment-list'),
    path('attachments/<uuid:attachment_id>/', views.MedicineAttachmentDetailView.as_view(), name='attachment-detail'),
]

invoice_read_urlpatterns = [
    path('<str:invoice_id>/', views.MedicineInvoiceReadView.as_view(), name='medicine-invoice-read'),
]

alert_urlpatterns = [
    path('', views.AdminAlertListView.as_view(), name='alert-list'),
    path('summary/', views.AlertsSummaryView.as_view(), name='alert-summary'),
    path('upcoming/', views.UpcomingAlertsView.as_view(), name='alert-upcoming'),
    path('chick-age/', views.ChickAgeView.as_view(), name='chick-age'),
    path('farms/<uuid:farm_id>/', views.FarmAlertsView.as_view(), name='farm-alerts'),
    path('farms/<uuid:farm_id>/stats/', views.FarmAlertStatsView.as_view(), name='farm-alert-stats'),
    path('<uuid:alert_id>/', views.AlertDetailView.as_view(), name='alert-detail'),
    path('<uuid:alert_id>/administer/', views.AlertAdministerView.as_view(), name='alert-administer'),
    path('<uuid:alert_id>/unadminister/', views.AlertUnadministerView.as_view(), name='alert-unadminister'),
]
