"""
URL configuration for the poultry back office.

Every API response uses the {"success": ..., "data"/"error": ...} envelope
except /api/medicine-invoices/{id}/, which returns the invoice as plain JSON.
"""
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

from medication_management.urls import alert_urlpatterns, invoice_read_urlpatterns

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/admin/', include('accounts.admin_urls')),  # User management
    path('api/farms/', include('farms.urls')),  # Farms, warehouses, poultry batches, setup
    path('api/catalog/', include('catalog.urls')),  # Units, material names, medicines
    path('api/inventory/', include('inventory.urls')),  # Stock ledger and reports
    path('api/invoices/', include('invoices.urls')),  # Buy/sell invoices
    path('api/manufacturing/', include('manufacturing.urls')),
    path('api/medicine-consumption/', include('medication_management.urls')),
    path('api/medicine-invoices/', include((invoice_read_urlpatterns, 'medicine_invoices'))),
    path('api/medication-alerts/', include((alert_urlpatterns, 'medication_alerts'))),
    path('api/daily-reports/', include('daily_reports.urls')),
    path('api/reports/', include('dashboards.urls')),  # General report
]
