from django.urls import path

from . import views

app_name = 'inventory'

urlpatterns = [
    # Materials
    path('materials/', views.MaterialListView.as_view(), name='material-list'),
    path('materials/aggregated/', views.AggregatedMaterialsView.as_view(), name='material-aggregated'),
    path('materials/summary/', views.MaterialsSummaryView.as_view(), name='material-summary'),
    path('materials/warehouses/', views.MaterialWarehousesView.as_view(), name='material-warehouses'),
    path('materials/balance/', views.MaterialBalanceView.as_view(), name='material-balance'),
    path('materials/<uuid:material_id>/', views.MaterialDetailView.as_view(), name='material-detail'),

    # Inventory report
    path('report/', views.InventoryReportView.as_view(), name='report'),
    path('report/summary/', views.InventorySummaryView.as_view(), name='report-summary'),
    path('report/by-warehouse/', views.InventoryByWarehouseView.as_view(), name='report-by-warehouse'),
    path('report/export/', views.InventoryExportView.as_view(), name='report-export'),
]
