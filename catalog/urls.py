from django.urls import path

from . import views

app_name = 'catalog'

urlpatterns = [
    path('material-names/', views.MaterialNameListView.as_view(), name='material-name-list'),
    path('material-names/<uuid:record_id>/', views.MaterialNameDetailView.as_view(), name='material-name-detail'),
    path('units/', views.MeasurementUnitListView.as_view(), name='unit-list'),
    path('units/<uuid:record_id>/', views.MeasurementUnitDetailView.as_view(), name='unit-detail'),
    path('egg-weights/', views.EggWeightListView.as_view(), name='egg-weight-list'),
    path('egg-weights/<uuid:record_id>/', views.EggWeightDetailView.as_view(), name='egg-weight-detail'),
    path('expense-types/', views.ExpenseTypeListView.as_view(), name='expense-type-list'),
    path('expense-types/<uuid:record_id>/', views.ExpenseTypeDetailView.as_view(), name='expense-type-detail'),
    path('medicines/', views.MedicineListView.as_view(), name='medicine-list'),
    path('medicines/<uuid:record_id>/', views.MedicineDetailView.as_view(), name='medicine-detail'),
    path('clients/', views.ClientListView.as_view(), name='client-list'),
    path('clients/<uuid:record_id>/', views.ClientDetailView.as_view(), name='client-detail'),
]
