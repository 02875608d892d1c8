"""
Farm Management URLs
"""
from django.urls import path

from . import views

app_name = 'farms'

urlpatterns = [
    # Farms
    path('', views.FarmListView.as_view(), name='farm-list'),
    path('available-users/', views.AvailableUsersView.as_view(), name='available-users'),
    path('setup/', views.FarmSetupView.as_view(), name='setup'),
    path('my-warehouses/', views.FarmerWarehousesView.as_view(), name='my-warehouses'),
    path('<uuid:farm_id>/', views.FarmDetailView.as_view(), name='farm-detail'),

    # Warehouses
    path('warehouses/', views.WarehouseListView.as_view(), name='warehouse-list'),
    path('warehouses/available-farms/', views.FarmsWithoutWarehouseView.as_view(), name='warehouse-available-farms'),
    path('warehouses/<uuid:warehouse_id>/', views.WarehouseDetailView.as_view(), name='warehouse-detail'),

    # Poultry batches
    path('poultry/', views.PoultryListView.as_view(), name='poultry-list'),
    path('poultry/available-farms/', views.FarmsWithoutPoultryView.as_view(), name='poultry-available-farms'),
    path('poultry/<uuid:poultry_id>/', views.PoultryDetailView.as_view(), name='poultry-detail'),
]
