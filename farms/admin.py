"""
Django Admin Configuration for Farm Models
"""

from django.contrib import admin

from .models import Farm, PoultryStatus, Warehouse


class WarehouseInline(admin.StackedInline):
    model = Warehouse
    extra = 0


class PoultryStatusInline(admin.StackedInline):
    model = PoultryStatus
    extra = 0
    readonly_fields = ('remaining_chicks',)


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'location', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'location', 'user__email', 'user__full_name']
    inlines = [WarehouseInline, PoultryStatusInline]


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'created_at']
    search_fields = ['name', 'farm__name']


@admin.register(PoultryStatus)
class PoultryStatusAdmin(admin.ModelAdmin):
    list_display = [
        'batch_name', 'farm', 'opening_chicks', 'dead_chicks',
        'remaining_chicks', 'chick_birth_date',
    ]
    search_fields = ['batch_name', 'farm__name']
    readonly_fields = ['remaining_chicks', 'created_at', 'updated_at']
