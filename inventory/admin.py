from django.contrib import admin

from .models import Material


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = [
        'item_name', 'warehouse', 'unit', 'opening_balance', 'purchases',
        'sales', 'consumption', 'manufacturing', 'current_balance',
    ]
    list_filter = ['warehouse']
    search_fields = ['material_name__material_name', 'medicine__name', 'warehouse__name']
    readonly_fields = ['current_balance', 'created_at', 'updated_at']
    list_select_related = ['warehouse', 'material_name', 'medicine', 'unit']
