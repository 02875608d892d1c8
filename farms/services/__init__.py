"""
Farm Services

Service layer for farms, warehouses, poultry batches and farmer onboarding.
"""

from .farm_service import FarmService, PoultryService, WarehouseService
from .setup_service import FarmSetupService

__all__ = [
    'FarmService',
    'FarmSetupService',
    'PoultryService',
    'WarehouseService',
]
