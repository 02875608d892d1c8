"""
Dashboard services module
"""

from .general_report import GeneralReportService, ReportFilters

__all__ = [
    'GeneralReportService',
    'ReportFilters',
]
