"""
General Report URL Configuration
"""

from django.urls import path

from . import views

app_name = 'dashboards'

urlpatterns = [
    path('daily/', views.DailySummariesView.as_view(), name='report-daily'),
    path('weekly/', views.WeeklySummaryView.as_view(), name='report-weekly'),
    path('monthly/', views.MonthlySummaryView.as_view(), name='report-monthly'),
    path('overall/', views.OverallStatisticsView.as_view(), name='report-overall'),
    path('export/', views.DailyReportExportView.as_view(), name='report-export'),
]
