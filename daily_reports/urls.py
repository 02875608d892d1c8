from django.urls import path

from . import views

app_name = 'daily_reports'

urlpatterns = [
    path('', views.DailyReportListView.as_view(), name='report-list'),
    path('integrated/', views.IntegratedDailyReportView.as_view(), name='report-integrated'),
    path('monthly-feed/', views.MonthlyFeedPreviewView.as_view(), name='monthly-feed'),
    path('chicks-before/', views.ChicksBeforeView.as_view(), name='chicks-before'),
    path('medicines/', views.WarehouseMedicinesView.as_view(), name='warehouse-medicines'),
    path('<uuid:report_id>/', views.DailyReportDetailView.as_view(), name='report-detail'),
    path('<uuid:report_id>/toggle-status/', views.DailyReportToggleStatusView.as_view(), name='report-toggle-status'),

    # Attachments
    path('<uuid:parent_id>/attachments/', views.DailyReportAttachmentListView.as_view(), name='attachment-list'),
    path('attachments/<uuid:attachment_id>/', views.DailyReportAttachmentDetailView.as_view(), name='attachment-detail'),
]
