"""
E-commerce URL Configuration
"""
from django.urls import path

from .views import (
    ECommerceOverviewView,
    ECommerceReportExportView,
    ECommerceReportView,
    ECommerceStageStatusView,
    PlatformListView,
    SetupCompleteView,
    SetupDetailView,
    SetupListView,
    SetupReopenView,
)

urlpatterns = [
    path('', ECommerceOverviewView.as_view(), name='ecommerce-overview'),
    path('stage-status', ECommerceStageStatusView.as_view(), name='ecommerce-stage-status'),
    path('setups', SetupListView.as_view(), name='ecommerce-setups'),
    path('setups/<str:setup_id>', SetupDetailView.as_view(), name='ecommerce-setup-detail'),
    path('setups/<str:setup_id>/complete', SetupCompleteView.as_view(), name='ecommerce-setup-complete'),
    path('setups/<str:setup_id>/reopen', SetupReopenView.as_view(), name='ecommerce-setup-reopen'),
    path('report', ECommerceReportView.as_view(), name='ecommerce-report'),
    path('report/export', ECommerceReportExportView.as_view(), name='ecommerce-report-export'),
    path('platforms', PlatformListView.as_view(), name='ecommerce-platforms'),
]
