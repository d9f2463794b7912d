"""
Finance URL Configuration
"""
from django.urls import path

from .views import (
    FeeStatusView,
    FinanceDrillDownView,
    FinanceOverviewView,
    FinanceReportExportView,
    FinanceReportView,
)

urlpatterns = [
    path('', FinanceOverviewView.as_view(), name='finance-overview'),
    path('fee-status', FeeStatusView.as_view(), name='finance-fee-status'),
    path('report', FinanceReportView.as_view(), name='finance-report'),
    path('report/export', FinanceReportExportView.as_view(), name='finance-report-export'),
    path('drill-down', FinanceDrillDownView.as_view(), name='finance-drill-down'),
]
