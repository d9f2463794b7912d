"""
Coach URL Configuration
"""
from django.urls import path

from .views import CoachQueuesView, FacilitatorSummaryView

urlpatterns = [
    path('', CoachQueuesView.as_view(), name='coach-queues'),
    path('summary', FacilitatorSummaryView.as_view(), name='coach-summary'),
]
