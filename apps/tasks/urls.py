"""
Tasks URL Configuration
"""
from django.urls import path

from .views import (
    BulkTaskApproveView,
    SubmitOnBehalfView,
    TaskCatalogView,
    TaskHistoryView,
    TaskReopenView,
    TaskReviewView,
    TaskSubmissionListView,
    TaskSubmitView,
)

urlpatterns = [
    path('', TaskCatalogView.as_view(), name='tasks-catalog'),
    path('submit', TaskSubmitView.as_view(), name='tasks-submit'),
    path('submit-on-behalf', SubmitOnBehalfView.as_view(), name='tasks-submit-on-behalf'),
    path('bulk-approve', BulkTaskApproveView.as_view(), name='tasks-bulk-approve'),
    path('submissions', TaskSubmissionListView.as_view(), name='tasks-submissions'),
    path('submissions/<str:submission_id>/review', TaskReviewView.as_view(), name='tasks-review'),
    path('submissions/<str:submission_id>/reopen', TaskReopenView.as_view(), name='tasks-reopen'),
    path('submissions/<str:submission_id>/history', TaskHistoryView.as_view(), name='tasks-history'),
]
