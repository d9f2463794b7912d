"""
Documents URL Configuration
"""
from django.urls import path

from .views import (
    BulkDocumentApproveView,
    DocumentDetailView,
    DocumentHistoryView,
    DocumentListView,
    DocumentReopenView,
    DocumentReviewView,
    DocumentSubmitView,
    DocumentUploadView,
)

urlpatterns = [
    path('', DocumentListView.as_view(), name='documents-list'),
    path('upload', DocumentUploadView.as_view(), name='documents-upload'),
    path('bulk-approve', BulkDocumentApproveView.as_view(), name='documents-bulk-approve'),
    path('<str:document_id>', DocumentDetailView.as_view(), name='documents-detail'),
    path('<str:document_id>/submit', DocumentSubmitView.as_view(), name='documents-submit'),
    path('<str:document_id>/review', DocumentReviewView.as_view(), name='documents-review'),
    path('<str:document_id>/reopen', DocumentReopenView.as_view(), name='documents-reopen'),
    path('<str:document_id>/history', DocumentHistoryView.as_view(), name='documents-history'),
]
