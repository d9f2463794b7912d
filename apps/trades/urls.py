"""
Trades URL Configuration
"""
from django.urls import path

from .views import TradeListView, TradeReviewView

urlpatterns = [
    path('', TradeListView.as_view(), name='trades-list'),
    path('<str:trade_id>/review', TradeReviewView.as_view(), name='trades-review'),
]
