"""
Authentication API URLs

All routes are relative to /api/auth/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('login', views.LoginView.as_view(), name='auth_login'),
    path('register', views.RegisterView.as_view(), name='auth_register'),
    path('refresh', views.RefreshTokenView.as_view(), name='auth_refresh'),
    path('logout', views.LogoutView.as_view(), name='auth_logout'),
    path('me', views.SessionView.as_view(), name='auth_me'),
]
