"""
URL routing for account API endpoints.
"""
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('users', views.AccountListCreateView.as_view(), name='account-list'),
    path('users/<int:pk>', views.AccountDetailView.as_view(), name='account-detail'),
    path('auth/login', views.LoginView.as_view(), name='login'),
]
