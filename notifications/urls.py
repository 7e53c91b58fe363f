"""
URL routing for notification recipient endpoints.
"""
from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('notification_recipients', views.RecipientListCreateView.as_view(), name='recipient-list'),
    path('notification_recipients/<int:pk>', views.RecipientDetailView.as_view(), name='recipient-detail'),
]
