"""
URL routing for catalog API endpoints.
"""
from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    path('products', views.ProductListCreateView.as_view(), name='product-list'),
    path('products/bulk', views.ProductBulkImportView.as_view(), name='product-bulk'),
    path('products/<int:pk>', views.ProductDetailView.as_view(), name='product-detail'),
]
