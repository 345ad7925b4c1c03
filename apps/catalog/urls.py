from django.urls import path

from .views import EventDetailAPIView, EventListAPIView, ProductDetailAPIView, ProductListAPIView

urlpatterns = [
    path("events", EventListAPIView.as_view(), name="events"),
    path("events/<int:pk>", EventDetailAPIView.as_view(), name="event-detail"),
    path("products", ProductListAPIView.as_view(), name="products"),
    path("products/<int:pk>", ProductDetailAPIView.as_view(), name="product-detail"),
]
