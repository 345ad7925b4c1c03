from __future__ import annotations

from django.db.models import Q
from rest_framework.generics import ListAPIView, RetrieveAPIView

from apps.common.models import RecordState
from apps.common.response import success_response

from .models import Event, Product
from .serializers import EventDetailSerializer, EventListSerializer, ProductSerializer

PRODUCT_SORTING_MAP = {
    "newest": "-created_at",
    "price_low": "price",
    "price_high": "-price",
    "popular": "-quantity_sold",
}


class EventListAPIView(ListAPIView):
    serializer_class = EventListSerializer

    def get_queryset(self):
        queryset = Event.objects.filter(state=RecordState.ACTIVE).order_by("starts_at", "id")
        q = self.request.query_params.get("q", "").strip()
        if q:
            queryset = queryset.filter(Q(title__icontains=q) | Q(venue__icontains=q))
        return queryset


class EventDetailAPIView(RetrieveAPIView):
    queryset = Event.objects.filter(state=RecordState.ACTIVE).prefetch_related("tickets")
    serializer_class = EventDetailSerializer

    def retrieve(self, request, *args, **kwargs):
        return success_response(self.get_serializer(self.get_object()).data)


class ProductListAPIView(ListAPIView):
    serializer_class = ProductSerializer

    def get_queryset(self):
        queryset = Product.objects.filter(state=RecordState.ACTIVE).order_by("-created_at", "-id")

        q = self.request.query_params.get("q", "").strip()
        if q:
            queryset = queryset.filter(Q(name__icontains=q) | Q(description__icontains=q))

        sort = self.request.query_params.get("sort")
        if sort in PRODUCT_SORTING_MAP:
            queryset = queryset.order_by(PRODUCT_SORTING_MAP[sort], "id")
        return queryset


class ProductDetailAPIView(RetrieveAPIView):
    queryset = Product.objects.filter(state=RecordState.ACTIVE)
    serializer_class = ProductSerializer

    def retrieve(self, request, *args, **kwargs):
        return success_response(self.get_serializer(self.get_object()).data)
