from django.urls import path

from .views import LoginAPIView, MeAPIView, PointHistoryAPIView, RefreshAPIView, SignupAPIView

urlpatterns = [
    path("auth/signup", SignupAPIView.as_view(), name="auth-signup"),
    path("auth/login", LoginAPIView.as_view(), name="auth-login"),
    path("auth/refresh", RefreshAPIView.as_view(), name="auth-refresh"),
    path("users/me", MeAPIView.as_view(), name="users-me"),
    path("users/me/points", PointHistoryAPIView.as_view(), name="users-me-points"),
]
