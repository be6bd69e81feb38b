"""Auth URLs."""
from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import RegisterView, LoginView, LogoutView, MeView

urlpatterns = [
    path("register/",      RegisterView.as_view(),        name="auth-register"),
    path("login/",         LoginView.as_view(),           name="auth-login"),
    path("logout/",        LogoutView.as_view(),          name="auth-logout"),
    path("me/",            MeView.as_view(),              name="auth-me"),
    path("token/",         TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(),    name="token-refresh"),
]
