"""Docket URLs."""
from django.urls import path
from .views import DocketListCreateView, DocketDetailView, DocketStatusView

urlpatterns = [
    path("dockets/",                 DocketListCreateView.as_view(), name="docket-list"),
    path("dockets/<int:pk>/",        DocketDetailView.as_view(),     name="docket-detail"),
    path("dockets/<int:pk>/status/", DocketStatusView.as_view(),     name="docket-status"),
]
