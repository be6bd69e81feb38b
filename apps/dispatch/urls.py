"""Dispatch URLs."""
from django.urls import path
from . import views

urlpatterns = [
    path("loading-sheets/",                    views.LoadingSheetListCreateView.as_view(), name="loading-sheet-list"),
    path("loading-sheets/<int:pk>/",           views.LoadingSheetDetailView.as_view(),     name="loading-sheet-detail"),
    path("loading-sheets/<int:pk>/finalize/",  views.LoadingSheetFinalizeView.as_view(),   name="loading-sheet-finalize"),
    path("manifests/",                         views.ManifestListCreateView.as_view(),     name="manifest-list"),
    path("manifests/<int:pk>/",                views.ManifestDetailView.as_view(),         name="manifest-detail"),
]
