"""THC URLs."""
from django.urls import path
from .views import ThcListCreateView, ThcDetailView

urlpatterns = [
    path("thcs/",          ThcListCreateView.as_view(), name="thc-list"),
    path("thcs/<int:pk>/", ThcDetailView.as_view(),     name="thc-detail"),
]
