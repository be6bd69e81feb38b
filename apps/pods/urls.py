"""POD URLs."""
from django.urls import path
from . import views

urlpatterns = [
    path("pods/",                   views.PodListCreateView.as_view(), name="pod-list"),
    path("pods/upload/",            views.PodUploadView.as_view(),     name="pod-upload"),
    path("pods/<int:pk>/review/",   views.PodReviewView.as_view(),     name="pod-review"),
    path("pods/<int:pk>/analyze/",  views.PodAnalyzeView.as_view(),    name="pod-analyze"),
]
