from django.urls import path
from .views import DocketTrackerView

urlpatterns = [
    path("dockets/<int:pk>/tracker/", DocketTrackerView.as_view(), name="docket-tracker"),
]
