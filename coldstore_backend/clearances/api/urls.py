# clearances/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from clearances.api.views import ClearanceViewSet

router = SimpleRouter()
router.register("clearance", ClearanceViewSet, basename="clearance")

urlpatterns = [
    path("", include(router.urls)),
]
