# inventory/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from inventory.api.views import EntryReceiptViewSet

router = SimpleRouter()
router.register("entry", EntryReceiptViewSet, basename="entry")

urlpatterns = [
    path("", include(router.urls)),
]
