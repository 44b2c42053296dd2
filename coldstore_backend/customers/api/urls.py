# customers/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from customers.api.views import CustomerViewSet

router = SimpleRouter()
router.register("customer", CustomerViewSet, basename="customer")

urlpatterns = [
    path("", include(router.urls)),
]
