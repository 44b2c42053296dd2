# core/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from core.api.reference import (
    PackTypeViewSet,
    ProductSubTypeViewSet,
    ProductTypeViewSet,
    RoomViewSet,
)

router = SimpleRouter()
router.register("producttype", ProductTypeViewSet, basename="producttype")
router.register("productsubtype", ProductSubTypeViewSet, basename="productsubtype")
router.register("packtype", PackTypeViewSet, basename="packtype")
router.register("room", RoomViewSet, basename="room")

urlpatterns = [
    path("", include(router.urls)),
]
