# expenses/api/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from expenses.api.views import ExpenseCategoryViewSet, ExpenseViewSet

router = SimpleRouter()
# categories first: the expense detail route would otherwise swallow "categories"
router.register("expenses/categories", ExpenseCategoryViewSet, basename="expense-category")
router.register("expenses", ExpenseViewSet, basename="expense")

urlpatterns = [
    path("", include(router.urls)),
]
