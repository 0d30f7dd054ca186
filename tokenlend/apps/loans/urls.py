from django.urls import path
from .views import get_all_outstanding_loans, get_outstanding_loans, request_loan

urlpatterns = [
    path("request-loan", request_loan, name="request_loan"),
    path("get-outstanding-loans", get_outstanding_loans, name="get_outstanding_loans"),
    path(
        "get-all-outstanding-loans",
        get_all_outstanding_loans,
        name="get_all_outstanding_loans",
    ),
]
