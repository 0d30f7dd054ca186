from django.contrib import admin
from django.urls import path, include


def welcome(request):
    from django.http import HttpResponse

    return HttpResponse(
        "Welcome to Streamflow lending! Refer to the API documentation for usage.",
        content_type="text/plain",
    )


def health_check(request):
    from django.http import JsonResponse

    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("", welcome),
    path("admin/", admin.site.urls),
    path("healthz", health_check),
    path("lend/", include("tokenlend.apps.loans.urls")),  # lending API
]
