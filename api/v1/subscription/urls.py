"""
URL configuration for subscription API endpoints.
"""

from django.urls import path

from api.v1.subscription import views

app_name = "subscription"

urlpatterns = [
    path(
        "acknowledgement",
        views.AcknowledgeSubscriptionView.as_view(),
        name="acknowledge-subscription",
    ),
    path(
        "current",
        views.CurrentSubscriptionView.as_view(),
        name="current-subscription",
    ),
]
