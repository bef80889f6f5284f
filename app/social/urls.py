"""
URL configuration for the relationship graph API.

URL Structure:
    /friends/                   GET
    /friends/{friend_id}/       DELETE
    /requests/                  GET, POST
    /requests/{id}/accept/      POST
    /requests/{id}/reject/      POST

All URLs are prefixed with /api/v1/social/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from social.views import FriendRequestViewSet, FriendViewSet

router = DefaultRouter()
router.register(r"friends", FriendViewSet, basename="friend")
router.register(r"requests", FriendRequestViewSet, basename="friend-request")

app_name = "social"

urlpatterns = [
    path("", include(router.urls)),
]
