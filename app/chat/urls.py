"""
URL configuration for the conversation registry and message log API.

URL Structure:
    /conversations/                               GET
    /conversations/{id}/seen/                     POST
    /conversations/{id}/messages/                 GET, POST
    /conversations/{id}/messages/{pk}/seen/       POST
    /groups/                                      POST
    /groups/{id}/                                 GET, PATCH
    /groups/{id}/members/                         POST
    /groups/{id}/members/{user_id}/               DELETE
    /groups/{id}/leave/                           POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ConversationViewSet, GroupViewSet, MessageViewSet

router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")
router.register(r"groups", GroupViewSet, basename="group")

message_list = MessageViewSet.as_view({"get": "list", "post": "create"})
message_seen = MessageViewSet.as_view({"post": "seen"})

app_name = "chat"

urlpatterns = [
    path(
        "conversations/<str:conversation_id>/messages/",
        message_list,
        name="message-list",
    ),
    path(
        "conversations/<str:conversation_id>/messages/<str:pk>/seen/",
        message_seen,
        name="message-seen",
    ),
    path("", include(router.urls)),
]
