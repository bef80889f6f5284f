"""
URL configuration for the messaging backend.

URL Structure:
    /                                   - ReDoc API documentation
    /admin/                             - Django admin interface
    /health/                            - Health check endpoint
    /schema/                            - OpenAPI schema (YAML)
    /api/v1/auth/                       - Identity endpoints
        register/                       - Create account (email + password)
        login/                          - Obtain access/refresh tokens
        token/refresh/                  - Refresh access token
        profile/                        - Own profile (GET/PATCH)
        users/{id}/                     - Public profile by friend code
    /api/v1/social/                     - Relationship endpoints
        friends/                        - Friend list
        friends/{id}/                   - Remove friend (DELETE)
        requests/                       - Incoming requests list / send request
        requests/{id}/accept/           - Accept request
        requests/{id}/reject/           - Reject request
    /api/v1/chat/                       - Conversation endpoints
        conversations/                  - Conversation list with summaries
        conversations/{id}/messages/    - Message history / send
        conversations/{id}/messages/{pk}/seen/ - Mark one message seen
        conversations/{id}/seen/        - Mark whole conversation seen
        groups/                         - Create group
        groups/{id}/                    - Group detail / rename
        groups/{id}/members/            - Add member
        groups/{id}/members/{user}/     - Remove member
        groups/{id}/leave/              - Leave group
    /api/v1/media/                      - Media endpoints
        objects/                        - Put object (multipart)
        objects/resolve/?path=          - Resolve reference to URL

WebSocket:
    /ws/realtime/                       - Live subscriptions (see realtime app)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("social/", include("social.urls")),
    path("chat/", include("chat.urls")),
    path("media/", include("media.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# Serve uploaded objects locally; deployments put a CDN/bucket in front
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Messaging Admin"
admin.site.site_title = "Messaging Admin Portal"
admin.site.index_title = "Accounts, conversations and media"
