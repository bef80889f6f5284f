"""
URL configuration for media app.

Media - Objects:
    POST /objects/                    - Store object (multipart: path, file)
    GET  /objects/resolve/?path=      - Resolve reference to public URL

All URLs are prefixed with /api/v1/media/ in the main URL configuration.
"""

from django.urls import path

from media.views import ObjectResolveView, ObjectUploadView

app_name = "media"

urlpatterns = [
    path("objects/", ObjectUploadView.as_view(), name="object-upload"),
    path("objects/resolve/", ObjectResolveView.as_view(), name="object-resolve"),
]
