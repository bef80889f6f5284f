"""
API views for the media store.

Provides:
- ObjectUploadView: Store an image at a path (overwrite)
- ObjectResolveView: Resolve a path to its public URL
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from media.serializers import (
    ObjectUploadSerializer,
    ResolveQuerySerializer,
    StoredObjectSerializer,
)
from media.services import MediaStoreService


class ObjectUploadView(APIView):
    """
    Store an object.

    POST /api/v1/media/objects/

    Request:
        Content-Type: multipart/form-data
        - path (required): profiles/{own user id} or chats/{conversation id}/{name}
        - file (required): JPEG, PNG, GIF or WebP image

    Response:
        201 Created: Object stored (version 1)
        200 OK: Existing object overwritten (version > 1)
        400 Bad Request: VALIDATION_ERROR
        403 Forbidden: FORBIDDEN
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="put_object",
        summary="Store object",
        description=(
            "Store an image at a path, replacing any previous content. The "
            "path is the object's reference."
        ),
        request=ObjectUploadSerializer,
        responses={
            200: StoredObjectSerializer,
            201: StoredObjectSerializer,
            400: OpenApiResponse(description="VALIDATION_ERROR"),
            403: OpenApiResponse(description="FORBIDDEN"),
            503: OpenApiResponse(description="TRANSIENT"),
        },
        tags=["Media - Objects"],
    )
    def post(self, request):
        serializer = ObjectUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        upload = serializer.validated_data["file"]
        result = MediaStoreService.put(
            serializer.validated_data["path"],
            upload,
            owner=request.user,
            content_type=getattr(upload, "content_type", None),
        )
        if not result.success:
            return Response(result.to_response(), status=result.status_code)

        stored = result.data
        return Response(
            StoredObjectSerializer(stored).data,
            status=status.HTTP_201_CREATED if stored.version == 1 else status.HTTP_200_OK,
        )


class ObjectResolveView(APIView):
    """
    Resolve a reference.

    GET /api/v1/media/objects/resolve/?path=<reference>

    Response:
        200 OK: {"path", "url"}
        404 Not Found: NOT_FOUND
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="resolve_object",
        summary="Resolve object URL",
        parameters=[
            OpenApiParameter("path", OpenApiTypes.STR, OpenApiParameter.QUERY, required=True),
        ],
        responses={
            200: OpenApiResponse(description='{"path": str, "url": str}'),
            404: OpenApiResponse(description="NOT_FOUND"),
        },
        tags=["Media - Objects"],
    )
    def get(self, request):
        query = ResolveQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        path = query.validated_data["path"]
        result = MediaStoreService.resolve(path)
        if not result.success:
            return Response(result.to_response(), status=result.status_code)
        return Response({"path": path, "url": result.data})
