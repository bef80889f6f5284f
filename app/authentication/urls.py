"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/          - Create account (POST)
    /api/v1/auth/login/             - Obtain JWT pair (POST)
    /api/v1/auth/token/refresh/     - Refresh access token (POST)
    /api/v1/auth/profile/           - Own profile (GET/PATCH)
    /api/v1/auth/users/{id}/        - Public profile by friend code (GET)

Note:
    {id} is matched as a plain string so malformed friend codes reach
    the service and come back as NOT_FOUND.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.views import LoginView, ProfileView, RegisterView, UserProfileView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path("users/<str:user_id>/", UserProfileView.as_view(), name="user-profile"),
]
