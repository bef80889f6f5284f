"""
Authentication application (identity store).

Key components:
    - User model: Account keyed by a UUID friend code, email login
    - Profile model: Display name, photo and last-seen time
    - IdentityService: Account creation, login, profile reads and updates

Usage:
    from authentication.models import User, Profile
    from authentication.services import IdentityService
"""
