"""
Tests for the identity store.

Modules:
- test_services.py: IdentityService (accounts, login, profiles, last seen)
- test_views.py: register, login, refresh and profile endpoints
"""
