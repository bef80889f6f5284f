"""
Tests for chat app.

This package contains test modules for:
- test_identifiers.py: Direct conversation id derivation and parsing
- test_services.py: GroupService, MessageService, ConversationService
- test_views.py: REST API endpoint tests
- test_tasks.py: Membership verification task

Usage:
    pytest chat/tests/
    pytest chat/tests/test_services.py
"""
