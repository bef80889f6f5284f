"""Tests for core infrastructure."""
