"""Tests for the realtime app."""
