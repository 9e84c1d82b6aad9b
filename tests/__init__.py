"""Tests for the Jellyfin client."""
