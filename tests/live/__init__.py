"""Live server tests for the Jellyfin client."""
