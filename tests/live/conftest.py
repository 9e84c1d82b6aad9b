"""Fixtures for live Jellyfin server tests.

These tests run against a real Jellyfin server and are skipped unless
JELLYFIN_URL, JELLYFIN_USERNAME and JELLYFIN_PASSWORD are set.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest

from jellyfin_client.client import JellyfinClient


@pytest.fixture
def live_config() -> tuple[str, str, str]:
    """Get live server address and credentials from the environment."""
    url = os.environ.get("JELLYFIN_URL")
    username = os.environ.get("JELLYFIN_USERNAME")
    password = os.environ.get("JELLYFIN_PASSWORD", "")
    if not url or not username:
        pytest.skip("JELLYFIN_URL and JELLYFIN_USERNAME required for live tests")
    return url, username, password


@pytest.fixture
async def live_client(live_config: tuple[str, str, str]) -> AsyncGenerator[JellyfinClient]:
    """Create a client authenticated against the live server."""
    url, username, password = live_config
    client = await JellyfinClient.authenticate_by_credentials(url, username, password)
    try:
        yield client
    finally:
        await client.close()
