"""Live test harness for the Jellyfin client.

Usage::

    export JELLYFIN_URL="http://your-jellyfin:8096"
    export JELLYFIN_USERNAME="alice"
    export JELLYFIN_PASSWORD="xxxxxxxx"

    python -m devtools.jellyfin_harness --users

The script is **optional** – it only runs if the required environment
variables are set.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from jellyfin_client import JellyfinClient, JellyfinError


async def _amain() -> None:
    parser = argparse.ArgumentParser(description="Quick Jellyfin client harness")
    parser.add_argument("--users", action="store_true", help="List the users visible to the session")
    parser.add_argument("--debug", action="store_true", help="Log requests and responses")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    url = os.getenv("JELLYFIN_URL")
    username = os.getenv("JELLYFIN_USERNAME")
    password = os.getenv("JELLYFIN_PASSWORD", "")

    if not url or not username:
        print("JELLYFIN_URL and/or JELLYFIN_USERNAME environment variables not set – nothing to do.")
        sys.exit(1)

    try:
        async with await JellyfinClient.authenticate_by_credentials(
            url, username, password
        ) as client:
            me = await client.async_get_current_user()
            print(f"Authenticated as {me.get('Name')} ({client.user_id})")

            if args.users:
                for user in await client.async_get_users():
                    print(f" • {user.get('Id')}  {user.get('Name')}")
    except JellyfinError as err:
        print(f"{err.kind}: {err}")
        sys.exit(2)


def main() -> None:
    try:
        asyncio.run(_amain())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
