#!/usr/bin/env python3
"""
Embed Cache Administration Script.

Maintenance commands for the MongoDB embed cache, sharing the service's
Settings, DatabaseClient and EmbedCache code paths.

Usage:
    python embed_cache_admin.py {migrate,count,clear} [options]

Commands:
    migrate     Apply pending schema migrations
    count       Print the number of cached embeds
    clear       Remove every cached embed (asks for confirmation)

Options:
    --yes       Skip the confirmation prompt for clear
    --verbose   Display detailed operation logs

Environment Variables:
    MONGODB_URI         MongoDB connection URI (default: mongodb://localhost:27017)
    MONGODB_DB_NAME     Database name (default: video_embeds)
"""

import argparse
import asyncio
import sys

from pymongo.errors import PyMongoError

from app.config import get_settings
from app.core.database import DatabaseClient
from app.core.migrations import MigrationError, apply_migrations
from app.services.embed_cache import EmbedCache
from app.utils.logger import setup_logging


async def run_command(command: str, assume_yes: bool) -> int:
    settings = get_settings()
    client = DatabaseClient(settings)

    if not await client.connect(max_retries=1):
        print("Failed to connect to MongoDB. Exiting.")
        return 1

    try:
        if command == "migrate":
            version = await apply_migrations(client.get_database())
            print(f"Embed cache schema at version {version}")
            return 0

        cache = EmbedCache(client.get_embed_cache_collection())

        if command == "count":
            print(f"Cached embeds: {await cache.count()}")
            return 0

        if not assume_yes:
            confirmation = input(
                "\nWARNING: This will DELETE ALL cached embeds.\nType 'yes' to confirm: "
            )
            if confirmation.lower() != "yes":
                print("Operation cancelled.")
                return 0

        removed = await cache.clear()
        print(f"Removed {removed} cached embed(s)")
        return 0

    except MigrationError as e:
        print(f"Migration failed: {e}")
        return 1

    except PyMongoError as e:
        print(f"Database error: {e}")
        return 1

    finally:
        await client.close()


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Maintain the video embed cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python embed_cache_admin.py migrate        # Bring the schema up to date
  python embed_cache_admin.py count          # Report cached embeds
  python embed_cache_admin.py clear --yes    # Drop the cache without prompting
        """,
    )
    parser.add_argument("command", choices=["migrate", "count", "clear"])
    parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Display detailed operation logs"
    )
    return parser.parse_args()


def main() -> int:
    """
    Main entry point for the cache administration script.

    Returns:
        Exit code (0 for success, 1 for failure, 130 when interrupted).
    """
    args = parse_arguments()
    setup_logging(log_level="DEBUG" if args.verbose else "WARNING", json_logs=False)

    try:
        return asyncio.run(run_command(args.command, args.yes))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
