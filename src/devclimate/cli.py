"""Command-line interface for the DevClimate service."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from devclimate.config import get_settings
from devclimate.database.connection import Database
from devclimate.errors import StartupError

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _init_db() -> None:
    database = Database.from_settings(get_settings())
    try:
        await database.connect(create_tables=True)
    finally:
        await database.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="DevClimate - weather lookups with per-user search history"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT setting)")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )

    # Init-db command
    subparsers.add_parser("init-db", help="Create database tables and exit")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    _configure_logging(settings.log_level)

    if args.command == "init-db":
        try:
            asyncio.run(_init_db())
        except StartupError as e:
            logger.error(e.message)
            return 1
        return 0

    import uvicorn

    # uvicorn exits non-zero itself if the lifespan fails (StartupError)
    uvicorn.run(
        "devclimate.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
