"""Insightboard CLI entry point."""

import argparse
import asyncio
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from insightboard import __version__
from insightboard.config import get_settings
from insightboard.database import check_db_connection, create_client, get_db_info
from insightboard.observability import configure_logging


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server."""
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as e:
        _print_validation_error(e)
        return 1

    configure_logging("DEBUG" if args.debug else settings.log_level)

    uvicorn.run(
        "insightboard.api.server:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        lifespan="on",
        log_level=("debug" if args.debug else settings.log_level.lower()),
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Display effective configuration."""
    try:
        settings = get_settings()
    except ValidationError as e:
        _print_validation_error(e)
        return 1

    db_info = get_db_info(settings)

    print("\n=== Insightboard Configuration ===\n")
    print(f"Environment: {settings.environment}")
    print(f"Listen: {settings.host}:{settings.port}")
    print(f"Allowed Origins: {', '.join(settings.allowed_origins)}\n")

    print("Database:")
    print(f"  URL: {db_info['url']}")
    print(f"  Database: {db_info['database']}")
    print(f"  Collection: {db_info['collection']}\n")

    print("Limits:")
    print(f"  Search Page Size: {settings.pagination_default_limit} (max {settings.pagination_max_limit or 'none'})")
    print(f"  Category Results: {settings.categories_limit}\n")

    print(f"Log Level: {settings.log_level}")
    print(f"Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")

    return 0


def cmd_ping(args: argparse.Namespace) -> int:
    """Check that the configured MongoDB answers."""
    try:
        settings = get_settings()
    except ValidationError as e:
        _print_validation_error(e)
        return 1

    configure_logging(settings.log_level)

    async def run() -> bool:
        client = create_client(settings)
        try:
            return await check_db_connection(client)
        finally:
            client.close()

    db_info = get_db_info(settings)
    if asyncio.run(run()):
        print(f"✓ MongoDB reachable at {db_info['url']}")
        return 0

    print(f"❌ MongoDB unreachable at {db_info['url']}")
    return 1


def _print_validation_error(e: ValidationError) -> None:
    print("\n❌ Configuration Error:\n")
    for error in e.errors():
        print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="insightboard",
        description="Read-only analytics API over insight records",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(title="commands", dest="command")

    parser_serve = subparsers.add_parser(
        "serve",
        help="Start the API server",
    )
    parser_serve.add_argument("--host", help="Override the configured host")
    parser_serve.add_argument("--port", type=int, help="Override the configured port")
    parser_serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development)",
    )
    parser_serve.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_serve.set_defaults(func=cmd_serve)

    parser_config = subparsers.add_parser(
        "config",
        help="Display effective configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_ping = subparsers.add_parser(
        "ping",
        help="Check MongoDB connectivity",
    )
    parser_ping.set_defaults(func=cmd_ping)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
