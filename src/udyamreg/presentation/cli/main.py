"""
CLI entry point: run the API, resolve a PIN code once, or create the tables.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Optional

from udyamreg import __version__
from udyamreg.config.settings import Settings, create_settings
from udyamreg.core.errors import InvalidFormatError, RegistrationError


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="udyamreg",
        description="Udyam Registration - PIN code resolution and registration API",
    )

    subparsers = parser.add_subparsers(dest="command", help="available commands")

    serve_parser = subparsers.add_parser("serve", help="run the HTTP API")
    serve_parser.add_argument("--host", help="bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="port (default from config)")
    serve_parser.add_argument("--config", "-c", help="config file path")

    lookup_parser = subparsers.add_parser("lookup", help="resolve a PIN code through cache and upstream")
    lookup_parser.add_argument("pincode", help="6-digit PIN code")
    lookup_parser.add_argument("--config", "-c", help="config file path")

    init_parser = subparsers.add_parser("init-db", help="create database tables")
    init_parser.add_argument("--config", "-c", help="config file path")

    parser.add_argument("--version", "-v", action="store_true", help="show version")

    return parser


def _serve(settings: Settings, host: Optional[str], port: Optional[int]) -> int:
    import uvicorn

    from udyamreg.api.main import create_app

    app = create_app(settings)
    uvicorn.run(app, host=host or settings.api.host, port=port or settings.api.port)
    return 0


async def _lookup(settings: Settings, pincode: str) -> int:
    from udyamreg.application.services import LocationResolutionService
    from udyamreg.infrastructure.api_clients import PostalPincodeClient
    from udyamreg.infrastructure.stores import SqlAlchemyLocationCache

    cache = SqlAlchemyLocationCache(settings.database.url)
    async with PostalPincodeClient.from_config(settings.upstream) as upstream:
        service = LocationResolutionService(cache, upstream)
        try:
            resolution = await service.resolve(pincode)
        except InvalidFormatError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 2
        finally:
            cache.close()

    out = resolution.to_audit_details()
    if resolution.found:
        out["data"] = resolution.record.to_dict()
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0 if resolution.found else 1


def _init_db(settings: Settings) -> int:
    from udyamreg.infrastructure.stores.models import Base
    from udyamreg.infrastructure.stores.sqlalchemy_db import SessionProvider

    provider = SessionProvider(settings.database.url)
    Base.metadata.create_all(provider.engine)
    provider.dispose()
    print(f"Tables created at {settings.database.url}")
    return 0


def run_cli(args: Optional[list] = None) -> int:
    """Run the CLI and return an exit code."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.version:
        print(f"udyamreg {__version__}")
        return 0

    if not parsed.command:
        parser.print_help()
        return 0

    try:
        settings = create_settings(parsed.config)

        if parsed.command == "serve":
            return _serve(settings, parsed.host, parsed.port)

        if parsed.command == "lookup":
            from udyamreg.infrastructure.logging import configure_logging

            configure_logging(settings.logging)
            return asyncio.run(_lookup(settings, parsed.pincode))

        if parsed.command == "init-db":
            return _init_db(settings)

        return 0

    except RegistrationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
