"""Fruitstand command line: schema migrations, seeding and the API server.

Usage examples:
    fruitstand migrate
    fruitstand rollback --revision base
    fruitstand seed --file fruits.json
    fruitstand serve --port 8000
"""

from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

from fruitstand.foundation.exceptions import DomainError
from fruitstand.fruits.seeds import DEFAULT_FRUITS, load_seed_file, run_seed
from fruitstand.infra import migrations
from fruitstand.infra.database import DatabaseManager, DatabaseSettings
from fruitstand.infra.logging import configure_logging, get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fruitstand", description="Fruitstand CRUD API")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL; overrides the DATABASE_* environment settings",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    migrate = commands.add_parser("migrate", help="Apply schema migrations")
    migrate.add_argument("--revision", default="head")

    rollback = commands.add_parser("rollback", help="Roll back schema migrations")
    rollback.add_argument("--revision", default="-1")

    seed = commands.add_parser("seed", help="Replace table contents with seed rows")
    seed.add_argument("--file", type=Path, default=None, help="JSON array of {name, color}")

    serve = commands.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    return parser


async def _seed(settings: DatabaseSettings, seed_file: Path | None) -> int:
    rows = load_seed_file(seed_file) if seed_file is not None else list(DEFAULT_FRUITS)
    manager = DatabaseManager(settings)
    try:
        async with manager.session() as session:
            return await run_seed(session, rows)
    finally:
        await manager.dispose()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        if args.command == "migrate":
            migrations.upgrade(args.database_url, revision=args.revision)
            logger.info("migrations_applied", revision=args.revision)
        elif args.command == "rollback":
            migrations.downgrade(args.database_url, revision=args.revision)
            logger.info("migrations_rolled_back", revision=args.revision)
        elif args.command == "seed":
            settings = (
                DatabaseSettings(url=args.database_url)
                if args.database_url
                else DatabaseSettings()
            )
            count = asyncio.run(_seed(settings, args.file))
            logger.info("seed_complete", count=count)
        elif args.command == "serve":
            import uvicorn

            if args.database_url:
                # The app reads DatabaseSettings in the uvicorn process.
                os.environ["DATABASE_URL"] = args.database_url
            uvicorn.run("fruitstand.main:app", host=args.host, port=args.port, reload=args.reload)
    except DomainError as exc:
        logger.error(
            "command_failed",
            command=args.command,
            error_code=exc.error_code,
            error=str(exc),
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
