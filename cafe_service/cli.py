import asyncio

import click
import uvicorn

from cafe_service.core.logging import setup_logging
from cafe_service.db import AsyncSessionLocal, create_all, engine
from cafe_service.env import HOST, PORT
from cafe_service.seed import seed


async def _init_db(drop: bool) -> None:
    try:
        await create_all(engine, drop=drop)
    finally:
        await engine.dispose()


async def _seed() -> dict:
    try:
        async with AsyncSessionLocal() as db:
            return await seed(db)
    finally:
        await engine.dispose()


@click.group()
def cli() -> None:
    """Cafe order management service."""
    setup_logging()


@cli.command("init-db")
@click.option("--drop", is_flag=True, help="Drop all tables before creating them.")
def init_db(drop: bool) -> None:
    """Create the database tables."""
    asyncio.run(_init_db(drop))
    click.echo("Database tables created" + (" (dropped first)" if drop else ""))


@cli.command("seed")
def seed_command() -> None:
    """Replace all data with the sample menu and orders."""
    counts = asyncio.run(_seed())
    click.echo(f"Seeded {counts['products']} products and {counts['orders']} orders")


@cli.command("serve")
@click.option("--host", default=HOST, show_default=True, help="Bind address.")
@click.option("--port", default=PORT, show_default=True, type=int, help="Bind port.")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP service."""
    uvicorn.run("cafe_service.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
