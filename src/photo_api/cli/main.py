"""photo-api CLI — run the server and administer users out-of-band.

Usage:
    photo-api serve                                  # Run the API with uvicorn
    photo-api init-db                                # Create tables (dev/test; use alembic in prod)
    photo-api create-user luki luki@mail.com         # Register a user (password prompted)
    photo-api token 1 luki@mail.com                  # Print a bearer token for a user
    photo-api check-password '$2b$12$...'            # Check a password against a stored hash
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Optional

import click
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from photo_api import __version__
from photo_api.auth.jwt import create_access_token
from photo_api.auth.password import hash_password, verify_password
from photo_api.config import settings
from photo_api.db.engine import build_engine
from photo_api.db.models import Base, User
from photo_api.schemas.user import UserCreate

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop — normal CLI invocation
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _fail(message: str):
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


database_url_option = click.option(
    "--database-url",
    envvar="PHOTO_API_DATABASE_URL",
    default=settings.database_url,
    show_default=False,
    help="SQLAlchemy async URL (defaults to PHOTO_API_DATABASE_URL)",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="photo-api")
def main():
    """Photo API — server and user administration."""


# ---------------------------------------------------------------------------
# photo-api serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=settings.host, help="Bind address")
@click.option("--port", default=settings.port, type=int, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes (dev only)")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("photo_api.main:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# photo-api init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
@database_url_option
def init_db(database_url: str):
    """Create all tables that don't exist yet."""
    _run(_init_db_impl(database_url))
    click.secho("Tables created.", fg="green")


async def _init_db_impl(database_url: str):
    engine = build_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# photo-api create-user
# ---------------------------------------------------------------------------


@main.command("create-user")
@click.argument("username")
@click.argument("email")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Clear-text password; stored only as a bcrypt hash",
)
@database_url_option
def create_user(username: str, email: str, password: str, database_url: str):
    """Register a user. Prints the new user's id."""
    try:
        body = UserCreate(username=username, email=email, password=password)
    except ValidationError as e:
        _fail("; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()))

    user_id = _run(_create_user_impl(body, database_url))
    if user_id is None:
        _fail(f"username or email already registered: {username} / {email}")
    click.secho(f"Created user #{user_id} ({body.username})", fg="green")


async def _create_user_impl(body: UserCreate, database_url: str) -> Optional[int]:
    engine = build_engine(database_url)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as db:
            user = User(
                username=body.username,
                email=body.email,
                password=hash_password(body.password),
            )
            db.add(user)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                return None
            return user.id
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# photo-api token
# ---------------------------------------------------------------------------


@main.command()
@click.argument("user_id", type=int)
@click.argument("email")
@click.option("--expires-minutes", type=int, default=None, help="Embed an expiry (default: none)")
def token(user_id: int, email: str, expires_minutes: Optional[int]):
    """Print a signed bearer token for USER_ID / EMAIL.

    The user is not looked up; an unknown id is rejected at request time.
    """
    click.echo(create_access_token(user_id, email, expires_minutes=expires_minutes))


# ---------------------------------------------------------------------------
# photo-api check-password
# ---------------------------------------------------------------------------


@main.command("check-password")
@click.argument("password_hash")
@click.option("--password", prompt=True, hide_input=True)
def check_password(password_hash: str, password: str):
    """Exit 0 when PASSWORD matches PASSWORD_HASH, 1 otherwise."""
    if verify_password(password, password_hash):
        click.secho("match", fg="green")
        return
    click.secho("no match", fg="red")
    sys.exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
