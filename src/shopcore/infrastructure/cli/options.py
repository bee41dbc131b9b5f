"""Shared option parsing for the CLI commands."""

from __future__ import annotations

import functools

import click

from shopcore.domain.model.value_objects import CartOwner


def owner_options(fn):
    """Add ``--user`` / ``--session`` and pass a ``CartOwner`` as ``owner``."""

    @click.option("--user", "user_id", default=None, help="Authenticated user ID.")
    @click.option("--session", "session_id", default=None, help="Guest session token.")
    @functools.wraps(fn)
    def wrapper(user_id: str | None, session_id: str | None, **kwargs):
        if bool(user_id) == bool(session_id):
            raise click.UsageError("Exactly one of --user or --session is required.")
        owner = CartOwner.user(user_id) if user_id else CartOwner.session(session_id)
        return fn(owner=owner, **kwargs)

    return wrapper


def parse_attributes(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse ('size=M', 'color=red') into {'size': 'M', 'color': 'red'}."""
    result: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid attribute '{pair}'. Expected 'key=value'."
            )
        key, value = pair.split("=", 1)
        result[key.strip()] = value.strip()
    return result
