"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from shopcore.infrastructure.config import Settings
from shopcore.infrastructure.persistence.json_store import (
    JsonDocumentStore,
    JsonUnitOfWork,
)


def unit_of_work(settings: Settings | None = None) -> JsonUnitOfWork:
    settings = settings or Settings.from_env()
    return JsonUnitOfWork(JsonDocumentStore(settings.store_path))
