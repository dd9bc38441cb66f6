"""Data-mapper store: records are saved through a session/entity manager."""

from __future__ import annotations

from typing import Any

from datafactory.stores.base import AbstractStore


class RepositoryStore(AbstractStore):
    """Store backed by a unit-of-work session.

    The session is anything with ``add``, ``delete`` and ``flush``, which
    covers a SQLAlchemy ``Session``. Records are flushed as soon as they are
    saved so generated primary keys are available to ``factory|`` relations.

    Args:
        session: The entity manager handed out by the ORM dependency.
    """

    def __init__(self, session: Any) -> None:
        super().__init__()
        self.session = session

    def _save(self, obj: Any) -> None:
        self.session.add(obj)
        self.session.flush()

    def _delete(self, obj: Any) -> None:
        self.session.delete(obj)

    def _flush(self) -> None:
        self.session.flush()
