"""Entity store adapter.

Components talk to storage only through the EntityStore protocol. The
SQLAlchemy implementation stages every insert/update/delete in one session
and writes nothing until commit(). Writers wrap their staging in
transaction(), which keeps other threads off the session until the staged
changes are committed or rolled back. Rows are converted to detached entities on
the way out, so what a component holds in memory is independent of the
session's fate.
"""
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from typing import ContextManager, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .catalog import ChallengeKind
from .entities import Challenge, EntityKind, Quest, User
from .errors import StoreError
from .models import ChallengeRow, QuestRow, UserRow

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    def fetch_all(self, kind: EntityKind, sort: Optional[str] = None) -> list: ...

    def get(self, kind: EntityKind, entity_id: str): ...

    def insert(self, entity) -> None: ...

    def update(self, entity) -> None: ...

    def delete(self, entity) -> bool: ...

    def delete_all(self, kind: EntityKind) -> None: ...

    def commit(self) -> None: ...

    def transaction(self) -> ContextManager: ...


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        avatar=row.avatar,
        current_xp=row.current_xp or 0,
        level=row.level or 1,
        streak=row.streak or 0,
        unlocked_themes=set(row.unlocked_themes or []),
    )


def _quest_from_row(row: QuestRow) -> Quest:
    return Quest(
        id=row.id,
        title=row.title,
        xp_value=row.xp_value,
        date=row.date,
        description=row.description,
        category=row.category,
        deadline=row.deadline,
        is_completed=bool(row.is_completed),
    )


def _challenge_from_row(row: ChallengeRow) -> Challenge:
    return Challenge(
        id=row.id,
        challenge_kind=ChallengeKind[row.kind],
        description=row.description,
        reward_xp=row.reward_xp,
        date=row.date,
        is_completed=bool(row.is_completed),
    )


def _copy_user(user: User, row: UserRow):
    row.name = user.name
    row.avatar = user.avatar
    row.current_xp = user.current_xp
    row.level = user.level
    row.streak = user.streak
    row.unlocked_themes = sorted(user.unlocked_themes)


def _copy_quest(quest: Quest, row: QuestRow):
    row.title = quest.title
    row.description = quest.description
    row.xp_value = quest.xp_value
    row.category = quest.category
    row.date = quest.date
    row.deadline = quest.deadline
    row.is_completed = quest.is_completed


def _copy_challenge(challenge: Challenge, row: ChallengeRow):
    row.kind = challenge.challenge_kind.name
    row.description = challenge.description
    row.reward_xp = challenge.reward_xp
    row.date = challenge.date
    row.is_completed = challenge.is_completed


_ROWS = {
    EntityKind.USER: (UserRow, _user_from_row, _copy_user),
    EntityKind.QUEST: (QuestRow, _quest_from_row, _copy_quest),
    EntityKind.CHALLENGE: (ChallengeRow, _challenge_from_row, _copy_challenge),
}


class SqlEntityStore:
    """EntityStore over a single SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session
        self._lock = threading.RLock()
        self._depth = 0

    def fetch_all(self, kind: EntityKind, sort: Optional[str] = None) -> list:
        row_cls, to_entity, _ = _ROWS[kind]
        with self._lock:
            try:
                query = self.session.query(row_cls)
                if sort:
                    query = query.order_by(getattr(row_cls, sort).asc(), row_cls.id)
                return [to_entity(row) for row in query.all()]
            except SQLAlchemyError as e:
                logger.exception("Fetching %s failed", kind.value)
                self.session.rollback()
                raise StoreError(f"fetch {kind.value} failed") from e

    def get(self, kind: EntityKind, entity_id: str):
        row_cls, to_entity, _ = _ROWS[kind]
        with self._lock:
            try:
                row = self.session.get(row_cls, entity_id)
            except SQLAlchemyError as e:
                logger.exception("Fetching %s %s failed", kind.value, entity_id)
                self.session.rollback()
                raise StoreError(f"get {kind.value} failed") from e
            return to_entity(row) if row is not None else None

    def insert(self, entity) -> None:
        row_cls, _, copy = _ROWS[entity.entity_kind]
        with self._lock:
            row = row_cls(id=entity.id)
            copy(entity, row)
            self.session.add(row)

    def update(self, entity) -> None:
        row_cls, _, copy = _ROWS[entity.entity_kind]
        with self._lock:
            row = self.session.get(row_cls, entity.id)
            if row is None:
                # Updating something that was never committed writes it fresh
                row = row_cls(id=entity.id)
                self.session.add(row)
            copy(entity, row)

    def delete(self, entity) -> bool:
        """Stage removal of entity. Returns False when no such row exists."""
        row_cls, _, _ = _ROWS[entity.entity_kind]
        with self._lock:
            row = self.session.get(row_cls, entity.id)
            if row is None:
                return False
            self.session.delete(row)
            return True

    def delete_all(self, kind: EntityKind) -> None:
        row_cls, _, _ = _ROWS[kind]
        with self._lock:
            # Bulk delete skips the identity map, so drop pending rows first
            for obj in list(self.session.new):
                if isinstance(obj, row_cls):
                    self.session.expunge(obj)
            try:
                self.session.query(row_cls).delete(synchronize_session="fetch")
            except SQLAlchemyError as e:
                logger.exception("Deleting all %s failed", kind.value)
                self.session.rollback()
                raise StoreError(f"delete {kind.value} failed") from e

    def commit(self) -> None:
        with self._lock:
            try:
                self.session.commit()
            except SQLAlchemyError as e:
                logger.exception("Commit failed")
                self.session.rollback()
                raise StoreError("commit failed") from e

    @contextmanager
    def transaction(self):
        """Stage changes and commit them as one unit.

        Holds the session lock throughout. An exception inside the block rolls
        back everything staged in it; a nested block joins the outer one.
        """
        with self._lock:
            self._depth += 1
            try:
                yield self
                if self._depth == 1:
                    self.commit()
            except BaseException:
                if self._depth == 1:
                    self.session.rollback()
                raise
            finally:
                self._depth -= 1

    def close(self) -> None:
        """Flush whatever is still staged and release the session."""
        with self._lock:
            try:
                if self.session.new or self.session.dirty or self.session.deleted:
                    self.commit()
            finally:
                self.session.close()


def counts(store: EntityStore) -> Dict[str, int]:
    return {kind.value: len(store.fetch_all(kind)) for kind in EntityKind}
