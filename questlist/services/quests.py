from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, List, Optional

from ..entities import EntityKind, Quest, new_id
from ..errors import NotFound, PersistenceFailure, StoreError
from ..store import EntityStore
from .notify import ChangeNotifier

logger = logging.getLogger(__name__)


class QuestRegistry(ChangeNotifier):
    """Owns the quest collection and keeps `quests` sorted by date.

    Every successful mutation re-reads the full list and hands it to the
    challenge engine (when one is attached) for a re-evaluation pass.
    """

    def __init__(self, store: EntityStore, challenges=None, clock: Callable[[], datetime] = datetime.now):
        super().__init__()
        self.store = store
        self.challenges = challenges
        self.clock = clock
        self._lock = threading.RLock()
        self.quests: List[Quest] = []
        self.reload()

    def reload(self) -> List[Quest]:
        with self._lock:
            try:
                self.quests = self.store.fetch_all(EntityKind.QUEST, sort="date")
            except StoreError as e:
                raise PersistenceFailure("could not load quests") from e
            return self.quests

    def get(self, quest_id: str) -> Optional[Quest]:
        return next((q for q in self.quests if q.id == quest_id), None)

    def create(
        self,
        title: str,
        description: Optional[str] = None,
        xp_value: int = 10,
        category: Optional[str] = None,
        deadline: Optional[datetime] = None,
    ) -> List[Quest]:
        if not title or not title.strip():
            raise ValueError("title is required")
        if xp_value <= 0:
            raise ValueError("xp_value must be positive")
        with self._lock:
            quest = Quest(
                id=new_id(),
                title=title.strip(),
                description=description or None,
                xp_value=xp_value,
                category=category or None,
                date=deadline or self.clock(),
                deadline=deadline,
            )
            self.quests.append(quest)
            with self._saving("create", quest):
                self.store.insert(quest)
            self._after_save()
            return self.quests

    def complete(self, quest: Quest) -> List[Quest]:
        """Mark quest completed. Does not grant XP; that is the ledger's job."""
        with self._lock:
            with self._saving("complete", quest):
                self._require_stored(quest)
                quest.is_completed = True
                self.store.update(quest)
            self._after_save()
            return self.quests

    def delete(self, quest: Quest) -> List[Quest]:
        with self._lock:
            with self._saving("delete", quest):
                self._require_stored(quest)
                self.store.delete(quest)
                self.quests = [q for q in self.quests if q.id != quest.id]
            self._after_save()
            return self.quests

    def _require_stored(self, quest: Quest):
        try:
            stored = self.store.get(EntityKind.QUEST, quest.id)
        except StoreError as e:
            raise PersistenceFailure("could not look up quest") from e
        if stored is None:
            logger.info("Quest %s is already gone", quest.id)
            self.reload()
            raise NotFound(f"quest {quest.id} not found")

    @contextmanager
    def _saving(self, action: str, quest: Quest):
        try:
            with self.store.transaction():
                yield
        except StoreError as e:
            logger.error("Saving quest %s after %s failed", quest.id, action)
            raise PersistenceFailure(f"{action} quest not saved") from e

    def _after_save(self):
        self.reload()
        self._notify(self.quests)
        if self.challenges is None:
            return
        try:
            self.challenges.refresh(self.quests)
        except PersistenceFailure:
            # The quest change is saved; the next refresh re-evaluates
            logger.warning("Challenge re-evaluation after quest change was not saved")
