"""Daily challenge batch: generation, refresh and completion.

A batch is the full set of challenges sharing one generation timestamp. It
is Fresh while that timestamp falls on today's local calendar day and Stale
afterwards; a stale or empty batch is replaced wholesale by a new one built
from the catalog. Each challenge moves Pending -> Completed once, either by
its predicate holding for the quest snapshot or by a manual complete().
"""
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, List

from ..catalog import ChallengeKind
from ..entities import Challenge, EntityKind, Quest, new_id
from ..errors import NotFound, PersistenceFailure, StoreError
from ..store import EntityStore
from .day_boundary import is_same_day
from .notify import ChangeNotifier

logger = logging.getLogger(__name__)

BATCH_SIZE = len(ChallengeKind)


def build_batch(now: datetime) -> List[Challenge]:
    return [
        Challenge(
            id=new_id(),
            challenge_kind=kind,
            description=kind.description,
            reward_xp=kind.reward_xp,
            date=now,
        )
        for kind in ChallengeKind
    ]


def _catalog_order(challenge: Challenge) -> int:
    return list(ChallengeKind).index(challenge.challenge_kind)


class ChallengeEngine(ChangeNotifier):

    def __init__(self, store: EntityStore, clock: Callable[[], datetime] = datetime.now):
        super().__init__()
        self.store = store
        self.clock = clock
        self._lock = threading.RLock()
        self.challenges: List[Challenge] = []

    def load(self) -> List[Challenge]:
        with self._lock:
            try:
                batch = self.store.fetch_all(EntityKind.CHALLENGE)
            except StoreError as e:
                raise PersistenceFailure("could not load challenges") from e
            self.challenges = sorted(batch, key=_catalog_order)
            return self.challenges

    def is_stale(self, now: datetime) -> bool:
        if not self.challenges:
            return True
        first = self.challenges[0].date
        if any(not is_same_day(c.date, first) for c in self.challenges):
            logger.warning("Invariant violated: challenges from more than one day are stored; regenerating")
            return True
        return not is_same_day(first, now)

    def refresh(self, quests: List[Quest]) -> List[Challenge]:
        """Regenerate the batch if needed, then evaluate pending challenges.

        `quests` is the caller's snapshot; it is not re-fetched here. Loading,
        replacing and evaluating the batch happen in one store transaction.
        """
        with self._lock:
            now = self.clock()
            with self._saving("refresh"):
                self.load()
                regenerated = self.is_stale(now)
                if regenerated:
                    self._stage_new_batch(now)

                satisfied = [
                    c for c in self.challenges
                    if not c.is_completed and c.challenge_kind.is_satisfied(quests, now)
                ]
                for challenge in satisfied:
                    challenge.is_completed = True
                    self.store.update(challenge)
                    logger.info("Challenge completed: %s", challenge.description)
            if regenerated or satisfied:
                self._notify(self.challenges)
            return self.challenges

    def complete(self, challenge: Challenge) -> None:
        with self._lock:
            with self._saving("complete"):
                try:
                    stored = self.store.get(EntityKind.CHALLENGE, challenge.id)
                except StoreError as e:
                    raise PersistenceFailure("could not look up challenge") from e
                if stored is None:
                    raise NotFound(f"challenge {challenge.id} not found")
                challenge.is_completed = True
                if stored.is_completed:
                    return
                for current in self.challenges:
                    if current.id == challenge.id:
                        current.is_completed = True
                self.store.update(challenge)
            self._notify(self.challenges)

    def _stage_new_batch(self, now: datetime):
        logger.info("Generating challenge batch for %s", now.date().isoformat())
        self.store.delete_all(EntityKind.CHALLENGE)
        self.challenges = build_batch(now)
        for challenge in self.challenges:
            self.store.insert(challenge)

    @contextmanager
    def _saving(self, action: str):
        try:
            with self.store.transaction():
                yield
        except StoreError as e:
            logger.error("Saving challenges after %s failed", action)
            raise PersistenceFailure(f"{action} challenges not saved") from e
