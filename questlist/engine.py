"""Wires the store and the three engine components together.

One Engine is built per app session with an explicit store; nothing here is
a module-level singleton.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, List

from .entities import Challenge
from .store import SqlEntityStore
from .services.challenges import ChallengeEngine
from .services.progression import ProgressionLedger
from .services.quests import QuestRegistry

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    store: SqlEntityStore
    clock: Callable[[], datetime] = datetime.now

    ledger: ProgressionLedger = field(init=False)
    challenges: ChallengeEngine = field(init=False)
    quests: QuestRegistry = field(init=False)

    def __post_init__(self):
        self.ledger = ProgressionLedger(self.store)
        self.challenges = ChallengeEngine(self.store, clock=self.clock)
        self.quests = QuestRegistry(self.store, challenges=self.challenges, clock=self.clock)
        logger.debug("Engine components created")

    def refresh_challenges(self) -> List[Challenge]:
        """Entry point for app start/foreground and explicit refreshes."""
        return self.challenges.refresh(self.quests.quests)


@contextmanager
def open_engine(session_factory=None, clock: Callable[[], datetime] = datetime.now) -> Iterator[Engine]:
    """Yield an Engine; whatever is still staged is committed on exit."""
    if session_factory is None:
        from .db import SessionLocal
        session_factory = SessionLocal
    store = SqlEntityStore(session_factory())
    try:
        yield Engine(store, clock=clock)
    finally:
        store.close()
