"""In-memory entities handed out by the store.

These are detached from the SQLAlchemy session: a failed commit rolls the
session back but leaves these objects as the caller last changed them.
"""
from __future__ import annotations
import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set

from .catalog import ChallengeKind


class EntityKind(enum.Enum):
    USER = "user"
    QUEST = "quest"
    CHALLENGE = "challenge"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class User:
    id: str
    name: str
    avatar: Optional[str] = None
    current_xp: int = 0
    level: int = 1
    streak: int = 0
    unlocked_themes: Set[str] = field(default_factory=set)

    entity_kind = EntityKind.USER


@dataclass
class Quest:
    id: str
    title: str
    xp_value: int
    date: datetime
    description: Optional[str] = None
    category: Optional[str] = None
    deadline: Optional[datetime] = None
    is_completed: bool = False

    entity_kind = EntityKind.QUEST


@dataclass
class Challenge:
    id: str
    challenge_kind: ChallengeKind
    description: str
    reward_xp: int
    date: datetime
    is_completed: bool = False

    entity_kind = EntityKind.CHALLENGE
