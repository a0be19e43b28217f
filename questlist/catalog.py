"""Fixed daily challenge catalog.

Each ChallengeKind carries its description, XP reward and the predicate that
decides completion from a quest snapshot. Members are declared in catalog
order, which is also the evaluation order.
"""
from __future__ import annotations
import enum
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional

from .services.day_boundary import is_same_day, is_today

if TYPE_CHECKING:
    from .entities import Quest

Predicate = Callable[["List[Quest]", datetime], bool]

HIGH_PRIORITY_XP = 50
NOON_HOUR = 12


def _completed_today(quests, now):
    return [q for q in quests if q.is_completed and is_today(q.date, now)]


def completed_today_at_least(n: int) -> Predicate:
    def predicate(quests, now):
        return len(_completed_today(quests, now)) >= n
    return predicate


def all_morning_quests_completed(quests, now) -> bool:
    # Not limited to today: every quest dated before noon counts
    morning = [q for q in quests if q.date.hour < NOON_HOUR]
    return bool(morning) and all(q.is_completed for q in morning)


def distinct_categories_today(quests, now) -> bool:
    categories = {q.category for q in _completed_today(quests, now) if q.category}
    return len(categories) >= 3


def completed_high_xp_quest(quests, now) -> bool:
    return any(q.is_completed and q.xp_value >= HIGH_PRIORITY_XP for q in quests)


def two_in_a_row(quests, now) -> bool:
    completed = sorted((q for q in quests if q.is_completed), key=lambda q: q.date)
    if len(completed) < 2:
        return False
    previous, latest = completed[-2:]
    return is_same_day(previous.date, latest.date)


def completed_quest_with_deadline(quests, now) -> bool:
    return any(q.is_completed and q.deadline is not None for q in quests)


class ChallengeKind(enum.Enum):
    THREE_TODAY = ("Complete 3 quests today", 50, completed_today_at_least(3))
    MORNING_QUESTS = ("Finish all morning quests", 75, all_morning_quests_completed)
    # No predicate: nothing in the quest data says whether the streak held
    THREE_DAY_STREAK = ("Maintain a 3-day streak", 100, None)
    FIVE_IN_ONE_DAY = ("Complete 5 quests in one day", 150, completed_today_at_least(5))
    THREE_CATEGORIES = ("Complete quests from 3 different categories", 125, distinct_categories_today)
    HIGH_PRIORITY = ("Complete a high-priority quest", 80, completed_high_xp_quest)
    ALL_BEFORE_NOON = ("Complete all quests before noon", 200, all_morning_quests_completed)
    HIGH_XP_REWARD = ("Complete a quest with 50+ XP reward", 100, completed_high_xp_quest)
    TWO_IN_A_ROW = ("Complete 2 quests in a row", 60, two_in_a_row)
    WITH_DEADLINE = ("Complete a quest with a deadline", 90, completed_quest_with_deadline)

    def __init__(self, description: str, reward_xp: int, predicate: Optional[Predicate]):
        self.description = description
        self.reward_xp = reward_xp
        self.predicate = predicate

    def is_satisfied(self, quests, now: datetime) -> bool:
        if self.predicate is None:
            return False
        return self.predicate(quests, now)
