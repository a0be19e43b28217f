from datetime import datetime, timedelta

from questlist.catalog import ChallengeKind
from questlist.entities import Quest, new_id

NOW = datetime(2025, 1, 15, 15, 0)


def quest(date=NOW, completed=True, xp_value=10, category=None, deadline=None):
    return Quest(id=new_id(), title="q", xp_value=xp_value, date=date,
                 category=category, deadline=deadline, is_completed=completed)


def test_catalog_rewards_in_order():
    assert [(k.description, k.reward_xp) for k in ChallengeKind] == [
        ("Complete 3 quests today", 50),
        ("Finish all morning quests", 75),
        ("Maintain a 3-day streak", 100),
        ("Complete 5 quests in one day", 150),
        ("Complete quests from 3 different categories", 125),
        ("Complete a high-priority quest", 80),
        ("Complete all quests before noon", 200),
        ("Complete a quest with 50+ XP reward", 100),
        ("Complete 2 quests in a row", 60),
        ("Complete a quest with a deadline", 90),
    ]


def test_morning_quests():
    morning = NOW.replace(hour=8)
    kind = ChallengeKind.MORNING_QUESTS
    assert not kind.is_satisfied([], NOW)
    assert not kind.is_satisfied([quest(date=NOW)], NOW)
    assert kind.is_satisfied([quest(date=morning), quest(date=NOW, completed=False)], NOW)
    assert not kind.is_satisfied([quest(date=morning), quest(date=morning, completed=False)], NOW)


def test_before_noon_matches_morning():
    quests = [quest(date=NOW.replace(hour=11, minute=59))]
    assert ChallengeKind.ALL_BEFORE_NOON.is_satisfied(quests, NOW)
    assert ChallengeKind.MORNING_QUESTS.is_satisfied(quests, NOW)


def test_three_categories_counts_today_only():
    kind = ChallengeKind.THREE_CATEGORIES
    today = [quest(category="work"), quest(category="home"), quest(category="work")]
    assert not kind.is_satisfied(today, NOW)
    yesterday = quest(date=NOW - timedelta(days=1), category="health")
    assert not kind.is_satisfied(today + [yesterday], NOW)
    assert kind.is_satisfied(today + [quest(category="health")], NOW)


def test_high_xp_any_day():
    old = quest(date=NOW - timedelta(days=30), xp_value=50)
    assert ChallengeKind.HIGH_PRIORITY.is_satisfied([old], NOW)
    assert ChallengeKind.HIGH_XP_REWARD.is_satisfied([old], NOW)
    assert not ChallengeKind.HIGH_XP_REWARD.is_satisfied([quest(xp_value=49)], NOW)
    assert not ChallengeKind.HIGH_XP_REWARD.is_satisfied([quest(xp_value=90, completed=False)], NOW)


def test_two_in_a_row_needs_latest_two_on_same_day():
    kind = ChallengeKind.TWO_IN_A_ROW
    last_week = NOW - timedelta(days=7)
    assert not kind.is_satisfied([quest()], NOW)
    assert kind.is_satisfied([quest(date=last_week), quest(date=last_week + timedelta(hours=1))], NOW)
    assert not kind.is_satisfied([quest(date=last_week), quest(date=NOW)], NOW)
    assert kind.is_satisfied([quest(date=last_week), quest(date=NOW), quest(date=NOW)], NOW)


def test_deadline():
    kind = ChallengeKind.WITH_DEADLINE
    assert not kind.is_satisfied([quest()], NOW)
    assert not kind.is_satisfied([quest(deadline=NOW, completed=False)], NOW)
    assert kind.is_satisfied([quest(deadline=NOW)], NOW)


def test_streak_has_no_predicate():
    assert ChallengeKind.THREE_DAY_STREAK.predicate is None
    assert not ChallengeKind.THREE_DAY_STREAK.is_satisfied([quest() for _ in range(10)], NOW)
