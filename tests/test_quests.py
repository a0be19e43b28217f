from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from questlist.catalog import ChallengeKind
from questlist.entities import EntityKind
from questlist.errors import NotFound, PersistenceFailure
from questlist.services.quests import QuestRegistry


def test_create_defaults_date_to_now(engine, clock):
    quests = engine.quests.create("Read a chapter", xp_value=20)
    assert len(quests) == 1
    quest = quests[0]
    assert quest.date == clock.now
    assert quest.deadline is None
    assert quest.is_completed is False


def test_create_uses_deadline_as_date(engine, clock):
    deadline = clock.now + timedelta(days=2)
    quest = engine.quests.create("File taxes", xp_value=60, deadline=deadline)[0]
    assert quest.date == deadline
    assert quest.deadline == deadline


def test_list_sorted_by_date(engine, clock):
    engine.quests.create("Later", xp_value=10, deadline=clock.now + timedelta(hours=5))
    engine.quests.create("Now", xp_value=10)
    engine.quests.create("Earlier", xp_value=10, deadline=clock.now - timedelta(hours=2))

    assert [q.title for q in engine.quests.quests] == ["Earlier", "Now", "Later"]


@pytest.mark.parametrize("title,xp_value", [("", 10), ("  ", 10), ("Walk", 0), ("Walk", -3)])
def test_create_validates_input(engine, title, xp_value):
    with pytest.raises(ValueError):
        engine.quests.create(title, xp_value=xp_value)


def test_complete_persists_and_reevaluates(engine, fresh_store):
    quest = engine.quests.create("Stretch", xp_value=10)[0]
    engine.quests.complete(quest)

    stored = fresh_store().get(EntityKind.QUEST, quest.id)
    assert stored.is_completed is True
    assert len(engine.challenges.challenges) == 10


def test_delete_removes_quest(engine, fresh_store):
    quest = engine.quests.create("Call mom", xp_value=10)[0]
    assert engine.quests.delete(quest) == []
    assert fresh_store().fetch_all(EntityKind.QUEST) == []


def test_delete_twice_raises_not_found(engine):
    quest = engine.quests.create("Call mom", xp_value=10)[0]
    engine.quests.delete(quest)
    with pytest.raises(NotFound):
        engine.quests.delete(quest)


def test_complete_deleted_quest_raises_not_found(engine):
    quest = engine.quests.create("Dishes", xp_value=10)[0]
    engine.quests.delete(quest)
    with pytest.raises(NotFound):
        engine.quests.complete(quest)


def test_delete_does_not_touch_progression(onboarded):
    quest = onboarded.quests.create("Gym", xp_value=80)[0]
    onboarded.quests.complete(quest)
    onboarded.ledger.grant_xp(quest.xp_value)
    onboarded.quests.delete(quest)

    user = onboarded.ledger.reload()
    assert (user.level, user.current_xp) == (1, 80)


def test_create_commit_failure_keeps_attempt_in_memory(engine, failing_commit, fresh_store):
    failing_commit()
    with pytest.raises(PersistenceFailure):
        engine.quests.create("Unsaved", xp_value=10)

    assert [q.title for q in engine.quests.quests] == ["Unsaved"]
    assert fresh_store().fetch_all(EntityKind.QUEST) == []


def test_quests_survive_restart(engine, fresh_store, clock):
    engine.quests.create("One", xp_value=10)
    engine.quests.create("Two", xp_value=15, category="health")

    registry = QuestRegistry(fresh_store(), clock=clock)
    assert sorted(q.title for q in registry.quests) == ["One", "Two"]


def test_completing_three_quests_today_completes_challenge(engine):
    for title in ["A", "B", "C"]:
        engine.quests.create(title, xp_value=10)
    for quest in list(engine.quests.quests):
        engine.quests.complete(quest)

    by_kind = {c.challenge_kind: c for c in engine.challenges.challenges}
    assert by_kind[ChallengeKind.THREE_TODAY].is_completed is True
    assert by_kind[ChallengeKind.FIVE_IN_ONE_DAY].is_completed is False


def test_notifies_with_refreshed_list(engine):
    seen = []
    engine.quests.subscribe(lambda quests: seen.append([q.title for q in quests]))
    engine.quests.create("First", xp_value=10, deadline=datetime(2025, 1, 16, 9, 0))
    engine.quests.create("Second", xp_value=10)
    assert seen == [["First"], ["Second", "First"]]


def test_complete_saved_when_challenge_update_fails(onboarded, store, fresh_store, monkeypatch, caplog):
    quest = onboarded.quests.create("Stretch", xp_value=10)[0]
    calls = []
    original_commit = store.session.commit

    def commit():
        calls.append(1)
        if len(calls) == 2:
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
        original_commit()
    monkeypatch.setattr(store.session, "commit", commit)

    quests = onboarded.quests.complete(quest)
    assert [q.is_completed for q in quests] == [True]
    assert fresh_store().get(EntityKind.QUEST, quest.id).is_completed is True
    assert "re-evaluation after quest change was not saved" in caplog.text

    user = onboarded.ledger.grant_xp(quest.xp_value)
    assert user.current_xp == 10

    def stored_state(kind):
        return {c.challenge_kind: c.is_completed for c in fresh_store().fetch_all(EntityKind.CHALLENGE)}[kind]
    assert stored_state(ChallengeKind.MORNING_QUESTS) is False
    onboarded.refresh_challenges()
    assert stored_state(ChallengeKind.MORNING_QUESTS) is True
