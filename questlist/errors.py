class QuestListError(Exception):
    """Base class for every error the engine raises."""


class StoreError(QuestListError):
    """The entity store could not fetch or commit."""


class PersistenceFailure(QuestListError):
    """A component mutation could not be persisted.

    In-memory state keeps the attempted change; treat it as provisional.
    The underlying StoreError is chained as __cause__.
    """


class NotFound(QuestListError):
    """The referenced entity is no longer stored.

    Raised by complete/delete; callers may treat it as already satisfied.
    """
