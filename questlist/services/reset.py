import logging

from ..entities import EntityKind
from ..errors import PersistenceFailure, StoreError
from ..store import EntityStore

logger = logging.getLogger(__name__)


def reset_all_data(store: EntityStore):
    """Delete every stored entity in one commit.

    The onboarding flag lives in the presentation layer; clearing it is the
    caller's job.
    """
    try:
        with store.transaction():
            for kind in EntityKind:
                store.delete_all(kind)
    except StoreError as e:
        raise PersistenceFailure("reset not saved") from e
    logger.warning("All quest, challenge and user data deleted")
