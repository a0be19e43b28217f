from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from typing import Optional

from ..config import XP_PER_LEVEL
from ..entities import EntityKind, User, new_id
from ..errors import NotFound, PersistenceFailure, StoreError
from ..store import EntityStore
from .notify import ChangeNotifier

logger = logging.getLogger(__name__)

THEMES = ["system", "light", "dark", "colorful"]


def xp_threshold(level: int) -> int:
    return level * XP_PER_LEVEL


def progress_fraction(user: User) -> float:
    """Share of the XP bar to fill, capped at 1.0."""
    return min(user.current_xp / xp_threshold(user.level), 1.0)


class ProgressionLedger(ChangeNotifier):
    """Owns the single User: XP, level, streak and unlocked themes."""

    def __init__(self, store: EntityStore):
        super().__init__()
        self.store = store
        self._lock = threading.RLock()
        self.user: Optional[User] = None
        self.reload()

    def reload(self) -> Optional[User]:
        with self._lock:
            try:
                users = self.store.fetch_all(EntityKind.USER)
            except StoreError as e:
                raise PersistenceFailure("could not load user") from e
            if len(users) > 1:
                logger.warning("Invariant violated: %d users stored, expected one; using %s",
                               len(users), users[0].id)
            self.user = users[0] if users else None
            return self.user

    @property
    def has_user(self) -> bool:
        return self.user is not None

    def onboard(self, name: str, avatar: str = None) -> User:
        """Create the user, or rename the existing one."""
        if not name or not name.strip():
            raise ValueError("name is required")
        with self._lock:
            if self.user is None:
                self.user = User(id=new_id(), name=name.strip(), avatar=avatar)
                with self._saving("onboard"):
                    self.store.insert(self.user)
                logger.info("Created user %s", self.user.id)
            else:
                self.user.name = name.strip()
                self.user.avatar = avatar
                with self._saving("onboard"):
                    self.store.update(self.user)
            return self.user

    def grant_xp(self, amount: int) -> User:
        """Add XP, levelling up at most once per call.

        The threshold is the one for the level before the grant; any surplus
        stays in current_xp even when it would cover the next level too.
        """
        if amount < 0:
            raise ValueError("XP amount must not be negative")
        with self._lock:
            user = self._require_user()
            total = user.current_xp + amount
            required_xp = xp_threshold(user.level)
            if total >= required_xp:
                user.level += 1
                user.current_xp = total - required_xp
                logger.info("User %s reached level %d", user.id, user.level)
            else:
                user.current_xp = total
            with self._saving("grant_xp"):
                self.store.update(user)
            return user

    def record_streak_tick(self) -> User:
        with self._lock:
            user = self._require_user()
            user.streak += 1
            with self._saving("record_streak_tick"):
                self.store.update(user)
            return user

    def unlock_theme(self, theme: str) -> User:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        with self._lock:
            user = self._require_user()
            if theme in user.unlocked_themes:
                return user
            user.unlocked_themes.add(theme)
            with self._saving("unlock_theme"):
                self.store.update(user)
            return user

    def _require_user(self) -> User:
        if self.user is None:
            raise NotFound("no user; onboarding has not completed")
        return self.user

    @contextmanager
    def _saving(self, action: str):
        try:
            with self.store.transaction():
                yield
        except StoreError as e:
            logger.error("Saving user after %s failed; in-memory state is provisional", action)
            raise PersistenceFailure(f"{action} not saved") from e
        self._notify(self.user)
