from __future__ import annotations

from typing import Optional, Protocol

from .model import UserSettings


class SettingsRepository(Protocol):
    def get_for_user(self, user_id: str) -> Optional[UserSettings]:
        raise NotImplementedError

    def upsert(self, settings: UserSettings) -> UserSettings:
        """Create or overwrite the row of ``settings.user_id``."""

        raise NotImplementedError
