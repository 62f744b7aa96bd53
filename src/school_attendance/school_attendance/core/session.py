from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from flask import session


class UserProvider(Protocol):
    """Supplies the identity of the signed-in user, or None without a session."""

    def current_user_id(self) -> Optional[str]:
        raise NotImplementedError


@dataclass(frozen=True)
class StaticUser:
    """Fixed identity, used by scripts and tests."""

    user_id: Optional[str]

    def current_user_id(self) -> Optional[str]:
        return self.user_id


class FlaskSessionUser:
    """Reads the user id placed in the Flask session by the auth provider."""

    def current_user_id(self) -> Optional[str]:
        user_id = session.get("user_id")
        return str(user_id) if user_id else None
