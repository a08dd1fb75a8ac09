"""The authenticated identity that creates and joins tournaments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from flask import g, session

from tourneyhub.errors import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """An authenticated user: opaque ``uid`` plus a display label."""

    uid: str
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Participant display name derived from the email local part."""
        from tourneyhub.tournament.normalizer import display_name_from_email

        return display_name_from_email(self.email)


def load_identity() -> None:
    """Populate ``g.identity`` from the Flask session."""
    uid = session.get("user_id")
    g.identity = Identity(uid=uid, email=session.get("email")) if uid else None


def current_identity() -> Identity | None:
    """Return the identity for the current request, if any."""
    return g.get("identity")


def require_identity(identity: Any) -> Identity:
    """Return ``identity`` or raise when nobody is logged in."""
    if not identity or not getattr(identity, "uid", None):
        raise UnauthorizedError()
    return identity
