# src/study_tracker/core/identity.py

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from .ports import KeyValueStore

logger = logging.getLogger(__name__)

USER_ID_KEY = "studytracker-user"


@dataclass(slots=True, frozen=True)
class SessionIdentity:
    """
    Per-installation user id sent as `userId` to the remote backend.

    A random token that groups tasks by installation. Not a credential.
    """

    user_id: str


def load_or_create_identity(kv: KeyValueStore) -> SessionIdentity:
    """Reuse the stored user id, or generate one and store it for next time."""
    existing = (kv.get(USER_ID_KEY) or "").strip()
    if existing:
        return SessionIdentity(user_id=existing)

    user_id = str(uuid.uuid4())
    kv.set(USER_ID_KEY, user_id)
    logger.info("Generated new session user id=%s", user_id)
    return SessionIdentity(user_id=user_id)
