from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from focuscycle.data.storage import Storage


ACTOR_KEY = "actor"
GUEST_ID = "guest"

logger = logging.getLogger(__name__)


class ActorKind(str, Enum):
    GUEST = "guest"
    IDENTIFIED = "identified"


@dataclass(frozen=True)
class Actor:
    kind: ActorKind
    id: str
    token: str | None = None

    @classmethod
    def guest(cls) -> Actor:
        return cls(kind=ActorKind.GUEST, id=GUEST_ID)

    @property
    def is_guest(self) -> bool:
        return self.kind == ActorKind.GUEST


class IdentityProbe(Protocol):
    def current_actor(self) -> Actor: ...


class StoredIdentity:
    """Reads the signed-in actor from storage on every call, never caching it."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def current_actor(self) -> Actor:
        data = self._storage.get_setting(ACTOR_KEY)
        if not isinstance(data, dict):
            return Actor.guest()
        actor_id = data.get("id")
        if data.get("kind") != ActorKind.IDENTIFIED.value or not isinstance(actor_id, str) or not actor_id:
            return Actor.guest()
        token = data.get("token")
        return Actor(kind=ActorKind.IDENTIFIED, id=actor_id, token=token if isinstance(token, str) else None)

    def sign_in(self, actor_id: str, token: str | None = None) -> Actor:
        actor_id = actor_id.strip()
        if not actor_id:
            raise ValueError("Actor id cannot be empty")
        self._storage.set_setting(ACTOR_KEY, {"kind": ActorKind.IDENTIFIED.value, "id": actor_id, "token": token})
        logger.info("Signed in as %s", actor_id)
        return Actor(kind=ActorKind.IDENTIFIED, id=actor_id, token=token)

    def sign_out(self) -> None:
        self._storage.delete_setting(ACTOR_KEY)
        logger.info("Signed out; sessions will no longer be recorded")
