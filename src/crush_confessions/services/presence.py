"""Ephemeral typing presence for conversations."""

from __future__ import annotations

import logging
import math
import time
from collections import defaultdict
from collections.abc import Callable
from threading import Lock
from typing import Any, Protocol

import redis

from crush_confessions.core.settings import Settings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class PresenceTracker(Protocol):
    """Interface shared by the presence backends."""

    def record_typing(self, conversation_id: str, user_id: str) -> None:
        """Mark ``user_id`` as typing in ``conversation_id`` right now."""

    def active_typers(self, conversation_id: str, excluding: str) -> list[str]:
        """Return ids of users typing within the TTL, minus ``excluding``."""

    def forget(self, conversation_id: str) -> None:
        """Drop every entry of a conversation."""


class InMemoryPresenceTracker:
    """Per-process presence map guarded by a lock.

    Holds ``{conversation_id: {user_id: last_typed}}``; stale entries are
    pruned whenever a conversation is read.
    """

    def __init__(self, ttl_seconds: float = 3.0, clock: Clock = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, dict[str, float]] = defaultdict(dict)
        self._lock = Lock()

    def record_typing(self, conversation_id: str, user_id: str) -> None:
        with self._lock:
            self._entries[conversation_id][user_id] = self._clock()

    def active_typers(self, conversation_id: str, excluding: str) -> list[str]:
        now = self._clock()
        with self._lock:
            entries = self._entries.get(conversation_id)
            if not entries:
                return []
            for user_id, last_typed in list(entries.items()):
                if now - last_typed >= self._ttl:
                    del entries[user_id]
            if not entries:
                del self._entries[conversation_id]
                return []
            return [user_id for user_id in entries if user_id != excluding]

    def forget(self, conversation_id: str) -> None:
        with self._lock:
            self._entries.pop(conversation_id, None)


class RedisPresenceTracker:
    """Presence shared across processes through one redis hash per conversation."""

    key_prefix = "presence:typing:"

    def __init__(
        self,
        client: Any,
        ttl_seconds: float = 3.0,
        clock: Clock = time.time,
    ) -> None:
        self._redis = client
        self._ttl = ttl_seconds
        self._clock = clock

    def _key(self, conversation_id: str) -> str:
        return f"{self.key_prefix}{conversation_id}"

    def record_typing(self, conversation_id: str, user_id: str) -> None:
        key = self._key(conversation_id)
        pipe = self._redis.pipeline()
        pipe.hset(key, user_id, repr(self._clock()))
        pipe.expire(key, math.ceil(self._ttl) + 1)
        pipe.execute()

    def active_typers(self, conversation_id: str, excluding: str) -> list[str]:
        key = self._key(conversation_id)
        now = self._clock()
        active: list[str] = []
        stale: list[str] = []
        for raw_user, raw_ts in self._redis.hgetall(key).items():
            user_id = raw_user.decode() if isinstance(raw_user, bytes) else str(raw_user)
            try:
                last_typed = float(raw_ts)
            except (TypeError, ValueError):
                stale.append(user_id)
                continue
            if now - last_typed >= self._ttl:
                stale.append(user_id)
            elif user_id != excluding:
                active.append(user_id)
        if stale:
            self._redis.hdel(key, *stale)
        return active

    def forget(self, conversation_id: str) -> None:
        self._redis.delete(self._key(conversation_id))


def build_presence_tracker(config: Settings) -> PresenceTracker:
    """Create the presence backend selected by ``PRESENCE_BACKEND``."""
    if config.presence_backend == "redis":
        logger.info("Using redis typing presence at %s", config.redis_url)
        client = redis.from_url(config.redis_url)
        return RedisPresenceTracker(client, ttl_seconds=config.typing_ttl_seconds)
    return InMemoryPresenceTracker(ttl_seconds=config.typing_ttl_seconds)
