"""Leaderboard cache - short-lived copies of ranked leaderboards in Redis."""

import json
import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from babylog.schemas.scoring import LeaderboardEntry

logger = logging.getLogger(__name__)

KEY_PREFIX = "leaderboard:"
VERSION_KEY = f"{KEY_PREFIX}version"


class LeaderboardCache:
    """Caches leaderboard pages per (version, min_score, limit).

    Invalidation bumps the version instead of deleting keys: a reader that
    loaded scores before an award committed writes its page under the old
    version, where nobody looks any more. Old pages expire with their TTL.
    Redis failures count as a miss.
    """

    def __init__(self, redis: aioredis.Redis, ttl: int):
        self.redis = redis
        self.ttl = ttl

    def _key(self, version: int, min_score: int, limit: int) -> str:
        return f"{KEY_PREFIX}v{version}:{min_score}:{limit}"

    async def version(self) -> int | None:
        """Current cache generation, or None if Redis is unavailable."""
        try:
            raw = await self.redis.get(VERSION_KEY)
        except RedisError as exc:
            logger.warning("Leaderboard cache version read failed: %s", exc)
            return None
        return int(raw) if raw is not None else 0

    async def get(self, version: int, min_score: int, limit: int) -> list[LeaderboardEntry] | None:
        """Load a cached leaderboard, or None if expired/doesn't exist."""
        try:
            raw = await self.redis.get(self._key(version, min_score, limit))
        except RedisError as exc:
            logger.warning("Leaderboard cache read failed: %s", exc)
            return None
        if raw is None:
            return None
        return [LeaderboardEntry.model_validate(item) for item in json.loads(raw)]

    async def set(
        self, version: int, min_score: int, limit: int, entries: list[LeaderboardEntry]
    ) -> None:
        """Store a page under the version read *before* the scores were queried."""
        payload = json.dumps([entry.model_dump(mode="json") for entry in entries])
        try:
            await self.redis.set(self._key(version, min_score, limit), payload, ex=self.ttl)
        except RedisError as exc:
            logger.warning("Leaderboard cache write failed: %s", exc)

    async def invalidate(self) -> None:
        """Start a new generation so every cached page is ignored (scores changed)."""
        try:
            await self.redis.incr(VERSION_KEY)
        except RedisError as exc:
            logger.warning("Leaderboard cache invalidation failed: %s", exc)
