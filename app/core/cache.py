"""
Cache management using Redis
Provides caching utilities with fallback when Redis is unavailable
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError, RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)


class CacheManager:
    """
    Redis cache manager with automatic fallback

    Every operation degrades to a no-op (or a miss) when Redis is disabled
    or unreachable.
    """

    def __init__(self):
        self.redis_client: Optional[redis.Redis] = None
        self.connected = False

    async def connect(self) -> bool:
        """
        Connect to Redis

        Returns:
            True if connected successfully, False otherwise
        """
        if not settings.REDIS_ENABLED:
            logger.info("Redis caching is disabled")
            return False

        if self.connected:
            return True

        try:
            self.redis_client = redis.from_url(settings.get_redis_url(), decode_responses=True)
            await self.redis_client.ping()
            self.connected = True
            logger.info("Connected to Redis successfully")
        except (RedisError, ConnectionError, OSError) as e:
            logger.warning(f"Redis connection failed: {e}. Running without cache.")
            self.connected = False

        return self.connected

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.connected = False
            logger.info("Disconnected from Redis")

    async def get(self, key: str) -> Optional[Any]:
        """Get a JSON value from cache, None on miss or when Redis is unavailable"""
        if not self.connected:
            return None

        try:
            value = await self.redis_client.get(key)
            return json.loads(value) if value is not None else None
        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis get error for key {key}: {e}")
            self.connected = False
            return None
        except json.JSONDecodeError:
            return None

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """Store a JSON-serialisable value"""
        if not self.connected:
            return False

        try:
            await self.redis_client.setex(
                key, expire or settings.REDIS_CACHE_TTL, json.dumps(value, default=str)
            )
            return True
        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis set error for key {key}: {e}")
            self.connected = False
            return False

    async def clear_pattern(self, pattern: str) -> int:
        """
        Clear all keys matching pattern

        Args:
            pattern: Key pattern (e.g., "leaderboard:*")

        Returns:
            Number of keys deleted
        """
        if not self.connected:
            return 0

        try:
            keys = [key async for key in self.redis_client.scan_iter(match=pattern)]
            if keys:
                return await self.redis_client.delete(*keys)
            return 0
        except (RedisError, ConnectionError) as e:
            logger.error(f"Redis clear pattern error for pattern {pattern}: {e}")
            self.connected = False
            return 0


# Global cache instance
cache_manager = CacheManager()


def cache_key(*args, **kwargs) -> str:
    """
    Generate cache key from arguments

    Example:
        cache_key("leaderboard", timeframe="week", limit=50)
        -> "leaderboard:limit:50:timeframe:week"
    """
    parts = [str(arg) for arg in args]
    parts.extend([f"{k}:{v}" for k, v in sorted(kwargs.items())])
    return ":".join(parts)
