"""Redis caching service for destination analyses and provider tokens."""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from travel_intel.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ANALYSIS_KEY_PREFIX = "travel:analysis:"
TOKEN_KEY_PREFIX = "travel:token:"


class CacheService:
    """Redis cache for destination analyses and access tokens.

    When Redis is disabled or unreachable every lookup is a miss and every
    write is a no-op; callers never see a cache error.
    """

    def __init__(self, redis_url: Optional[str] = None, enabled: Optional[bool] = None):
        self.redis_url = redis_url or settings.REDIS_URL
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled
        self.analysis_ttl = settings.ANALYSIS_CACHE_TTL_S
        self._redis_client: Optional[redis.Redis] = None
        self._connection_failed = False

    async def _get_redis_client(self) -> Optional[redis.Redis]:
        """Get or create Redis client."""
        if not self.enabled or self._connection_failed:
            return None
        if self._redis_client is None:
            try:
                self._redis_client = redis.from_url(
                    self.redis_url, encoding="utf-8", decode_responses=True
                )
                await self._redis_client.ping()
                logger.info("Redis connection established for analysis caching")
            except Exception as e:
                logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
                self._redis_client = None
                self._connection_failed = True
        return self._redis_client

    def _analysis_key(self, lat: float, lng: float) -> str:
        """Cache key for a coordinate, rounded to ~11 m."""
        key_data = f"{lat:.4f}:{lng:.4f}"
        return f"{ANALYSIS_KEY_PREFIX}{hashlib.md5(key_data.encode()).hexdigest()}"

    async def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """Read a JSON document, or None on miss or error."""
        redis_client = await self._get_redis_client()

        if redis_client:
            try:
                cached = await redis_client.get(key)
                if cached:
                    logger.debug(f"Cache HIT for {key}")
                    return json.loads(cached)
                logger.debug(f"Cache MISS for {key}")
            except Exception as e:
                logger.warning(f"Redis get error: {str(e)}")

        return None

    async def set_json(self, key: str, data: Dict[str, Any], ttl: int) -> bool:
        """Write a JSON document with a TTL in seconds."""
        redis_client = await self._get_redis_client()

        if redis_client:
            try:
                await redis_client.setex(key, ttl, json.dumps(data))
                logger.debug(f"Cached {key} (TTL: {ttl}s)")
                return True
            except Exception as e:
                logger.warning(f"Redis set error: {str(e)}")

        return False

    async def get_analysis(self, lat: float, lng: float) -> Optional[Dict[str, Any]]:
        """Retrieve a cached destination analysis.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            Serialized DestinationAnalysis or None
        """
        return await self.get_json(self._analysis_key(lat, lng))

    async def set_analysis(
        self, lat: float, lng: float, data: Dict[str, Any], ttl: Optional[int] = None
    ) -> bool:
        """Cache a destination analysis.

        Args:
            lat: Latitude
            lng: Longitude
            data: Serialized DestinationAnalysis
            ttl: Time to live in seconds (default: 48 hours)

        Returns:
            True if cached successfully, False otherwise
        """
        return await self.set_json(self._analysis_key(lat, lng), data, ttl or self.analysis_ttl)

    async def get_token(self, name: str) -> Optional[str]:
        """Cached access token for a provider."""
        cached = await self.get_json(f"{TOKEN_KEY_PREFIX}{name}")
        return cached.get("access_token") if cached else None

    async def set_token(self, name: str, token: str, ttl: int) -> bool:
        """Cache a provider access token until shortly before it expires."""
        if ttl <= 0:
            return False
        return await self.set_json(f"{TOKEN_KEY_PREFIX}{name}", {"access_token": token}, ttl)

    async def invalidate_all_analyses(self) -> int:
        """Invalidate all cached destination analyses.

        Returns:
            Number of keys deleted
        """
        redis_client = await self._get_redis_client()

        if redis_client:
            try:
                keys = []
                async for key in redis_client.scan_iter(match=f"{ANALYSIS_KEY_PREFIX}*", count=100):
                    keys.append(key)

                if keys:
                    deleted = await redis_client.delete(*keys)
                    logger.info(f"Invalidated {deleted} cached analyses")
                    return deleted
                logger.info("No cached analyses to invalidate")
                return 0

            except Exception as e:
                logger.warning(f"Redis invalidate all error: {str(e)}")

        return 0

    async def is_available(self) -> bool:
        """True when Redis is enabled and reachable."""
        return await self._get_redis_client() is not None

    async def close(self):
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.close()
            self._redis_client = None
