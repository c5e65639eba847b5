from __future__ import annotations

from typing import Any, Dict, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger

from .errors import ProviderError
from .provider_client import ProviderClient

log = get_logger(__name__)


class LocationCache:
    """
    Redis-backed query -> location id cache.
    Key: loc:{normalized query}. Errors are logged and read as misses.
    """

    def __init__(self, r: redis.Redis, ttl_seconds: int):
        self.r = r
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _k(query: str) -> str:
        return f"loc:{query.strip().lower()}"

    async def get(self, query: str) -> Optional[str]:
        try:
            return await self.r.get(self._k(query))
        except (RedisError, OSError) as e:
            log.warning("location_cache_read_failed query=%s err=%s", query, repr(e))
            return None

    async def set(self, query: str, location_id: str) -> None:
        try:
            await self.r.set(self._k(query), location_id, ex=self.ttl_seconds)
        except (RedisError, OSError) as e:
            log.warning("location_cache_write_failed query=%s err=%s", query, repr(e))


def first_location_id(locations: List[Dict[str, Any]]) -> Optional[str]:
    # provider ranking is trusted; no local re-ranking
    if not locations:
        return None
    location_id = locations[0].get("id")
    if location_id in (None, ""):
        return None
    return str(location_id)


class LocationResolver:
    """Maps destination text (and an optional IATA hint) to a hotel-provider city id."""

    def __init__(self, client: ProviderClient, cache: Optional[LocationCache] = None):
        self._client = client
        self._cache = cache

    async def resolve(self, destination: str, iata_hint: Optional[str] = None) -> Optional[str]:
        """
        Try the IATA hint first, then the free-text destination.
        Returns None when neither lookup yields a location; that is a valid outcome, not an error.
        """
        for query in (iata_hint, destination):
            if not query:
                continue
            location_id = await self._lookup(query)
            if location_id:
                return location_id
        log.info("location_not_found destination=%s iata=%s", destination, iata_hint)
        return None

    async def _lookup(self, query: str) -> Optional[str]:
        if self._cache is not None:
            cached = await self._cache.get(query)
            if cached:
                log.debug("location_cache_hit query=%s", query)
                return cached

        try:
            locations = await self._client.lookup_locations(query)
        except ProviderError as e:
            log.warning("location_lookup_failed query=%s err=%s", query, e)
            return None

        location_id = first_location_id(locations)
        if location_id and self._cache is not None:
            await self._cache.set(query, location_id)
        return location_id
