from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


@dataclass(frozen=True)
class RedisConfig:
    """Connection settings for the optional cache. Timeouts stay short so a slow Redis never stalls a search."""

    url: str
    socket_timeout: float = 0.5
    health_check_interval: int = 15

    @classmethod
    def from_env(cls) -> Optional["RedisConfig"]:
        url = os.getenv("REDIS_URL", "").strip()
        if not url:
            return None
        return cls(url=url, socket_timeout=float(os.getenv("REDIS_SOCKET_TIMEOUT_SECONDS", "0.5")))


class RedisClient:
    def __init__(self, cfg: RedisConfig):
        self._cfg = cfg
        self._conn: Optional[redis.Redis] = None

    @classmethod
    def from_env(cls) -> Optional["RedisClient"]:
        """None when REDIS_URL is unset; caching is then disabled."""
        cfg = RedisConfig.from_env()
        return cls(cfg) if cfg is not None else None

    @property
    def url(self) -> str:
        return self._cfg.url

    def client(self) -> redis.Redis:
        # connects on first command, not here
        if self._conn is None:
            self._conn = redis.from_url(
                self._cfg.url,
                decode_responses=True,
                socket_timeout=self._cfg.socket_timeout,
                socket_connect_timeout=self._cfg.socket_timeout,
                health_check_interval=self._cfg.health_check_interval,
            )
        return self._conn

    async def ping(self) -> bool:
        try:
            return bool(await self.client().ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.aclose()
        self._conn = None
