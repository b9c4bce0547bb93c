import asyncio
import os
from typing import Optional, Union

import redis.asyncio as redis


class RedisClient:
    _instance: Optional[redis.Redis] = None
    _lock: asyncio.Lock = asyncio.Lock()

    @classmethod
    async def get_client(cls) -> redis.Redis:
        """
        Return the shared Redis connection, creating it on first use.
        :return: redis.Redis instance
        """
        async with cls._lock:
            if cls._instance is None:
                cls._instance = await redis.from_url(
                    f"redis://{os.getenv('REDIS_HOST', 'localhost')}:{os.getenv('REDIS_PORT', '6379')}",
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
        return cls._instance

    @classmethod
    async def set_if_absent(
        cls, key: str, value: Union[str, int, float, bytes], ex: Optional[int] = None
    ) -> bool:
        """
        Set ``key`` only when it does not exist yet.
        :return: True if the key was written, False if it was already present.
        """
        client = await cls.get_client()
        return bool(await client.set(key, value, ex=ex, nx=True))

    @classmethod
    async def delete(cls, key: str) -> None:
        client = await cls.get_client()
        await client.delete(key)

    @classmethod
    async def close(cls) -> None:
        """
        Closes the redis connection.
        """
        if cls._instance is not None:
            await cls._instance.aclose()
            cls._instance = None
