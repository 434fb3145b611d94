import json
from typing import Any, Optional
import redis.asyncio as redis


class RedisCache:
    """JSON values in Redis. Anything json can't encode is stored via str()."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    async def get(self, key: str) -> Optional[Any]:
        data = await self.redis.get(key)
        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any, expire: int = 60) -> None:
        """Store value under key for expire seconds"""
        await self.redis.set(key, json.dumps(value, default=str), ex=expire)

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)

    @staticmethod
    def build_key(*parts) -> str:
        return ":".join(str(part) for part in parts)
