"""Redis client factory — used for rate limiting only.

Never used for pool totals or settlement state (those go through PostgreSQL).
The client is created by the app factory and closed in the lifespan shutdown.
"""

import redis.asyncio as aioredis


def build_redis(redis_url: str) -> aioredis.Redis:
    """Create a lazily-connecting Redis client (no I/O until first command)."""
    return aioredis.from_url(redis_url, decode_responses=True)


async def close_redis(client: aioredis.Redis | None) -> None:
    if client is not None:
        await client.aclose()
