import json

from loguru import logger
from redis.asyncio import Redis

from app.settings import REDIS_URL

_redis: Redis | None = None
STATS_TTL = 60  # 1 minute
STATS_KEY = "stats:admin-conversion"


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis


async def get_stats_cache() -> list | None:
    try:
        data = await get_redis().get(STATS_KEY)
        return json.loads(data) if data else None
    except Exception:
        logger.warning("Redis get failed, skipping stats cache", exc_info=True)
        return None


async def set_stats_cache(stats: list) -> None:
    try:
        await get_redis().setex(STATS_KEY, STATS_TTL, json.dumps(stats))
    except Exception:
        logger.warning("Redis set failed, skipping stats cache", exc_info=True)


async def invalidate_stats_cache() -> None:
    try:
        await get_redis().delete(STATS_KEY)
    except Exception:
        logger.warning("Redis invalidate failed for stats cache", exc_info=True)
