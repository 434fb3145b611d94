from app.core.cache import RedisCache

ACTIVITY_LISTING_KEY = RedisCache.build_key("activities", "all")


async def invalidate_activity_listing(cache: RedisCache) -> None:
    await cache.delete(ACTIVITY_LISTING_KEY)
