"""Pick the cache backend at startup."""

import redis

from app import config
from app.cache_store.base import CacheStore
from app.cache_store.memory import InMemoryCacheStore
from app.cache_store.redis import RedisCacheStore
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="cache_store/factory")


def build_cache_store(settings: config.Settings | None = None) -> CacheStore:
    """Use Redis when a URL is configured and answers PING, else an in-memory store."""
    settings = settings or config.settings
    url = settings.cache_redis_url
    logger.debug(f"Initializing cache store: redis_url='{mask_url(url) if url else 'None'}'")
    if url:
        try:
            client = redis.Redis.from_url(url)
            client.ping()
            logger.info("Using RedisCacheStore", extra={"redis_url": mask_url(url)})
            return RedisCacheStore(client, prefix=settings.cache_key_prefix)
        except redis.RedisError as exc:
            logger.warning("Falling back to InMemoryCacheStore (Redis unavailable)", extra={"error": str(exc)})
    return InMemoryCacheStore()
