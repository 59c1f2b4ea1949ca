"""
Cache Service using Redis for generated mini-lessons
"""
import json
import hashlib
import logging
from functools import wraps
from typing import Optional, Any, Callable
import redis

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-based caching service for completion API results"""

    _instance = None

    def __new__(cls):
        """Singleton pattern"""
        if cls._instance is None:
            cls._instance = super(CacheService, cls).__new__(cls)
            cls._instance.redis = None
            cls._instance.default_ttl = 86400
        return cls._instance

    def init_app(self, app):
        """Connect using the app's REDIS_* settings"""
        self.redis = self._connect(
            app.config.get('REDIS_HOST'),
            app.config.get('REDIS_PORT', 6379),
            app.config.get('REDIS_DB', 0)
        )
        self.default_ttl = int(app.config.get('LESSON_CACHE_TTL', 86400))

    @staticmethod
    def _connect(redis_host: str, redis_port: int = 6379, redis_db: int = 0):
        if not redis_host:
            logger.info("[CacheService] REDIS_HOST not set. Caching disabled.")
            return None

        try:
            client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            # Test connection
            client.ping()
            logger.info("[CacheService] Connected to Redis at %s:%s", redis_host, redis_port)
            return client
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("[CacheService] Redis not available (%s). Caching disabled.", e)
            return None

    def is_available(self) -> bool:
        """Check if Redis is available"""
        return self.redis is not None

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        if not self.is_available():
            return None

        try:
            value = self.redis.get(key)
            if value:
                return json.loads(value)
        except (redis.RedisError, ValueError) as e:
            logger.warning("[CacheService] Error getting key %s: %s", key, e)

        return None

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL

        Args:
            key: Cache key
            value: Value to cache (must be JSON-serializable)
            ttl: Time to live in seconds (default: 1 hour)

        Returns:
            True if successful, False otherwise
        """
        if not self.is_available():
            return False

        try:
            self.redis.setex(key, ttl, json.dumps(value))
            return True
        except (redis.RedisError, TypeError) as e:
            logger.warning("[CacheService] Error setting key %s: %s", key, e)
            return False

    @staticmethod
    def generate_cache_key(prefix: str, **kwargs) -> str:
        """
        Generate deterministic cache key from parameters

        Args:
            prefix: Key prefix (e.g., "lesson")
            **kwargs: Parameters to include in key

        Returns:
            Cache key string
        """
        # Sort kwargs for deterministic key
        sorted_params = sorted(kwargs.items())
        params_str = json.dumps(sorted_params, sort_keys=True)
        hash_value = hashlib.md5(params_str.encode()).hexdigest()
        return f"{prefix}:{hash_value}"

    def lesson_key(self, engine: str, model: str, topic_title: str,
                   topic_description: str = None, standard: str = None) -> str:
        return self.generate_cache_key(
            'lesson',
            engine=engine or '',
            model=model or '',
            topic=topic_title or '',
            description=topic_description or '',
            standard=standard or ''
        )

    def cache_lesson(self, ttl: int = None):
        """
        Decorator to cache mini-lesson generation per engine and model

        Args:
            ttl: Cache time-to-live in seconds (default: LESSON_CACHE_TTL)
        """
        def decorator(func: Callable) -> Callable:
            @wraps(func)
            def wrapper(engine, *args, **kwargs):
                cache_key = self.lesson_key(
                    engine.name,
                    engine.model,
                    kwargs.get('topic_title', ''),
                    kwargs.get('topic_description'),
                    kwargs.get('standard')
                )

                cached_value = self.get(cache_key)
                if cached_value:
                    logger.debug("[CacheService] Cache HIT for lesson: %s", cache_key)
                    return cached_value

                logger.debug("[CacheService] Cache MISS for lesson: %s", cache_key)
                result = func(engine, *args, **kwargs)
                self.set(cache_key, result, ttl or self.default_ttl)
                return result

            return wrapper
        return decorator


# Singleton instance
cache_service = CacheService()
