"""
Redis registration store adapter - Implements RegistrationStore protocol.

Thin mapping of the port onto redis-py commands. Connection errors are
not caught here: a store outage fails the request rather than letting
registrations bypass rate limits.
"""

import redis


class RedisRegistrationStore:
    """
    Implements RegistrationStore protocol via redis-py.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The client must be created with ``decode_responses=True``.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisRegistrationStore":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._client.setex(key, ttl_seconds, value)

    def get(self, key: str) -> str | None:
        return self._client.get(key)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def ttl(self, key: str) -> int | None:
        """
        Remaining TTL in seconds.

        Redis answers -2 for a missing key and -1 for a key without expiry;
        both map to None.
        """
        remaining = self._client.ttl(key)
        if remaining is None or remaining < 0:
            return None
        return int(remaining)

    def increment(self, key: str) -> int:
        return int(self._client.incr(key))

    def expire(self, key: str, ttl_seconds: int) -> None:
        self._client.expire(key, ttl_seconds)

    def ping(self) -> bool:
        return bool(self._client.ping())
