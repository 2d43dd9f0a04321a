"""Registration store adapters - Expiring key-value implementations."""

from .memory import InMemoryRegistrationStore
from .redis_store import RedisRegistrationStore

__all__ = ["InMemoryRegistrationStore", "RedisRegistrationStore"]
