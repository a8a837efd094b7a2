"""Factory for creating client repositories."""

from typing import Optional

from banco.cache import LFUCache
from banco.errors import InvalidConfigurationError
from banco.storage.backend import ClienteRepository
from banco.storage.cache import CachedClienteRepository
from banco.storage.config import StorageConfig


def create_repository(
    config: Optional[StorageConfig] = None,
    cached: bool = True
) -> ClienteRepository:
    """
    Create a client repository instance.

    Args:
        config: StorageConfig instance (if None, loads from environment)
        cached: Front the repository with an LFU cache of config.cache_capacity

    Returns:
        ClienteRepository instance

    Raises:
        InvalidConfigurationError: If backend_type is not supported or the
            cache capacity is not positive
    """
    if config is None:
        config = StorageConfig.from_env()

    backend_type = config.backend_type.lower()

    # Validate the cache before opening any connections
    cache = LFUCache(config.cache_capacity) if cached else None

    if backend_type == "postgres":
        from banco.storage.postgres import PostgresClienteRepository
        repository = PostgresClienteRepository(config)
    else:
        raise InvalidConfigurationError(
            f"Unsupported backend_type: {backend_type}. "
            "Supported types: 'postgres'"
        )

    if cache is not None:
        return CachedClienteRepository(repository, cache)
    return repository
