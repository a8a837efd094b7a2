"""Storage abstraction layer for bank clients."""

from banco.storage.backend import ClienteRepository
from banco.storage.cache import CachedClienteRepository
from banco.storage.config import StorageConfig
from banco.storage.factory import create_repository

__all__ = [
    'ClienteRepository',
    'CachedClienteRepository',
    'StorageConfig',
    'create_repository',
]
