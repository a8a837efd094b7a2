"""Client repository fronted by an LFU cache."""

import copy
import logging
from typing import List, Optional, Union

from banco.cache import LFUCache, SynchronizedLFUCache
from banco.models import Cliente
from banco.storage.backend import ClienteRepository

logger = logging.getLogger(__name__)


class CachedClienteRepository(ClienteRepository):
    """
    Read-through cache for frequently accessed clients.

    Lookups by id are served from the cache when possible. Writes reach the
    backing repository first and only update the cache once they succeed.
    Clients are copied on their way in and out so callers cannot mutate
    cached state.
    """

    def __init__(
        self,
        repository: ClienteRepository,
        cache: Union[LFUCache[int, Cliente], SynchronizedLFUCache[int, Cliente]]
    ):
        """
        Initialize cached repository.

        Args:
            repository: Backing repository
            cache: Cache keyed by client id
        """
        self.repository = repository
        self.cache = cache

    def get_all(self) -> List[Cliente]:
        return self.repository.get_all()

    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        cached = self.cache.get(cliente_id)
        if cached is not None:
            logger.debug("Cache hit for client %s", cliente_id)
            return copy.deepcopy(cached)

        logger.debug("Cache miss for client %s", cliente_id)
        cliente = self.repository.get_by_id(cliente_id)
        if cliente is not None:
            self.cache.put(cliente_id, copy.deepcopy(cliente))
        return cliente

    def create(self, cliente: Cliente) -> Cliente:
        created = self.repository.create(cliente)
        if created.id is not None:
            self.cache.put(created.id, copy.deepcopy(created))
        return created

    def update(self, cliente_id: int, cliente: Cliente) -> Optional[Cliente]:
        updated = self.repository.update(cliente_id, cliente)
        if updated is not None:
            self.cache.put(cliente_id, copy.deepcopy(updated))
        return updated

    def delete(self, cliente_id: int) -> bool:
        deleted = self.repository.delete(cliente_id)
        if deleted:
            self.cache.remove(cliente_id)
        return deleted

    def delete_all(self) -> bool:
        deleted = self.repository.delete_all()
        self.cache.clear()
        return deleted

    def close(self) -> None:
        self.repository.close()
