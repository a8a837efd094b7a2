"""
Tests for the cache-fronted client repository.
"""

from unittest.mock import MagicMock

import pytest

from banco.cache import LFUCache, SynchronizedLFUCache
from banco.errors import RepositoryError
from banco.storage import CachedClienteRepository
from conftest import build_cliente


@pytest.fixture
def cached(in_memory_repository):
    return CachedClienteRepository(in_memory_repository, LFUCache(2))


def test_read_through_on_miss_then_hit(cached, in_memory_repository):
    in_memory_repository.create(build_cliente())

    first = cached.get_by_id(1)
    second = cached.get_by_id(1)

    assert first == second
    assert in_memory_repository.get_calls == 1
    assert cached.cache.contains_key(1)


def test_missing_client_is_not_cached(cached, in_memory_repository):
    assert cached.get_by_id(99) is None
    assert cached.get_by_id(99) is None

    assert in_memory_repository.get_calls == 2
    assert cached.cache.is_empty()


def test_create_populates_cache(cached, in_memory_repository):
    created = cached.create(build_cliente())

    assert created.id == 1
    assert cached.get_by_id(1) == created
    assert in_memory_repository.get_calls == 0


def test_update_refreshes_cache(cached):
    created = cached.create(build_cliente(nombre="Ana", user_name="ana"))
    changed = build_cliente(nombre="Ana María", user_name="ana")

    cached.update(created.id, changed)

    assert cached.get_by_id(created.id).usuario.nombre == "Ana María"


def test_update_of_missing_client_leaves_cache_alone(cached):
    assert cached.update(5, build_cliente()) is None
    assert not cached.cache.contains_key(5)


def test_delete_removes_from_cache(cached):
    created = cached.create(build_cliente())

    assert cached.delete(created.id)
    assert not cached.cache.contains_key(created.id)
    assert cached.get_by_id(created.id) is None


def test_failed_delete_keeps_cache(cached, in_memory_repository):
    created = cached.create(build_cliente())
    in_memory_repository.rows.clear()

    assert not cached.delete(created.id)
    assert cached.cache.contains_key(created.id)


def test_delete_all_clears_cache(cached):
    cached.create(build_cliente(user_name="a"))
    cached.create(build_cliente(user_name="b"))

    assert cached.delete_all()
    assert cached.cache.is_empty()
    assert cached.get_all() == []


def test_failed_write_does_not_touch_cache():
    repository = MagicMock()
    repository.create.side_effect = RepositoryError("boom")
    cached = CachedClienteRepository(repository, LFUCache(2))

    with pytest.raises(RepositoryError):
        cached.create(build_cliente())

    assert cached.cache.is_empty()


def test_callers_cannot_mutate_cached_client(cached):
    created = cached.create(build_cliente(nombre="Ana"))

    fetched = cached.get_by_id(created.id)
    fetched.usuario.nombre = "Mallory"
    created.tarjetas.clear()

    again = cached.get_by_id(created.id)
    assert again.usuario.nombre == "Ana"
    assert len(again.tarjetas) == 1


def test_cache_capacity_bounds_cached_clients(in_memory_repository):
    cached = CachedClienteRepository(in_memory_repository, SynchronizedLFUCache(2))
    for name in ("a", "b", "c"):
        cached.create(build_cliente(user_name=name))

    assert cached.cache.size() == 2
    assert cached.get_by_id(1) is not None
    assert in_memory_repository.get_calls == 1


def test_close_closes_backing_repository():
    backing = MagicMock()
    cached = CachedClienteRepository(backing, LFUCache(2))

    cached.close()

    backing.close.assert_called_once()
