"""
Tests for configuration loading, logging setup and the repository factory.
"""

import logging
from unittest.mock import patch

import pytest

from banco.errors import InvalidConfigurationError
from banco.observability import setup_logging
from banco.storage import CachedClienteRepository, StorageConfig, create_repository


def test_defaults():
    config = StorageConfig.from_env()

    assert config.backend_type == "postgres"
    assert config.cache_capacity == 10
    assert config.api_timeout == 10.0
    assert config.postgres_port is None


def test_from_env(monkeypatch):
    monkeypatch.setenv('POSTGRES_HOST', 'db')
    monkeypatch.setenv('POSTGRES_PORT', '5433')
    monkeypatch.setenv('POSTGRES_PASSWORD', 'secret')
    monkeypatch.setenv('CACHE_CAPACITY', '25')
    monkeypatch.setenv('API_TIMEOUT', '2.5')

    config = StorageConfig.from_env()

    assert config.postgres_host == 'db'
    assert config.postgres_port == 5433
    assert config.cache_capacity == 25
    assert config.api_timeout == 2.5
    assert config.to_dict()['postgres_password'] == '***'


@pytest.mark.parametrize("name", ['POSTGRES_PORT', 'CACHE_CAPACITY', 'API_TIMEOUT'])
def test_bad_numbers_are_rejected(monkeypatch, name):
    monkeypatch.setenv(name, 'lots')

    with pytest.raises(InvalidConfigurationError, match=name):
        StorageConfig.from_env()


def test_factory_rejects_unknown_backend():
    with pytest.raises(InvalidConfigurationError, match="Unsupported backend_type"):
        create_repository(StorageConfig(backend_type="oracle"))


def test_factory_wraps_postgres_in_cache():
    with patch('banco.storage.postgres.PostgresClienteRepository') as repo_cls:
        repository = create_repository(StorageConfig(cache_capacity=3))

    assert isinstance(repository, CachedClienteRepository)
    assert repository.repository is repo_cls.return_value
    assert repository.cache.capacity == 3


def test_factory_without_cache():
    with patch('banco.storage.postgres.PostgresClienteRepository') as repo_cls:
        repository = create_repository(StorageConfig(), cached=False)

    assert repository is repo_cls.return_value


def test_factory_rejects_zero_capacity():
    with patch('banco.storage.postgres.PostgresClienteRepository') as repo_cls:
        with pytest.raises(InvalidConfigurationError):
            create_repository(StorageConfig(cache_capacity=0))

    repo_cls.assert_not_called()


def test_setup_logging_sets_level():
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("nonsense")
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("urllib3").level == logging.WARNING
