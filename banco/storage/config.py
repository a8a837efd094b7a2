"""Storage and client configuration management."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from banco.errors import InvalidConfigurationError

# Load .env from project root
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _int_from_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class StorageConfig:
    """Configuration for the repositories, the remote API and the cache."""

    backend_type: str = "postgres"

    # Postgres config
    postgres_host: Optional[str] = None
    postgres_port: Optional[int] = None
    postgres_database: Optional[str] = None
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_sslmode: str = "prefer"
    pool_min_connections: int = 1
    pool_max_connections: int = 10

    # Remote user API
    api_base_url: str = "https://jsonplaceholder.typicode.com"
    api_timeout: float = 10.0

    cache_capacity: int = 10
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'StorageConfig':
        """
        Create config from environment variables.

        Returns:
            StorageConfig instance

        Raises:
            InvalidConfigurationError: If a numeric variable cannot be parsed
        """
        api_timeout = os.getenv('API_TIMEOUT')
        try:
            timeout = float(api_timeout) if api_timeout else 10.0
        except ValueError:
            raise InvalidConfigurationError(f"API_TIMEOUT must be a number, got {api_timeout!r}")
        return cls(
            backend_type=os.getenv('STORAGE_BACKEND', 'postgres'),
            postgres_host=os.getenv('POSTGRES_HOST'),
            postgres_port=_int_from_env('POSTGRES_PORT', None),
            postgres_database=os.getenv('POSTGRES_DATABASE'),
            postgres_user=os.getenv('POSTGRES_USER'),
            postgres_password=os.getenv('POSTGRES_PASSWORD'),
            postgres_sslmode=os.getenv('POSTGRES_SSLMODE', 'prefer'),
            pool_min_connections=_int_from_env('POSTGRES_POOL_MIN', 1),
            pool_max_connections=_int_from_env('POSTGRES_POOL_MAX', 10),
            api_base_url=os.getenv('API_BASE_URL', 'https://jsonplaceholder.typicode.com'),
            api_timeout=timeout,
            cache_capacity=_int_from_env('CACHE_CAPACITY', 10),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary, masking the password."""
        return {
            'backend_type': self.backend_type,
            'postgres_host': self.postgres_host,
            'postgres_port': self.postgres_port,
            'postgres_database': self.postgres_database,
            'postgres_user': self.postgres_user,
            'postgres_password': '***' if self.postgres_password else None,
            'postgres_sslmode': self.postgres_sslmode,
            'pool_min_connections': self.pool_min_connections,
            'pool_max_connections': self.pool_max_connections,
            'api_base_url': self.api_base_url,
            'api_timeout': self.api_timeout,
            'cache_capacity': self.cache_capacity,
            'log_level': self.log_level,
        }
