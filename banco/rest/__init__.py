"""Client and repository for the remote user API."""

from banco.rest.client import UserApiClient
from banco.rest.repository import UserRemoteRepository

__all__ = [
    'UserApiClient',
    'UserRemoteRepository',
]
