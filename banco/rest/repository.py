"""Remote user repository backed by the REST user API."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

import requests

from banco.models import Usuario
from banco.rest import mapper
from banco.rest.client import UserApiClient

logger = logging.getLogger(__name__)


class UserRemoteRepository:
    """
    Synchronous CRUD over remote users.

    Every call returns None (or an empty list) on failure; the cause is
    logged. A 404 is an expected outcome and is logged at debug level.
    """

    def __init__(self, client: UserApiClient):
        self.client = client

    def get_all(self) -> List[Usuario]:
        """
        Fetch every remote user.

        Returns:
            List of users (empty on failure)
        """
        logger.debug("Fetching all remote users")
        try:
            response = self.client.get_all()
            if not response.ok:
                logger.error("Error fetching remote users: HTTP %s", response.status_code)
                return []
            body = response.json()
            if not isinstance(body, list):
                logger.error("Remote user list response is not a list")
                return []
            return [mapper.to_usuario(item) for item in body]
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching remote users: %s", e)
            return []

    def get_by_id(self, user_id: int) -> Optional[Usuario]:
        """
        Fetch one remote user.

        Args:
            user_id: Remote user id

        Returns:
            Usuario or None if not found or on failure
        """
        logger.debug("Fetching remote user %s", user_id)
        try:
            response = self.client.get_by_id(user_id)
            if response.status_code == 404:
                logger.debug("Remote user %s not found", user_id)
                return None
            if not response.ok:
                logger.error("Error fetching remote user %s: HTTP %s", user_id, response.status_code)
                return None
            return mapper.to_usuario(response.json())
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching remote user %s: %s", user_id, e)
            return None

    def create(self, usuario: Usuario) -> Optional[Usuario]:
        """
        Create a remote user.

        Args:
            usuario: User to create

        Returns:
            The created user with both timestamps set, or None on failure
        """
        logger.debug("Creating remote user %s", usuario.user_name)
        try:
            response = self.client.create(mapper.to_request(usuario))
            if not response.ok:
                logger.error("Error creating remote user %s: HTTP %s", usuario.user_name, response.status_code)
                return None
            timestamp = datetime.now(timezone.utc)
            return mapper.to_usuario(response.json(), created_at=timestamp, updated_at=timestamp)
        except (requests.RequestException, ValueError) as e:
            logger.error("Error creating remote user %s: %s", usuario.user_name, e)
            return None

    def update(self, user_id: int, usuario: Usuario) -> Optional[Usuario]:
        """
        Update a remote user.

        Args:
            user_id: Remote user id
            usuario: New user data

        Returns:
            The updated user with ``updated_at`` set, or None if not found or on failure
        """
        logger.debug("Updating remote user %s", user_id)
        try:
            response = self.client.update(user_id, mapper.to_request(usuario))
            if response.status_code == 404:
                logger.debug("Remote user %s not found for update", user_id)
                return None
            if not response.ok:
                logger.error("Error updating remote user %s: HTTP %s", user_id, response.status_code)
                return None
            return mapper.to_usuario(
                response.json(),
                created_at=usuario.created_at,
                updated_at=datetime.now(timezone.utc),
            )
        except (requests.RequestException, ValueError) as e:
            logger.error("Error updating remote user %s: %s", user_id, e)
            return None

    def delete(self, user_id: int) -> bool:
        """
        Delete a remote user.

        Args:
            user_id: Remote user id

        Returns:
            success: True if the API accepted the deletion
        """
        logger.debug("Deleting remote user %s", user_id)
        try:
            response = self.client.delete(user_id)
            if response.status_code == 404:
                logger.debug("Remote user %s not found for delete", user_id)
                return False
            if not response.ok:
                logger.error("Error deleting remote user %s: HTTP %s", user_id, response.status_code)
                return False
            return True
        except requests.RequestException as e:
            logger.error("Error deleting remote user %s: %s", user_id, e)
            return False
