"""Abstract base class for client repositories."""

from abc import ABC, abstractmethod
from typing import List, Optional

from banco.models import Cliente


class ClienteRepository(ABC):
    """
    Abstract base class for client repositories.

    Provides a unified CRUD interface over clients, whatever holds them.
    """

    @abstractmethod
    def get_all(self) -> List[Cliente]:
        """
        List every client.

        Returns:
            List of clients (empty if none or on read failure)
        """
        pass

    @abstractmethod
    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        """
        Get a client by id.

        Args:
            cliente_id: Client (user) id

        Returns:
            Cliente or None if not found
        """
        pass

    @abstractmethod
    def create(self, cliente: Cliente) -> Cliente:
        """
        Store a new client and its cards.

        Args:
            cliente: Client to create (ids are ignored)

        Returns:
            The client with ids and timestamps assigned
        """
        pass

    @abstractmethod
    def update(self, cliente_id: int, cliente: Cliente) -> Optional[Cliente]:
        """
        Update an existing client and its cards.

        Args:
            cliente_id: Client id
            cliente: New client data

        Returns:
            The updated client, or None if no client has that id
        """
        pass

    @abstractmethod
    def delete(self, cliente_id: int) -> bool:
        """
        Delete a client and its cards.

        Args:
            cliente_id: Client id

        Returns:
            success: True if a client was deleted
        """
        pass

    @abstractmethod
    def delete_all(self) -> bool:
        """
        Delete every client.

        Returns:
            success: True if at least one client was deleted
        """
        pass

    def close(self) -> None:
        """Release any connections held by the repository."""
        pass
