"""Abstract base class for client file import/export."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, Union

from banco.models import Cliente

PathLike = Union[str, Path]


class ClienteFileStorage(ABC):
    """Reads clients from and writes clients to one file format."""

    @abstractmethod
    def import_file(self, path: PathLike) -> Iterator[Cliente]:
        """
        Read clients from a file.

        Args:
            path: Source file

        Returns:
            Iterator over the clients in file order

        Raises:
            ValueError: If the file content is malformed
        """
        pass

    @abstractmethod
    def export_file(self, path: PathLike, clientes: Iterable[Cliente]) -> int:
        """
        Write clients to a file, replacing its content.

        Args:
            path: Destination file
            clientes: Clients to write

        Returns:
            Number of clients written
        """
        pass
