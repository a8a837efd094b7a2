"""File import and export of clients."""

from pathlib import Path

from banco.files.csvStorage import CsvClienteStorage
from banco.files.jsonStorage import JsonClienteStorage
from banco.files.storage import ClienteFileStorage, PathLike


def storage_for_path(path: PathLike) -> ClienteFileStorage:
    """
    Pick the file storage matching a file extension.

    Raises:
        ValueError: If the extension is neither .csv nor .json
    """
    suffix = Path(path).suffix.lower()
    if suffix == '.csv':
        return CsvClienteStorage()
    if suffix == '.json':
        return JsonClienteStorage()
    raise ValueError(f"Unsupported file type '{suffix}'. Supported: .csv, .json")


__all__ = [
    'ClienteFileStorage',
    'CsvClienteStorage',
    'JsonClienteStorage',
    'storage_for_path',
]
