"""JSON client import/export."""

import json
from pathlib import Path
from typing import Iterable, Iterator

from banco.files.storage import ClienteFileStorage, PathLike
from banco.models import Cliente


class JsonClienteStorage(ClienteFileStorage):
    """Clients stored as a JSON list of ``Cliente.to_dict()`` objects."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def import_file(self, path: PathLike) -> Iterator[Cliente]:
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON list of clients in {path}")

        for index, item in enumerate(data):
            try:
                yield Cliente.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid client record #{index} in {path}: {e}") from e

    def export_file(self, path: PathLike, clientes: Iterable[Cliente]) -> int:
        records = [cliente.to_dict() for cliente in clientes]
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=self.indent, ensure_ascii=False)
        return len(records)
