"""CSV client import/export."""

import csv
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from banco.files.storage import ClienteFileStorage, PathLike
from banco.models import Cliente, Tarjeta, Usuario

FIELDNAMES = [
    'cliente_id',
    'nombre',
    'user_name',
    'email',
    'tarjeta_id',
    'numero_tarjeta',
    'nombre_titular',
    'fecha_caducidad',
]


def _optional_int(value: str) -> Optional[int]:
    return int(value) if value else None


class CsvClienteStorage(ClienteFileStorage):
    """
    Clients stored as CSV, one row per card.

    A client with no card is written as a single row with empty card
    columns. On import, consecutive rows with the same client id (or the
    same user name when the id is blank) are merged into one client.
    """

    def import_file(self, path: PathLike) -> Iterator[Cliente]:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            missing = set(FIELDNAMES) - set(reader.fieldnames or [])
            if missing:
                raise ValueError(f"CSV {path} is missing columns: {', '.join(sorted(missing))}")

            current: Optional[Cliente] = None
            current_key = None
            for line_number, row in enumerate(reader, start=2):
                try:
                    key = row['cliente_id'] or row['user_name']
                    if current is None or key != current_key:
                        if current is not None:
                            yield current
                        current = self._cliente_from_row(row)
                        current_key = key
                    if row['numero_tarjeta']:
                        current.tarjetas.append(self._tarjeta_from_row(row))
                except (KeyError, ValueError) as e:
                    raise ValueError(f"Invalid row at {path}:{line_number}: {e}") from e

            if current is not None:
                yield current

    def export_file(self, path: PathLike, clientes: Iterable[Cliente]) -> int:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        written = 0
        with open(path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            writer.writeheader()
            for cliente in clientes:
                base = {
                    'cliente_id': cliente.id if cliente.id is not None else '',
                    'nombre': cliente.usuario.nombre,
                    'user_name': cliente.usuario.user_name,
                    'email': cliente.usuario.email,
                }
                if not cliente.tarjetas:
                    writer.writerow(base)
                for tarjeta in cliente.tarjetas:
                    writer.writerow({
                        **base,
                        'tarjeta_id': tarjeta.id if tarjeta.id is not None else '',
                        'numero_tarjeta': tarjeta.numero_tarjeta,
                        'nombre_titular': tarjeta.nombre_titular,
                        'fecha_caducidad': tarjeta.fecha_caducidad.isoformat(),
                    })
                written += 1
        return written

    def _cliente_from_row(self, row: Dict[str, str]) -> Cliente:
        cliente_id = _optional_int(row['cliente_id'])
        usuario = Usuario(
            id=cliente_id,
            nombre=row['nombre'],
            user_name=row['user_name'],
            email=row['email'],
        )
        return Cliente(id=cliente_id, usuario=usuario)

    def _tarjeta_from_row(self, row: Dict[str, str]) -> Tarjeta:
        return Tarjeta.from_dict({
            'id': _optional_int(row['tarjeta_id']),
            'numero_tarjeta': row['numero_tarjeta'],
            'nombre_titular': row['nombre_titular'] or row['nombre'],
            'fecha_caducidad': row['fecha_caducidad'],
        })
