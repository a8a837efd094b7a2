from datetime import date
from typing import Dict, List, Optional

import pytest

from banco.models import Cliente, Tarjeta, Usuario
from banco.storage.backend import ClienteRepository


def build_cliente(nombre="Juan Pérez", user_name="juanp", cliente_id=None, tarjetas=1) -> Cliente:
    return Cliente(
        id=cliente_id,
        usuario=Usuario(id=cliente_id, nombre=nombre, user_name=user_name, email=f"{user_name}@example.com"),
        tarjetas=[
            Tarjeta(
                numero_tarjeta=f"123456789012345{i}",
                nombre_titular=nombre,
                fecha_caducidad=date(2030, 12, 31),
            )
            for i in range(tarjetas)
        ],
    )


class InMemoryClienteRepository(ClienteRepository):
    """Dict-backed repository that counts calls to get_by_id."""

    def __init__(self):
        self.rows: Dict[int, Cliente] = {}
        self.next_id = 1
        self.get_calls = 0

    def get_all(self) -> List[Cliente]:
        return list(self.rows.values())

    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        self.get_calls += 1
        return self.rows.get(cliente_id)

    def create(self, cliente: Cliente) -> Cliente:
        cliente.id = cliente.usuario.id = self.next_id
        self.next_id += 1
        self.rows[cliente.id] = cliente
        return cliente

    def update(self, cliente_id: int, cliente: Cliente) -> Optional[Cliente]:
        if cliente_id not in self.rows:
            return None
        cliente.id = cliente.usuario.id = cliente_id
        self.rows[cliente_id] = cliente
        return cliente

    def delete(self, cliente_id: int) -> bool:
        return self.rows.pop(cliente_id, None) is not None

    def delete_all(self) -> bool:
        had_rows = bool(self.rows)
        self.rows.clear()
        return had_rows


@pytest.fixture
def in_memory_repository():
    return InMemoryClienteRepository()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        'STORAGE_BACKEND', 'POSTGRES_HOST', 'POSTGRES_PORT', 'POSTGRES_DATABASE',
        'POSTGRES_USER', 'POSTGRES_PASSWORD', 'POSTGRES_SSLMODE', 'POSTGRES_POOL_MIN',
        'POSTGRES_POOL_MAX', 'API_BASE_URL', 'API_TIMEOUT', 'CACHE_CAPACITY', 'LOG_LEVEL',
    ):
        monkeypatch.delenv(name, raising=False)
