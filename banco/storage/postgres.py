"""Postgres client repository using psycopg2."""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from banco.errors import RepositoryError
from banco.models import Cliente, Tarjeta, Usuario
from banco.storage.backend import ClienteRepository
from banco.storage.config import StorageConfig

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS usuario (
        id SERIAL PRIMARY KEY,
        nombre TEXT NOT NULL,
        user_name TEXT NOT NULL,
        email TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tarjeta (
        id SERIAL PRIMARY KEY,
        numero_tarjeta VARCHAR(16) NOT NULL,
        nombre_titular TEXT NOT NULL,
        fecha_caducidad DATE NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tarjeta_nombre_titular ON tarjeta (nombre_titular)",
]

SELECT_CLIENTES = """
    SELECT
        u.id AS usuario_id, u.nombre, u.user_name, u.email,
        u.created_at AS usuario_created_at, u.updated_at AS usuario_updated_at,
        t.id AS tarjeta_id, t.numero_tarjeta, t.nombre_titular, t.fecha_caducidad,
        t.created_at AS tarjeta_created_at, t.updated_at AS tarjeta_updated_at
    FROM usuario u
    LEFT JOIN tarjeta t ON t.nombre_titular = u.nombre
"""

INSERT_USUARIO = """
    INSERT INTO usuario (nombre, user_name, email, created_at, updated_at)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id
"""

INSERT_TARJETA = """
    INSERT INTO tarjeta (
        numero_tarjeta, nombre_titular, fecha_caducidad, created_at, updated_at
    ) VALUES (%s, %s, %s, %s, %s)
    RETURNING id
"""


def rows_to_clientes(rows: List[Dict]) -> List[Cliente]:
    """
    Group joined usuario/tarjeta rows into clients.

    Rows for the same user are merged so one client carries all its cards.
    A user with no cards comes back as a row of NULL card columns.
    """
    clientes: Dict[int, Cliente] = {}
    for row in rows:
        usuario_id = row['usuario_id']
        cliente = clientes.get(usuario_id)
        if cliente is None:
            usuario = Usuario(
                id=usuario_id,
                nombre=row['nombre'],
                user_name=row['user_name'],
                email=row['email'],
                created_at=row['usuario_created_at'],
                updated_at=row['usuario_updated_at'],
            )
            cliente = Cliente(
                id=usuario_id,
                usuario=usuario,
                created_at=usuario.created_at,
                updated_at=usuario.updated_at,
            )
            clientes[usuario_id] = cliente

        if row.get('tarjeta_id') is not None:
            cliente.tarjetas.append(Tarjeta(
                id=row['tarjeta_id'],
                numero_tarjeta=row['numero_tarjeta'],
                nombre_titular=row['nombre_titular'],
                fecha_caducidad=row['fecha_caducidad'],
                created_at=row['tarjeta_created_at'],
                updated_at=row['tarjeta_updated_at'],
            ))
    return list(clientes.values())


class PostgresClienteRepository(ClienteRepository):
    """
    Postgres storage for clients.

    A client is a row of ``usuario`` plus every ``tarjeta`` row whose
    holder name matches the user's name.
    """

    def __init__(self, config: StorageConfig):
        """
        Initialize Postgres repository.

        Args:
            config: StorageConfig instance with Postgres connection info
        """
        self.config = config

        # Build connection string
        self.conn_string = self._build_connection_string()

        # Create connection pool
        self.pool = ThreadedConnectionPool(
            minconn=config.pool_min_connections,
            maxconn=config.pool_max_connections,
            dsn=self.conn_string
        )

        # Initialize schema if needed
        self._ensure_schema()

    def _build_connection_string(self) -> str:
        """Build Postgres connection string from config."""
        parts = []

        if self.config.postgres_host:
            parts.append(f"host={self.config.postgres_host}")
        if self.config.postgres_port:
            parts.append(f"port={self.config.postgres_port}")
        if self.config.postgres_database:
            parts.append(f"dbname={self.config.postgres_database}")
        if self.config.postgres_user:
            parts.append(f"user={self.config.postgres_user}")
        if self.config.postgres_password:
            parts.append(f"password={self.config.postgres_password}")
        if self.config.postgres_sslmode:
            parts.append(f"sslmode={self.config.postgres_sslmode}")

        return " ".join(parts)

    def _get_connection(self):
        """Get connection from pool."""
        return self.pool.getconn()

    def _put_connection(self, conn):
        """Return connection to pool."""
        self.pool.putconn(conn)

    def _ensure_schema(self):
        """Ensure the usuario and tarjeta tables exist."""
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                for statement in SCHEMA_STATEMENTS:
                    cur.execute(statement)
            conn.commit()
        except psycopg2.Error as e:
            logger.error("Error ensuring schema: %s", e)
            conn.rollback()
        finally:
            self._put_connection(conn)

    def close(self):
        """Close every pooled connection."""
        self.pool.closeall()

    def get_all(self) -> List[Cliente]:
        logger.info("Fetching all clients")
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(SELECT_CLIENTES + " ORDER BY u.id, t.id")
                return rows_to_clientes(cur.fetchall())
        except psycopg2.Error as e:
            logger.error("Error fetching clients: %s", e)
            return []
        finally:
            self._put_connection(conn)

    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        logger.info("Fetching client %s", cliente_id)
        conn = self._get_connection()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(SELECT_CLIENTES + " WHERE u.id = %s ORDER BY t.id", (cliente_id,))
                clientes = rows_to_clientes(cur.fetchall())
                return clientes[0] if clientes else None
        except psycopg2.Error as e:
            logger.error("Error fetching client %s: %s", cliente_id, e)
            return None
        finally:
            self._put_connection(conn)

    def create(self, cliente: Cliente) -> Cliente:
        logger.info("Creating client %s", cliente.usuario.user_name)
        timestamp = datetime.now(timezone.utc)

        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                usuario = cliente.usuario
                cur.execute(INSERT_USUARIO, (
                    usuario.nombre, usuario.user_name, usuario.email, timestamp, timestamp
                ))
                usuario_id = cur.fetchone()[0]
                self._insert_tarjetas(cur, cliente.tarjetas, timestamp)
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error("Error creating client: %s", e)
            raise RepositoryError(f"Could not create client {cliente.usuario.user_name}") from e
        finally:
            self._put_connection(conn)

        cliente.id = usuario_id
        cliente.usuario.id = usuario_id
        cliente.usuario.created_at = cliente.usuario.updated_at = timestamp
        cliente.created_at = cliente.updated_at = timestamp
        return cliente

    def update(self, cliente_id: int, cliente: Cliente) -> Optional[Cliente]:
        logger.info("Updating client %s", cliente_id)
        timestamp = datetime.now(timezone.utc)

        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT nombre, created_at FROM usuario WHERE id = %s FOR UPDATE", (cliente_id,))
                existing = cur.fetchone()
                if existing is None:
                    conn.rollback()
                    logger.warning("No client with id %s to update", cliente_id)
                    return None
                old_nombre, created_at = existing

                usuario = cliente.usuario
                cur.execute("""
                    UPDATE usuario SET nombre = %s, user_name = %s, email = %s, updated_at = %s
                    WHERE id = %s
                """, (usuario.nombre, usuario.user_name, usuario.email, timestamp, cliente_id))

                # Cards link to users by holder name; leave them alone when
                # another user shares that name
                if self._holder_is_shared(cur, old_nombre, cliente_id):
                    logger.warning(
                        "Holder name %r is shared with another user; cards of client %s left unchanged",
                        old_nombre, cliente_id,
                    )
                else:
                    cur.execute("DELETE FROM tarjeta WHERE nombre_titular = %s", (old_nombre,))
                    self._insert_tarjetas(cur, cliente.tarjetas, timestamp)
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error("Error updating client %s: %s", cliente_id, e)
            raise RepositoryError(f"Could not update client {cliente_id}") from e
        finally:
            self._put_connection(conn)

        cliente.id = cliente_id
        cliente.usuario.id = cliente_id
        cliente.usuario.created_at = cliente.created_at = created_at
        cliente.usuario.updated_at = cliente.updated_at = timestamp
        return cliente

    def delete(self, cliente_id: int) -> bool:
        logger.info("Deleting client %s", cliente_id)
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT nombre FROM usuario WHERE id = %s FOR UPDATE", (cliente_id,))
                existing = cur.fetchone()
                if existing is None:
                    conn.rollback()
                    logger.warning("No client deleted for id %s", cliente_id)
                    return False
                nombre = existing[0]

                if self._holder_is_shared(cur, nombre, cliente_id):
                    logger.warning(
                        "Holder name %r is shared with another user; keeping its cards", nombre
                    )
                else:
                    cur.execute("DELETE FROM tarjeta WHERE nombre_titular = %s", (nombre,))
                cur.execute("DELETE FROM usuario WHERE id = %s", (cliente_id,))
                deleted = cur.rowcount > 0
            if not deleted:
                conn.rollback()
                logger.warning("No client deleted for id %s", cliente_id)
                return False
            conn.commit()
            return True
        except psycopg2.Error as e:
            conn.rollback()
            logger.error("Error deleting client %s: %s", cliente_id, e)
            return False
        finally:
            self._put_connection(conn)

    def delete_all(self) -> bool:
        logger.info("Deleting all clients")
        conn = self._get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM tarjeta")
                cur.execute("DELETE FROM usuario")
                deleted = cur.rowcount > 0
            conn.commit()
            if not deleted:
                logger.warning("No clients to delete")
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            logger.error("Error deleting all clients: %s", e)
            return False
        finally:
            self._put_connection(conn)

    def _insert_tarjetas(self, cur, tarjetas: List[Tarjeta], timestamp: datetime):
        for tarjeta in tarjetas:
            cur.execute(INSERT_TARJETA, (
                tarjeta.numero_tarjeta,
                tarjeta.nombre_titular,
                tarjeta.fecha_caducidad,
                timestamp,
                timestamp,
            ))
            tarjeta.id = cur.fetchone()[0]
            tarjeta.created_at = tarjeta.updated_at = timestamp

    def _holder_is_shared(self, cur, nombre: str, cliente_id: int) -> bool:
        """Check whether a user other than cliente_id has this name."""
        cur.execute(
            "SELECT count(*) FROM usuario WHERE nombre = %s AND id <> %s",
            (nombre, cliente_id),
        )
        return cur.fetchone()[0] > 0
