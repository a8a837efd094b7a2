"""Mapping between remote user JSON and Usuario records."""

from datetime import datetime
from typing import Dict, Optional

from banco.models import Usuario


def to_usuario(
    data: Dict,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None
) -> Usuario:
    """
    Build a Usuario from a remote user payload.

    Args:
        data: JSON object with ``id``, ``name``, ``username`` and ``email``
        created_at: Timestamp to stamp as creation time
        updated_at: Timestamp to stamp as last update

    Raises:
        ValueError: If a required field is missing
    """
    if not isinstance(data, dict):
        raise ValueError(f"Remote user must be a JSON object, got {type(data).__name__}")
    try:
        return Usuario(
            id=data.get('id'),
            nombre=data['name'],
            user_name=data['username'],
            email=data['email'],
            created_at=created_at,
            updated_at=updated_at,
        )
    except KeyError as e:
        raise ValueError(f"Remote user is missing field {e.args[0]!r}") from e


def to_request(usuario: Usuario) -> Dict:
    """Build the request body for creating or updating a remote user."""
    payload = {
        'name': usuario.nombre,
        'username': usuario.user_name,
        'email': usuario.email,
    }
    if usuario.id is not None:
        payload['id'] = usuario.id
    return payload
