"""Customer, user and card records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

CARD_NUMBER_MAX_DIGITS = 16


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def normalize_card_number(numero: str) -> str:
    """
    Strip spaces and dashes from a card number.

    Raises:
        ValueError: If the result is empty, not all digits or too long
    """
    digits = numero.replace(" ", "").replace("-", "")
    if not digits.isdigit() or len(digits) > CARD_NUMBER_MAX_DIGITS:
        raise ValueError(f"Invalid card number: {numero!r}")
    return digits


@dataclass
class Usuario:
    """A bank user as stored locally and exposed by the remote user API."""

    nombre: str
    user_name: str
    email: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'nombre': self.nombre,
            'user_name': self.user_name,
            'email': self.email,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Usuario':
        return cls(
            id=data.get('id'),
            nombre=data['nombre'],
            user_name=data['user_name'],
            email=data['email'],
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )


@dataclass
class Tarjeta:
    """A bank card, linked to its user through the holder name."""

    numero_tarjeta: str
    nombre_titular: str
    fecha_caducidad: date
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.numero_tarjeta = normalize_card_number(self.numero_tarjeta)
        if not isinstance(self.fecha_caducidad, date):
            raise ValueError(f"Card expiry date is required, got {self.fecha_caducidad!r}")

    def is_expired(self, today: Optional[date] = None) -> bool:
        """Check whether the card is past its expiry date."""
        today = today or date.today()
        return self.fecha_caducidad < today

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'numero_tarjeta': self.numero_tarjeta,
            'nombre_titular': self.nombre_titular,
            'fecha_caducidad': _iso(self.fecha_caducidad),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tarjeta':
        return cls(
            id=data.get('id'),
            numero_tarjeta=str(data['numero_tarjeta']),
            nombre_titular=data['nombre_titular'],
            fecha_caducidad=_parse_date(data['fecha_caducidad']),
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )


@dataclass
class Cliente:
    """
    A customer: one user plus the cards held in that user's name.

    The client id is the id of its user.
    """

    usuario: Usuario
    tarjetas: List[Tarjeta] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'usuario': self.usuario.to_dict(),
            'tarjetas': [tarjeta.to_dict() for tarjeta in self.tarjetas],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Cliente':
        return cls(
            id=data.get('id'),
            usuario=Usuario.from_dict(data['usuario']),
            tarjetas=[Tarjeta.from_dict(t) for t in data.get('tarjetas') or []],
            created_at=_parse_datetime(data.get('created_at')),
            updated_at=_parse_datetime(data.get('updated_at')),
        )
