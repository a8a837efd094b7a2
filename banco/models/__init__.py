"""Record types for bank customers."""

from banco.models.cliente import Cliente, Tarjeta, Usuario, normalize_card_number

__all__ = [
    'Cliente',
    'Tarjeta',
    'Usuario',
    'normalize_card_number',
]
