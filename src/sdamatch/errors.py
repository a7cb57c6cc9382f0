"""
Errores del motor de matching.

Cada error lleva el status HTTP con el que se reporta al caller.
"""

from typing import Optional


class MatchingError(Exception):
    """Error base del sistema de matching."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(MatchingError):
    """Request mal formado. Se rechaza antes de tocar la base."""

    status_code = 400


class NotFoundError(MatchingError):
    """El participante o inmueble pedido no existe."""

    status_code = 404


class InvalidRecordError(MatchingError):
    """Un registro de la base no pasa la validación del modelo."""

    status_code = 422


class InvalidStatusTransitionError(MatchingError):
    """Transición de status de match no definida."""

    status_code = 409


class UpstreamWriteError(MatchingError):
    """Falló el upsert de matches; no se reporta éxito parcial."""

    status_code = 502


class NotificationError(MatchingError):
    """Falló el aviso al participante. Es best-effort, nunca corta el run."""
