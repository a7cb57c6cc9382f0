"""
Modelos de datos del sistema.

Reemplazan los registros sueltos de Supabase por estructuras validadas:
- Participant / Property: lo que entra al scoring
- PropertyMatch: lo que sale y se persiste
"""

from sdamatch.models.participant import Participant, MobilityRequirements
from sdamatch.models.property import Property
from sdamatch.models.match import (
    MatchReason,
    MatchRunResult,
    MatchStatus,
    PropertyMatch,
)

__all__ = [
    # Entrada
    "Participant",
    "MobilityRequirements",
    "Property",
    # Salida
    "MatchReason",
    "MatchRunResult",
    "MatchStatus",
    "PropertyMatch",
]
