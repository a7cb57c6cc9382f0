"""
Modelos de Match: la relación calculada entre un participante y un inmueble.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from sdamatch.config import EXCELLENT_MATCH_SCORE, GOOD_MATCH_SCORE


class MatchStatus(str, Enum):
    """Ciclo de vida de un match. Solo el motor crea 'suggested'."""

    SUGGESTED = "suggested"
    VIEWED = "viewed"
    INTERESTED = "interested"


# No hay vuelta atrás a 'suggested' ni estado terminal de rechazo
ALLOWED_TRANSITIONS: dict[MatchStatus, set[MatchStatus]] = {
    MatchStatus.SUGGESTED: {MatchStatus.VIEWED, MatchStatus.INTERESTED},
    MatchStatus.VIEWED: {MatchStatus.INTERESTED},
    MatchStatus.INTERESTED: set(),
}

# Columna de timestamp que se marca al entrar a cada status
STATUS_TIMESTAMP_COLUMNS = {
    MatchStatus.VIEWED: "viewed_at",
    MatchStatus.INTERESTED: "interested_at",
}


def can_transition(current: MatchStatus, new: MatchStatus) -> bool:
    """Indica si el participante puede mover un match de current a new."""
    return new in ALLOWED_TRANSITIONS[current]


def match_quality(score: int) -> str:
    """Etiqueta de calidad que se muestra en los dashboards."""
    if score >= EXCELLENT_MATCH_SCORE:
        return "excellent"
    if score >= GOOD_MATCH_SCORE:
        return "good"
    return "fair"


class MatchReason(BaseModel):
    """Un factor que sumó puntos al match."""

    reason: str
    score: int = Field(..., ge=0)
    details: Optional[str] = None


class PropertyMatch(BaseModel):
    """
    Resultado del scoring de un par (participante, inmueble).

    Se persiste en 'property_matches' con clave única
    (property_id, participant_id).
    """

    property_id: str
    participant_id: str
    match_score: int = Field(..., ge=0, le=100)
    match_reasons: list[MatchReason] = Field(default_factory=list)

    @property
    def quality(self) -> str:
        return match_quality(self.match_score)

    @property
    def key(self) -> tuple[str, str]:
        return (self.property_id, self.participant_id)

    def to_db_dict(self, preserve_status: bool = False) -> dict:
        """
        Convierte a diccionario para el upsert en Supabase.

        Args:
            preserve_status: Si es True no se manda 'status', así las filas
                nuevas toman el default de la columna y las existentes
                conservan el status que eligió el participante.
        """
        data = {
            "property_id": self.property_id,
            "participant_id": self.participant_id,
            "match_score": self.match_score,
            "match_reasons": [r.model_dump(exclude_none=True) for r in self.match_reasons],
            "updated_at": datetime.utcnow().isoformat(),
        }
        if not preserve_status:
            data["status"] = MatchStatus.SUGGESTED.value
        return data


class MatchRunResult(BaseModel):
    """Estadísticas de una ejecución del motor."""

    matches_calculated: int = 0
    excellent_matches: int = 0
    good_matches: int = 0
    notifications_sent: int = 0
    notification_errors: int = 0

    @classmethod
    def from_matches(cls, matches: list[PropertyMatch]) -> "MatchRunResult":
        return cls(
            matches_calculated=len(matches),
            excellent_matches=sum(1 for m in matches if m.quality == "excellent"),
            good_matches=sum(1 for m in matches if m.quality == "good"),
        )

    def to_response(self) -> dict:
        """Cuerpo JSON que devuelve el endpoint de matching."""
        return {
            "success": True,
            "matches_calculated": self.matches_calculated,
            "excellent_matches": self.excellent_matches,
            "good_matches": self.good_matches,
        }
