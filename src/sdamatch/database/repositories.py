"""
Repositorios para operaciones CRUD en Supabase.

Cada repositorio maneja una tabla/entidad específica y devuelve
modelos validados en lugar de diccionarios sueltos.
"""

from datetime import datetime
from typing import Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from sdamatch.config import (
    ACTIVITIES_TABLE,
    AVAILABLE_PROPERTY_STATUS,
    GOOD_MATCH_SCORE,
    INELIGIBLE_PARTICIPANT_STATUSES,
    MATCHES_TABLE,
    PARTICIPANTS_TABLE,
    PROPERTIES_TABLE,
)
from sdamatch.database.supabase_client import get_supabase_client, SupabaseClient
from sdamatch.errors import (
    InvalidRecordError,
    InvalidStatusTransitionError,
    NotFoundError,
    UpstreamWriteError,
)
from sdamatch.models import Participant, Property, PropertyMatch, MatchStatus
from sdamatch.models.match import STATUS_TIMESTAMP_COLUMNS, can_transition

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_rows(model: Type[ModelT], rows: list[dict]) -> list[ModelT]:
    """Valida filas de Supabase. Las inválidas se descartan con warning."""
    parsed = []
    for row in rows or []:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Registro inválido descartado",
                model=model.__name__,
                id=row.get("id"),
                error=str(e),
            )
    return parsed


def _parse_row(model: Type[ModelT], row: dict) -> ModelT:
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise InvalidRecordError(
            f"{model.__name__} inválido ({row.get('id')}): {e}"
        ) from e


class BaseRepository:
    """Clase base para repositorios."""

    TABLE: str = ""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def _get_row(self, row_id: str, columns: str = "*") -> Optional[dict]:
        response = (
            self.client.table(self.TABLE)
            .select(columns)
            .eq("id", row_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None


class ParticipantRepository(BaseRepository):
    """Repositorio para participantes."""

    TABLE = PARTICIPANTS_TABLE

    def get_by_id(self, participant_id: str) -> Participant:
        """
        Obtiene un participante por su UUID.

        Raises:
            NotFoundError: Si no existe
            InvalidRecordError: Si el registro no pasa la validación
        """
        row = self._get_row(participant_id)
        if not row:
            raise NotFoundError(f"Participant not found: {participant_id}")
        return _parse_row(Participant, row)

    def get_eligible(self) -> list[Participant]:
        """
        Obtiene los participantes que siguen buscando vivienda.

        Excluye status moved-in e inactive. Sin status cuenta como elegible.
        """
        excluded = ",".join(INELIGIBLE_PARTICIPANT_STATUSES)
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .or_(f"status.is.null,status.not.in.({excluded})")
            .execute()
        )
        participants = _parse_rows(Participant, response.data)
        # La base ya filtró; se revalida por si el filtro cambia
        return [p for p in participants if p.is_eligible]


class PropertyRepository(BaseRepository):
    """Repositorio para inmuebles."""

    TABLE = PROPERTIES_TABLE

    def get_by_id(self, property_id: str) -> Property:
        """
        Obtiene un inmueble por su UUID.

        Raises:
            NotFoundError: Si no existe
            InvalidRecordError: Si el registro no pasa la validación
        """
        row = self._get_row(property_id)
        if not row:
            raise NotFoundError(f"Property not found: {property_id}")
        return _parse_row(Property, row)

    def get_available(self) -> list[Property]:
        """Inmuebles disponibles y visibles en el portal de participantes."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("status", AVAILABLE_PROPERTY_STATUS)
            .eq("visible_on_participant_site", True)
            .execute()
        )
        properties = _parse_rows(Property, response.data)
        return [p for p in properties if p.is_eligible]


class MatchRepository(BaseRepository):
    """Repositorio para matches (property_matches)."""

    TABLE = MATCHES_TABLE
    CONFLICT_KEY = "property_id,participant_id"

    def upsert_many(
        self,
        matches: list[PropertyMatch],
        preserve_status: bool = False,
    ) -> int:
        """
        Inserta o actualiza todos los matches en una sola llamada.

        Args:
            matches: Matches a persistir
            preserve_status: No pisar el status de filas existentes

        Returns:
            Cantidad de filas enviadas

        Raises:
            UpstreamWriteError: Si el upsert falla (no hay escritura parcial)
        """
        if not matches:
            return 0

        rows = [m.to_db_dict(preserve_status=preserve_status) for m in matches]
        try:
            (
                self.client.table(self.TABLE)
                .upsert(rows, on_conflict=self.CONFLICT_KEY, ignore_duplicates=False)
                .execute()
            )
        except Exception as e:
            logger.error("Error guardando matches", count=len(rows), error=str(e))
            raise UpstreamWriteError(f"Failed to save matches: {e}") from e

        logger.info("Matches guardados", count=len(rows), preserve_status=preserve_status)
        return len(rows)

    def get_for_participant(
        self,
        participant_id: str,
        min_score: int = GOOD_MATCH_SCORE,
    ) -> list[dict]:
        """
        Matches de un participante para su dashboard, con datos del inmueble.

        Returns:
            Filas ordenadas por score descendente
        """
        response = (
            self.client.table(self.TABLE)
            .select(
                "id, property_id, match_score, match_reasons, status, "
                "property:properties(id, name, address, weekly_rent, bedrooms, "
                "bathrooms, sda_category, features)"
            )
            .eq("participant_id", participant_id)
            .gte("match_score", min_score)
            .order("match_score", desc=True)
            .execute()
        )
        return response.data

    def update_status(self, match_id: str, new_status: MatchStatus) -> dict:
        """
        Avanza el status de un match por acción del participante.

        Raises:
            NotFoundError: Si el match no existe
            InvalidStatusTransitionError: Si la transición no está definida
        """
        row = self._get_row(match_id, columns="id, status")
        if not row:
            raise NotFoundError(f"Match not found: {match_id}")

        try:
            new_status = MatchStatus(new_status)
            current = MatchStatus(row.get("status") or MatchStatus.SUGGESTED.value)
        except ValueError as e:
            raise InvalidStatusTransitionError(str(e)) from e

        if current == new_status:
            return row
        if not can_transition(current, new_status):
            raise InvalidStatusTransitionError(
                f"Cannot move match from {current.value} to {new_status.value}"
            )

        now = datetime.utcnow().isoformat()
        data = {
            "status": new_status.value,
            STATUS_TIMESTAMP_COLUMNS[new_status]: now,
            "updated_at": now,
        }
        response = (
            self.client.table(self.TABLE)
            .update(data)
            .eq("id", match_id)
            .execute()
        )
        logger.info(
            "Status de match actualizado",
            match_id=match_id,
            old=current.value,
            new=new_status.value,
        )
        return response.data[0] if response.data else {}


class ActivityRepository(BaseRepository):
    """Repositorio para el log de actividad de leads."""

    TABLE = ACTIVITIES_TABLE

    def log_match_notification(
        self,
        participant_id: str,
        match_count: int,
        top_score: int,
    ) -> dict:
        """Registra que se avisó al participante de matches excelentes."""
        data = {
            "participant_id": participant_id,
            "activity_type": "match_notification_sent",
            "activity_data": {
                "match_count": match_count,
                "top_score": top_score,
            },
        }
        response = self.client.table(self.TABLE).insert(data).execute()
        return response.data[0] if response.data else {}
