"""
Motor de matching entre participantes e inmuebles.

Implementa los tres modos de disparo:
- Un participante contra todos los inmuebles disponibles
- Un inmueble contra todos los participantes activos
- Batch completo (producto cartesiano), para refrescos manuales o cron
"""

import asyncio
from typing import Optional

import structlog

from sdamatch.config import MIN_MATCH_SCORE, get_settings
from sdamatch.database import (
    MatchRepository,
    ParticipantRepository,
    PropertyRepository,
)
from sdamatch.errors import InvalidRequestError
from sdamatch.matching.scoring import score_pair
from sdamatch.models import MatchRunResult, Participant, Property, PropertyMatch
from sdamatch.notifications import MatchNotifier

logger = structlog.get_logger()


def _check_id(name: str, value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"{name} must be a non-empty string")
    return value.strip()


class MatchingEngine:
    """
    Motor de matching con scoring por reglas.

    Flujo de un run:
    1. Cargar candidatos según el modo (participante, inmueble o batch)
    2. Calcular el score de cada par y descartar los < 40
    3. Upsert de todos los matches en una sola llamada
    4. Avisar (best-effort) a quienes tengan matches >= 80
    """

    def __init__(
        self,
        participant_repo: Optional[ParticipantRepository] = None,
        property_repo: Optional[PropertyRepository] = None,
        match_repo: Optional[MatchRepository] = None,
        notifier: Optional[MatchNotifier] = None,
        preserve_status: Optional[bool] = None,
    ):
        self.settings = get_settings()
        self.participant_repo = participant_repo or ParticipantRepository()
        self.property_repo = property_repo or PropertyRepository()
        self.match_repo = match_repo or MatchRepository()
        self.notifier = notifier or MatchNotifier()
        if preserve_status is None:
            preserve_status = self.settings.preserve_match_status
        self.preserve_status = preserve_status

    @staticmethod
    def score_candidates(
        participants: list[Participant],
        properties: list[Property],
    ) -> list[PropertyMatch]:
        """
        Calcula el score de todos los pares y filtra por umbral mínimo.

        Returns:
            Matches con score >= MIN_MATCH_SCORE
        """
        matches = []
        for participant in participants:
            for prop in properties:
                match = score_pair(participant, prop)
                if match.match_score >= MIN_MATCH_SCORE:
                    matches.append(match)
        return matches

    def _load_candidates(
        self,
        participant_id: Optional[str] = None,
        property_id: Optional[str] = None,
    ) -> tuple[list[Participant], list[Property]]:
        # El registro pedido se busca primero: si no existe no se lee nada más
        if participant_id:
            participants = [self.participant_repo.get_by_id(participant_id)]
            properties = self.property_repo.get_available()
        elif property_id:
            properties = [self.property_repo.get_by_id(property_id)]
            participants = self.participant_repo.get_eligible()
        else:
            participants = self.participant_repo.get_eligible()
            properties = self.property_repo.get_available()
        return participants, properties

    def _collect(
        self,
        participant_id: Optional[str] = None,
        property_id: Optional[str] = None,
    ) -> tuple[list[Participant], list[Property], list[PropertyMatch]]:
        participants, properties = self._load_candidates(participant_id, property_id)
        return participants, properties, self.score_candidates(participants, properties)

    async def match_participant(self, participant_id: str) -> list[PropertyMatch]:
        """
        Matchea un participante contra los inmuebles disponibles.

        Raises:
            NotFoundError: Si el participante no existe
        """
        _, _, matches = await asyncio.to_thread(self._collect, participant_id, None)
        return matches

    async def match_property(self, property_id: str) -> list[PropertyMatch]:
        """
        Matchea un inmueble contra los participantes activos.

        Raises:
            NotFoundError: Si el inmueble no existe
        """
        _, _, matches = await asyncio.to_thread(self._collect, None, property_id)
        return matches

    async def match_all(self) -> list[PropertyMatch]:
        """
        Batch completo: participantes activos x inmuebles disponibles.

        Es O(participantes x inmuebles), pensado para refrescos periódicos.
        """
        _, _, matches = await asyncio.to_thread(self._collect)
        return matches

    async def run(
        self,
        participant_id: Optional[str] = None,
        property_id: Optional[str] = None,
    ) -> MatchRunResult:
        """
        Ejecuta un ciclo de matching completo y persiste los resultados.

        Args:
            participant_id: Solo este participante
            property_id: Solo este inmueble
            (ninguno = batch completo)

        Returns:
            Estadísticas del run

        Raises:
            InvalidRequestError: Si se pasan los dos ids o alguno vacío
            NotFoundError: Si el registro pedido no existe
            UpstreamWriteError: Si falla el upsert
        """
        participant_id = _check_id("participant_id", participant_id)
        property_id = _check_id("property_id", property_id)
        if participant_id and property_id:
            raise InvalidRequestError(
                "Provide at most one of participant_id or property_id"
            )

        mode = "participant" if participant_id else "property" if property_id else "batch"
        logger.info(
            "Iniciando matching",
            mode=mode,
            participant_id=participant_id,
            property_id=property_id,
        )

        # Supabase es sincrónico: lectura, scoring y upsert corren fuera del event loop
        participants, properties, matches = await asyncio.to_thread(
            self._collect, participant_id, property_id
        )
        await asyncio.to_thread(
            self.match_repo.upsert_many, matches, preserve_status=self.preserve_status
        )

        result = MatchRunResult.from_matches(matches)

        if result.excellent_matches:
            by_id = {p.id: p for p in participants}
            sent, errors = await self.notifier.notify_excellent_matches(matches, by_id)
            result.notifications_sent = sent
            result.notification_errors = errors

        logger.info(
            "Matching completado",
            mode=mode,
            participants=len(participants),
            properties=len(properties),
            **result.model_dump(),
        )
        return result
