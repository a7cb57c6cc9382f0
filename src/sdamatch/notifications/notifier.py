"""
Avisos a participantes con matches excelentes.

Es un paso best-effort: un error acá se loguea y se cuenta, pero nunca
revierte ni hace fallar el matching que ya se guardó.
"""

from collections import defaultdict
from typing import Optional

import aiohttp
import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

from sdamatch.config import EXCELLENT_MATCH_SCORE, get_settings
from sdamatch.database import ActivityRepository
from sdamatch.errors import NotificationError
from sdamatch.models import Participant, PropertyMatch

logger = structlog.get_logger()


def group_excellent_matches(
    matches: list[PropertyMatch],
) -> dict[str, list[PropertyMatch]]:
    """Agrupa por participante los matches con score >= 80."""
    grouped: dict[str, list[PropertyMatch]] = defaultdict(list)
    for match in matches:
        if match.match_score >= EXCELLENT_MATCH_SCORE:
            grouped[match.participant_id].append(match)
    return dict(grouped)


class MatchNotifier:
    """
    Notifica a cada participante cuántos matches excelentes tiene.

    Canal:
    - Si hay NOTIFICATION_WEBHOOK_URL, POST JSON al webhook (con reintentos)
    - Si no, solo se loguea el aviso
    Después de cada aviso se registra la actividad en lead_activities.
    """

    def __init__(
        self,
        activity_repo: Optional[ActivityRepository] = None,
        webhook_url: Optional[str] = None,
    ):
        settings = get_settings()
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.timeout = settings.notification_timeout
        self.activity_repo = activity_repo or ActivityRepository()

    async def notify_excellent_matches(
        self,
        matches: list[PropertyMatch],
        participants: dict[str, Participant],
    ) -> tuple[int, int]:
        """
        Envía un aviso por participante con al menos un match excelente.

        Args:
            matches: Matches recién guardados
            participants: Participantes cargados en el run, por id

        Returns:
            (avisos enviados, errores)
        """
        sent = 0
        errors = 0

        for participant_id, participant_matches in group_excellent_matches(matches).items():
            participant = participants.get(participant_id)
            if not participant or not participant.email:
                logger.info("Participante sin email, se omite aviso", participant_id=participant_id)
                continue

            top_score = max(m.match_score for m in participant_matches)
            try:
                await self.send(participant, len(participant_matches), top_score)
            except Exception as e:
                logger.error(
                    "Error enviando notificación",
                    participant_id=participant_id,
                    error=str(e),
                )
                errors += 1
                continue
            sent += 1

            # El aviso ya salió: un fallo acá solo suma un error
            try:
                self.activity_repo.log_match_notification(
                    participant_id=participant_id,
                    match_count=len(participant_matches),
                    top_score=top_score,
                )
            except Exception as e:
                logger.error(
                    "Error registrando actividad de notificación",
                    participant_id=participant_id,
                    error=str(e),
                )
                errors += 1

        return sent, errors

    async def send(self, participant: Participant, match_count: int, top_score: int):
        """Despacha un aviso por el canal configurado."""
        payload = {
            "participant_id": participant.id,
            "email": participant.email,
            "full_name": participant.full_name,
            "match_count": match_count,
            "top_score": top_score,
            "message": (
                f"{match_count} excellent property matches found "
                f"(top score {top_score})"
            ),
        }

        if not self.webhook_url:
            logger.info(
                "Aviso de matches (solo log)",
                email=participant.email,
                match_count=match_count,
                top_score=top_score,
            )
            return

        await self._post_webhook(payload)
        logger.info(
            "Aviso de matches enviado",
            participant_id=participant.id,
            match_count=match_count,
            top_score=top_score,
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _post_webhook(self, payload: dict):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self.webhook_url, json=payload) as response:
                if response.status >= 400:
                    raise NotificationError(
                        f"Webhook de notificaciones respondió {response.status}"
                    )
