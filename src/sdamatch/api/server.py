"""
Servidor HTTP del motor de matching.

Expone el disparo de matching para triggers de la base (alta o edición
de participantes/inmuebles) y para el refresco manual desde el admin.
"""

import json
from typing import Optional

import structlog
from aiohttp import web
from pydantic import ValidationError

from sdamatch.api.schemas import MatchRequest
from sdamatch.config import get_settings
from sdamatch.errors import MatchingError
from sdamatch.matching import MatchingEngine

logger = structlog.get_logger()

MATCH_PATH = "/calculate-property-matches"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, x-trigger-token",
}


def _error(message: str, status: int) -> web.Response:
    return web.json_response(
        {"success": False, "error": message},
        status=status,
        headers=CORS_HEADERS,
    )


def create_app(
    engine: Optional[MatchingEngine] = None,
    trigger_token: Optional[str] = None,
) -> web.Application:
    """
    Arma la aplicación aiohttp.

    Args:
        engine: Motor a usar (por defecto uno conectado a Supabase)
        trigger_token: Token requerido en X-Trigger-Token (por defecto el de settings)
    """
    settings = get_settings()
    engine = engine or MatchingEngine()
    expected_token = trigger_token or settings.trigger_token

    async def preflight(_: web.Request) -> web.Response:
        return web.Response(text="ok", headers=CORS_HEADERS)

    async def health(_: web.Request) -> web.Response:
        return web.Response(text="ok")

    async def calculate_matches(request: web.Request) -> web.Response:
        if expected_token and request.headers.get("X-Trigger-Token") != expected_token:
            return _error("forbidden", 403)

        text = await request.text()
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError:
            return _error("Request body must be valid JSON", 400)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            return _error("Request body must be a JSON object", 400)

        try:
            payload = MatchRequest.model_validate(data)
        except ValidationError as e:
            logger.warning("Request de matching inválido", error=str(e))
            return _error(str(e), 400)

        try:
            result = await engine.run(
                participant_id=payload.participant_id,
                property_id=payload.property_id,
            )
        except MatchingError as e:
            logger.error(
                "Error calculando matches",
                error=e.message,
                status=e.status_code,
            )
            return _error(e.message, e.status_code)
        except Exception as e:
            logger.error("Error inesperado calculando matches", error=str(e))
            return _error(str(e), 500)

        return web.json_response(result.to_response(), headers=CORS_HEADERS)

    app = web.Application()
    app.router.add_route("OPTIONS", MATCH_PATH, preflight)
    app.router.add_post(MATCH_PATH, calculate_matches)
    app.router.add_get("/health", health)
    return app
