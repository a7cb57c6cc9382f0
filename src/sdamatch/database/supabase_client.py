"""
Conexión a Supabase compartida por los repositorios.

El matching lee y escribe filas de todos los participantes, por eso se
usa la service key cuando está configurada y la anon key si no.
"""

from functools import lru_cache

import structlog
from supabase import create_client, Client

from sdamatch.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Expone solo el acceso por tabla que usan los repositorios."""

    def __init__(self, client: Client):
        self._client = client

    def table(self, name: str):
        return self._client.table(name)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Cliente cacheado para todo el proceso.

    Raises:
        ValueError: Si faltan SUPABASE_URL o SUPABASE_KEY
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError("Faltan SUPABASE_URL o SUPABASE_KEY en el entorno")

    key = settings.supabase_service_key or settings.supabase_key
    logger.info(
        "Conectando a Supabase",
        url=settings.supabase_url,
        service_key=bool(settings.supabase_service_key),
    )
    return SupabaseClient(create_client(settings.supabase_url, key))
