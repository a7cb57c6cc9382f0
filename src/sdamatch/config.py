"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py -> sdamatch/ -> src/ -> raíz del proyecto (donde está el .env)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Matching
    preserve_match_status: bool = Field(
        False,
        description=(
            "Si es True, recalcular un match no pisa el status elegido "
            "por el participante (viewed/interested)"
        ),
    )

    # Notificaciones
    notification_webhook_url: Optional[str] = Field(
        None, description="Webhook para avisos de matches excelentes (vacío = solo log)"
    )
    notification_timeout: float = Field(
        10.0, gt=0, description="Timeout del webhook de notificaciones (segundos)"
    )

    # Servidor HTTP
    server_host: str = Field("0.0.0.0", description="Host de escucha")
    server_port: int = Field(8080, description="Puerto de escucha")
    trigger_token: Optional[str] = Field(
        None, description="Token compartido requerido en X-Trigger-Token"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Umbrales de score (reglas de negocio fijas)
MIN_MATCH_SCORE = 40
GOOD_MATCH_SCORE = 60
EXCELLENT_MATCH_SCORE = 80
MAX_MATCH_SCORE = 100

SDA_CATEGORIES = [
    "Improved Liveability",
    "Fully Accessible",
    "Robust",
    "High Physical Support",
]

# Flag de movilidad del participante -> feature del inmueble
ACCESSIBILITY_FEATURES = {
    "wheelchair": "Wheelchair Accessible",
    "step_free": "Step-free Entry",
    "accessible_bathroom": "Accessible Bathroom",
    "wide_doorways": "Wide Doorways",
}

INELIGIBLE_PARTICIPANT_STATUSES = ("moved-in", "inactive")

AVAILABLE_PROPERTY_STATUS = "available"

# Tablas de Supabase
PARTICIPANTS_TABLE = "participants"
PROPERTIES_TABLE = "properties"
MATCHES_TABLE = "property_matches"
ACTIVITIES_TABLE = "lead_activities"
