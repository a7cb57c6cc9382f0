"""
Modelo de Participante y sus requerimientos de movilidad.

Un participante es una persona con financiamiento SDA que busca vivienda.
Sus preferencias son las que alimentan el score de matching.
"""

from datetime import datetime
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from sdamatch.config import INELIGIBLE_PARTICIPANT_STATUSES, SDA_CATEGORIES

logger = structlog.get_logger()


def normalize_sda_category(value):
    """
    Normaliza una categoría SDA a su forma canónica.

    Acepta cualquier capitalización. Vacío se toma como "sin categoría".
    Una categoría fuera de SDA_CATEGORIES se conserva tal cual y se loguea.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    for category in SDA_CATEGORIES:
        if category.lower() == text.lower():
            return category
    logger.warning("Categoría SDA no reconocida", sda_category=text)
    return text


class MobilityRequirements(BaseModel):
    """
    Requerimientos de accesibilidad declarados por el participante.
    Solo cuentan los flags en True.
    """

    model_config = ConfigDict(extra="ignore")

    wheelchair: bool = Field(default=False, description="Usa silla de ruedas")
    step_free: bool = Field(default=False, description="Necesita acceso sin escalones")
    accessible_bathroom: bool = Field(default=False, description="Necesita baño accesible")
    wide_doorways: bool = Field(default=False, description="Necesita puertas anchas")

    @field_validator("*", mode="before")
    @classmethod
    def _null_flag(cls, value):
        return False if value is None else value

    def declared(self) -> list[str]:
        """Devuelve los nombres de los flags marcados en True."""
        return [name for name, value in self.model_dump().items() if value is True]


class Participant(BaseModel):
    """
    Participante del NDIS buscando vivienda SDA.

    Se mapea a la tabla 'participants' de Supabase. Las columnas que
    no usa el matching se ignoran.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    # Identificadores
    id: str = Field(..., min_length=1, description="UUID generado por Supabase")
    full_name: Optional[str] = Field(None, description="Nombre del participante")
    email: Optional[str] = Field(None, description="Email para notificaciones")

    # Estado del lead
    status: Optional[str] = Field(None, description="Ej: new, searching, moved-in, inactive")

    # Preferencias
    preferred_locations: list[str] = Field(
        default_factory=list, description="Zonas aceptables (texto libre)"
    )
    max_weekly_budget: Optional[float] = Field(
        None, description="Presupuesto semanal máximo en AUD"
    )
    min_bedrooms: int = Field(default=1, ge=1, description="Mínimo de dormitorios")
    min_bathrooms: int = Field(default=1, ge=1, description="Mínimo de baños")
    sda_category: Optional[str] = Field(None, description="Categoría SDA requerida")
    mobility_requirements: MobilityRequirements = Field(
        default_factory=MobilityRequirements
    )

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("preferred_locations", mode="before")
    @classmethod
    def _clean_locations(cls, value):
        if not value:
            return []
        return [str(loc).strip() for loc in value if loc and str(loc).strip()]

    @field_validator("min_bedrooms", "min_bathrooms", mode="before")
    @classmethod
    def _default_minimum(cls, value):
        # Sin mínimo cargado (null o 0) equivale a 1
        return value or 1

    @field_validator("sda_category", mode="before")
    @classmethod
    def _canonical_category(cls, value):
        return normalize_sda_category(value)

    @field_validator("mobility_requirements", mode="before")
    @classmethod
    def _empty_requirements(cls, value):
        return value or {}

    @property
    def is_eligible(self) -> bool:
        """True si el participante sigue buscando (entra al batch)."""
        return self.status not in INELIGIBLE_PARTICIPANT_STATUSES
