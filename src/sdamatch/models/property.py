"""
Modelo de Inmueble SDA.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sdamatch.config import AVAILABLE_PROPERTY_STATUS
from sdamatch.models.participant import normalize_sda_category


class Property(BaseModel):
    """
    Inmueble disponible para alquiler o venta.

    Se mapea a la tabla 'properties' de Supabase (cargada por el admin
    o sincronizada desde Airtable).
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., min_length=1, description="UUID generado por Supabase")
    name: Optional[str] = Field(None, description="Nombre comercial")
    address: str = Field(default="", description="Dirección en texto libre")

    weekly_rent: Optional[float] = Field(None, description="Alquiler semanal en AUD")
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    sda_category: Optional[str] = Field(None, description="Categoría SDA del inmueble")
    features: list[str] = Field(
        default_factory=list,
        description="Features: ['Wheelchair Accessible', 'Wide Doorways']",
    )

    # Visibilidad
    status: Optional[str] = Field(None, description="Ej: available, leased, sold")
    visible_on_participant_site: bool = Field(default=False)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("address", mode="before")
    @classmethod
    def _empty_address(cls, value):
        return value or ""

    @field_validator("bedrooms", "bathrooms", mode="before")
    @classmethod
    def _missing_rooms(cls, value):
        return value or 0

    @field_validator("features", mode="before")
    @classmethod
    def _empty_features(cls, value):
        return value or []

    @field_validator("visible_on_participant_site", mode="before")
    @classmethod
    def _null_visibility(cls, value):
        return bool(value)

    @field_validator("sda_category", mode="before")
    @classmethod
    def _canonical_category(cls, value):
        return normalize_sda_category(value)

    @property
    def is_eligible(self) -> bool:
        """True si se puede mostrar en el portal de participantes."""
        return (
            self.status == AVAILABLE_PROPERTY_STATUS
            and self.visible_on_participant_site
        )
