"""
Schemas del endpoint de matching.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MatchRequest(BaseModel):
    """Body de POST /calculate-property-matches. Vacío = batch completo."""

    model_config = ConfigDict(extra="ignore")

    participant_id: Optional[str] = Field(None, description="Matchear solo este participante")
    property_id: Optional[str] = Field(None, description="Matchear solo este inmueble")

    @field_validator("participant_id", "property_id")
    @classmethod
    def _non_empty(cls, value):
        if value is not None and not value.strip():
            raise ValueError("must be a non-empty string")
        return value.strip() if value is not None else None

    @model_validator(mode="after")
    def _at_most_one(self):
        if self.participant_id and self.property_id:
            raise ValueError("Provide at most one of participant_id or property_id")
        return self
