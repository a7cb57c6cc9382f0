"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from sdamatch.database.supabase_client import get_supabase_client, SupabaseClient
from sdamatch.database.repositories import (
    ParticipantRepository,
    PropertyRepository,
    MatchRepository,
    ActivityRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "ParticipantRepository",
    "PropertyRepository",
    "MatchRepository",
    "ActivityRepository",
]
