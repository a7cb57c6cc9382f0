"""
Interfaz HTTP del motor de matching.
"""

from sdamatch.api.server import create_app, MATCH_PATH
from sdamatch.api.schemas import MatchRequest

__all__ = [
    "create_app",
    "MATCH_PATH",
    "MatchRequest",
]
