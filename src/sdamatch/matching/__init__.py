"""
Motor de matching.

Scoring por reglas participante-inmueble y orquestación de los
tres modos de disparo.
"""

from sdamatch.matching.engine import MatchingEngine
from sdamatch.matching.scoring import score_pair

__all__ = [
    "MatchingEngine",
    "score_pair",
]
