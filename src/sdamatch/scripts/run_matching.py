"""
Script para ejecutar un ciclo de matching.

Sin argumentos corre el batch completo (participantes activos x
inmuebles disponibles). Con un id corre solo ese participante o inmueble.

Uso:
    python -m sdamatch.scripts.run_matching
    python -m sdamatch.scripts.run_matching --participant-id <uuid>
    python -m sdamatch.scripts.run_matching --property-id <uuid>
"""

import argparse
import asyncio
import logging
import sys

import structlog

from sdamatch.matching import MatchingEngine
from sdamatch.config import get_settings

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


async def run_matching(participant_id=None, property_id=None):
    """Ejecuta el ciclo de matching."""
    engine = MatchingEngine()
    return await engine.run(participant_id=participant_id, property_id=property_id)


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(
        description="Calcula matches participante-inmueble y los guarda en Supabase"
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--participant-id", help="Matchear solo este participante")
    target.add_argument("--property-id", help="Matchear solo este inmueble")
    args = parser.parse_args()

    logger.info("Iniciando ciclo de matching...")

    try:
        result = asyncio.run(
            run_matching(
                participant_id=args.participant_id,
                property_id=args.property_id,
            )
        )

        logger.info(
            "Matching completado",
            matches=result.matches_calculated,
            excellent=result.excellent_matches,
            good=result.good_matches,
            notifications=result.notifications_sent,
        )
        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("Matching interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
