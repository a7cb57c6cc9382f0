"""
Script para levantar el endpoint HTTP de matching.

Uso:
    python -m sdamatch.scripts.run_server
"""

import logging
import os
import sys

import structlog
from aiohttp import web

from sdamatch.api import create_app, MATCH_PATH
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


def main():
    """Entry point del servidor."""
    # PORT lo inyectan plataformas tipo Render
    port = int(os.getenv("PORT", settings.server_port))

    try:
        app = create_app()
        logger.info(
            "Servidor de matching activo",
            path=MATCH_PATH,
            host=settings.server_host,
            port=port,
            token_required=bool(settings.trigger_token),
        )
        web.run_app(app, host=settings.server_host, port=port, print=None)
    except KeyboardInterrupt:
        logger.info("Servidor detenido por usuario")
        sys.exit(0)
    except Exception as e:
        logger.error("Error fatal en servidor", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
