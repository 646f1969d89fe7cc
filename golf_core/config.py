import logging
import os

import structlog


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if raw.strip() == "":
        return default
    return int(raw)


# ---------------------------------------------------------------------------------
# -------------------------------- Normalización ----------------------------------
# ---------------------------------------------------------------------------------

# Par de referencia para 9 hoyos cuando no hay campo
NINE_HOLE_PAR = _int_env("GOLF_NINE_HOLE_PAR", 36)

# Golpes extra para los 9 no jugados si el jugador no tiene hándicap
NO_HANDICAP_PENALTY = _int_env("GOLF_NO_HANDICAP_PENALTY", 4)


# ---------------------------------------------------------------------------------
# ---------------------------------- Hándicap -------------------------------------
# ---------------------------------------------------------------------------------

MIN_HANDICAP_ROUNDS = _int_env("GOLF_MIN_HANDICAP_ROUNDS", 5)
NEUTRAL_SLOPE = _int_env("GOLF_NEUTRAL_SLOPE", 113)
MAX_DIFFERENTIALS_USED = 8


# ---------------------------------------------------------------------------------
# ---------------------------------- Tendencia ------------------------------------
# ---------------------------------------------------------------------------------

TREND_MAX_ROUNDS = _int_env("GOLF_TREND_MAX_ROUNDS", 10)
TREND_WINDOW = _int_env("GOLF_TREND_WINDOW", 5)


# ---------------------------------------------------------------------------------
# ----------------------------------- Logging -------------------------------------
# ---------------------------------------------------------------------------------

LOG_LEVEL = os.getenv("GOLF_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("GOLF_LOG_FORMAT", "console")


def configure_logging(level: str | None = None, fmt: str | None = None):
    """
    Conecta structlog con logging estándar.
    fmt: "console" (desarrollo) o "key_value" (una línea por evento).
    """
    level = (level or LOG_LEVEL).upper()
    fmt = fmt or LOG_FORMAT

    if fmt == "key_value":
        renderer = structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "event", "logger"]
        )
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )

    root = logging.getLogger("golf_core")
    root.handlers = [handler]
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
