# --------------------------------------------------------------
# File: log.py
# Description: Configuración de logging con filtrado de material criptográfico.
# --------------------------------------------------------------
"""Utilidades de logging que impiden volcar claves o payloads en los registros."""

from __future__ import annotations

import logging
import re
import sys
from typing import Callable, List, Optional, Tuple, Union

from envelope import config

__all__ = ["RedactingFilter", "configure_logging"]

_REDACTED = "[REDACTED]"

_PATH_SEGMENT = re.compile(r"[A-Z]?[a-z0-9_-]*")


def _redact_base64(match: re.Match[str]) -> str:
    # Rutas de fichero: todos los segmentos son palabras en minúscula.
    run = match.group(0)
    if "/" in run and all(_PATH_SEGMENT.fullmatch(part) for part in run.split("/")):
        return run
    return _REDACTED


# Bloques PEM completos, runs Base64 largos y cadenas hex largas.
_SECRET_PATTERNS: List[Tuple[str, re.Pattern[str], Union[str, Callable[[re.Match[str]], str]]]] = [
    ("pem", re.compile(r"-----BEGIN [A-Z ]+-----.*?-----END [A-Z ]+-----", re.DOTALL), _REDACTED),
    ("base64", re.compile(r"[A-Za-z0-9+/_-]{40,}={0,2}"), _redact_base64),
    ("hex", re.compile(r"(?i)\b(?:0x)?[a-f0-9]{32,}\b"), _REDACTED),
]

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RedactingFilter(logging.Filter):
    """Filtro que sustituye cualquier material sensible por ``[REDACTED]``.

    El mensaje se formatea con sus argumentos antes de sanearlo, de modo que
    tampoco se filtren secretos pasados como parámetros del log.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        for _, pattern, replacement in _SECRET_PATTERNS:
            message = pattern.sub(replacement, message)
        record.msg = message
        record.args = None
        return True


def configure_logging(level: Optional[str] = None, stream=None) -> logging.Logger:
    """Activa la salida de logs del paquete ``envelope`` con redacción.

    Args:
        level (Optional[str]): Nivel de log; por defecto ``config.LOG_LEVEL``.
        stream: Destino del handler; por defecto ``sys.stderr``.

    Returns:
        logging.Logger: Logger raíz del paquete ya configurado.

    """

    logger = logging.getLogger("envelope")
    logger.setLevel((level or config.LOG_LEVEL).upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_envelope_managed", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.addFilter(RedactingFilter())
    handler._envelope_managed = True
    logger.addHandler(handler)
    return logger
