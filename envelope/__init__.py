# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de las primitivas y el sobre híbrido del paquete.
# --------------------------------------------------------------
"""Inicializa el paquete `envelope` y documenta sus módulos principales."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "codec",
    "config",
    "crypto_asym",
    "crypto_kdf",
    "crypto_sym",
    "errors",
    "hybrid",
    "keystore",
    "log",
    "models",
    "storage",
]
