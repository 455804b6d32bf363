# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones tipadas de la librería de sobres.
# --------------------------------------------------------------
"""Excepciones de dominio que distinguen fallos de formato, claves y descifrado."""

from __future__ import annotations

__all__ = [
    "EnvelopeError",
    "FormatError",
    "MissingKeyError",
    "InvalidKeyLengthError",
    "UnsupportedKeySizeError",
    "InvalidIvLengthError",
    "InvalidPaddingError",
    "PlaintextTooLargeError",
    "DecryptionFailedError",
    "KeyRecoveryError",
    "PayloadDecryptionError",
    "EnvelopeIOError",
]


class EnvelopeError(Exception):
    """Error base de todas las operaciones de la librería."""


class FormatError(EnvelopeError, ValueError):
    """Estructura serializada o material de clave mal formado.

    Es un fallo de la capa de parseo y nunca debe confundirse con un
    ciphertext manipulado.
    """


class MissingKeyError(EnvelopeError):
    """No se ha proporcionado clave explícita ni hay una embebida en el resultado."""


class InvalidKeyLengthError(EnvelopeError, ValueError):
    """La clave simétrica no mide 32 bytes."""


class UnsupportedKeySizeError(EnvelopeError, ValueError):
    """Tamaño de módulo RSA fuera del conjunto permitido."""


class InvalidIvLengthError(EnvelopeError, ValueError):
    """El vector de inicialización no mide 16 bytes."""


class InvalidPaddingError(EnvelopeError):
    """Relleno PKCS#7 inconsistente tras descifrar."""


class PlaintextTooLargeError(EnvelopeError, ValueError):
    """El mensaje excede la capacidad del cifrado RSA directo."""


class DecryptionFailedError(EnvelopeError):
    """Fallo genérico de descifrado asimétrico, sin detalle del motivo."""


class KeyRecoveryError(EnvelopeError):
    """No se ha podido recuperar la clave efímera de un sobre híbrido."""


class PayloadDecryptionError(EnvelopeError):
    """La clave efímera se recuperó pero el payload no se pudo descifrar."""


class EnvelopeIOError(EnvelopeError, OSError):
    """Fallo de lectura o escritura en los adaptadores de ficheros."""
