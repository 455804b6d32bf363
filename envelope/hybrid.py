# --------------------------------------------------------------
# File: hybrid.py
# Description: Sobre híbrido RSA + AES-256-CBC para payloads de tamaño arbitrario.
# --------------------------------------------------------------
"""Cifrado híbrido: el payload va con AES y sólo la clave efímera pasa por RSA.

Flujo de cifrado::

    datos --AES-256-CBC(clave_efímera, iv)--> payload
    clave_efímera --RSA PKCS#1 v1.5(pública)--> encrypted_key

La clave efímera nunca viaja en claro: el payload se construye con clave
explícita, por lo que su campo `key` queda vacío.
"""

import logging

from envelope.crypto_asym import rsa_decrypt, rsa_encrypt
from envelope.crypto_sym import KEY_SIZE, aes_cbc_decrypt, aes_cbc_encrypt, aes_generate_key
from envelope.errors import (
    DecryptionFailedError,
    EnvelopeError,
    KeyRecoveryError,
    PayloadDecryptionError,
)
from envelope.models import HybridResult

logger = logging.getLogger(__name__)


def hybrid_encrypt(data: bytes, recipient_public_pem: bytes) -> HybridResult:
    """Cifra datos de cualquier tamaño para el titular de una clave RSA.

    Args:
        data (bytes): Datos en claro.
        recipient_public_pem (bytes): Clave pública PEM del destinatario.

    Returns:
        HybridResult: Clave efímera envuelta y payload cifrado.

    """

    ephemeral_key = aes_generate_key()
    payload = aes_cbc_encrypt(data, ephemeral_key)
    encrypted_key = rsa_encrypt(ephemeral_key, recipient_public_pem)
    logger.debug("Sobre híbrido creado para %d bytes", len(data))
    return HybridResult(encrypted_key=encrypted_key, payload=payload)


def hybrid_decrypt(envelope: HybridResult, recipient_private_pem: bytes) -> bytes:
    """Abre un sobre híbrido con la clave privada del destinatario.

    Args:
        envelope (HybridResult): Sobre producido por :func:`hybrid_encrypt`.
        recipient_private_pem (bytes): Clave privada PEM del destinatario.

    Returns:
        bytes: Datos originales.

    Raises:
        KeyRecoveryError: Si no se puede recuperar una clave efímera válida.
        PayloadDecryptionError: Si el payload no se descifra con la clave recuperada.
        FormatError: Si la clave privada PEM está mal formada.

    """

    try:
        ephemeral_key = rsa_decrypt(envelope.encrypted_key, recipient_private_pem)
    except DecryptionFailedError as exc:
        raise KeyRecoveryError("No se ha podido recuperar la clave del sobre") from exc
    if len(ephemeral_key) != KEY_SIZE:
        raise KeyRecoveryError("No se ha podido recuperar la clave del sobre")

    try:
        return aes_cbc_decrypt(envelope.payload, ephemeral_key)
    except EnvelopeError as exc:
        raise PayloadDecryptionError("No se ha podido descifrar el payload del sobre") from exc
