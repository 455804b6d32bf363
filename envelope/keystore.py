# --------------------------------------------------------------
# File: keystore.py
# Description: Protección de claves privadas PEM con passphrase (Argon2id + AES-GCM).
# --------------------------------------------------------------
"""Cifrado en reposo de claves privadas RSA bajo una KEK derivada de passphrase."""

import logging
import os

from argon2.exceptions import HashingError
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import ValidationError

from envelope import config
from envelope.crypto_kdf import derive_kek
from envelope.errors import DecryptionFailedError, FormatError
from envelope.models import ProtectedKey

logger = logging.getLogger(__name__)

SALT_SIZE = 16
NONCE_SIZE = 12


def protect_private_key(private_pem: bytes, passphrase: str) -> ProtectedKey:
    """Cifra una clave privada PEM con una KEK Argon2id.

    Args:
        private_pem (bytes): Clave privada PKCS#8 en claro.
        passphrase (str): Passphrase que protegerá la clave.

    Returns:
        ProtectedKey: Salt, nonce, ciphertext con tag y parámetros de la KDF.

    """

    if not passphrase:
        raise ValueError("La passphrase es obligatoria")

    params = config.KDF_PARAMS
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    kek = derive_kek(passphrase, salt, t=params["t"], m=params["m"], p=params["p"], outlen=params["outlen"])
    ciphertext = AESGCM(kek).encrypt(nonce, private_pem, associated_data=None)
    logger.info("Clave privada protegida con Argon2id t=%d m=%dKiB p=%d", params["t"], params["m"], params["p"])
    return ProtectedKey(
        salt=salt,
        nonce=nonce,
        ciphertext=ciphertext,
        time_cost=params["t"],
        memory_cost=params["m"],
        parallelism=params["p"],
    )


def unprotect_private_key(protected: ProtectedKey, passphrase: str) -> bytes:
    """Recupera la clave privada PEM de un :class:`ProtectedKey`.

    Los parámetros de la KDF se toman del propio registro, no de la
    configuración actual.

    Args:
        protected (ProtectedKey): Clave protegida.
        passphrase (str): Passphrase usada al protegerla.

    Returns:
        bytes: Clave privada PEM en claro.

    Raises:
        DecryptionFailedError: Passphrase incorrecta o registro manipulado.
        FormatError: Si el nonce o los parámetros de la KDF no son utilizables.

    """

    if len(protected.nonce) != NONCE_SIZE:
        raise FormatError("Nonce de clave protegida con tamaño inválido")

    # model_copy no revalida: se vuelve a comprobar antes de derivar.
    try:
        ProtectedKey.model_validate(protected.model_dump())
    except ValidationError as exc:
        raise FormatError("Parámetros de clave protegida inválidos") from exc

    try:
        kek = derive_kek(
            passphrase,
            protected.salt,
            t=protected.time_cost,
            m=protected.memory_cost,
            p=protected.parallelism,
        )
    except (HashingError, OverflowError) as exc:
        raise FormatError("Argon2 rechaza los parámetros de la clave protegida") from exc

    try:
        return AESGCM(kek).decrypt(protected.nonce, protected.ciphertext, None)
    except InvalidTag:
        raise DecryptionFailedError("No se ha podido descifrar la clave privada") from None
