# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-256-CBC con relleno PKCS#7 para cifrado simétrico.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico con IV aleatorio por operación.

AES-CBC no aporta integridad: la única señal de corrupción es un relleno
inválido al descifrar.
"""

import logging
import os
from typing import Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from envelope.errors import (
    InvalidIvLengthError,
    InvalidKeyLengthError,
    InvalidPaddingError,
    MissingKeyError,
)
from envelope.models import SymmetricResult

logger = logging.getLogger(__name__)

KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE = 16


def aes_generate_key() -> bytes:
    """Genera una clave AES-256 aleatoria.

    Returns:
        bytes: 32 bytes procedentes del CSPRNG del sistema.

    """

    return os.urandom(KEY_SIZE)


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise InvalidKeyLengthError(f"La clave debe medir {KEY_SIZE} bytes, recibidos {len(key)}")


def _check_iv(iv: bytes) -> None:
    if len(iv) != IV_SIZE:
        raise InvalidIvLengthError(f"El IV debe medir {IV_SIZE} bytes, recibidos {len(iv)}")


def aes_cbc_encrypt_with_iv(plaintext: bytes, key: bytes, iv: bytes) -> SymmetricResult:
    """Cifra con AES-256-CBC usando una clave y un IV proporcionados.

    Pensada para vectores de prueba deterministas; en uso normal debe
    preferirse :func:`aes_cbc_encrypt`, que nunca reutiliza IV.

    Args:
        plaintext (bytes): Datos en claro.
        key (bytes): Clave de 32 bytes.
        iv (bytes): Vector de inicialización de 16 bytes.

    Returns:
        SymmetricResult: Resultado con `iv` y `ciphertext`, sin clave.

    """

    _check_key(key)
    _check_iv(iv)

    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return SymmetricResult(iv=iv, ciphertext=ciphertext)


def aes_cbc_encrypt(plaintext: bytes, key: Optional[bytes] = None) -> SymmetricResult:
    """Cifra datos con AES-256-CBC y un IV aleatorio nuevo.

    Args:
        plaintext (bytes): Datos en claro que se cifrarán.
        key (Optional[bytes]): Clave de 32 bytes. Si se omite se genera una
            aleatoria y se devuelve en el campo `key` del resultado.

    Returns:
        SymmetricResult: Resultado con `iv`, `ciphertext` y, si se generó, `key`.

    Raises:
        InvalidKeyLengthError: Si la clave proporcionada no mide 32 bytes.

    """

    generated = key is None
    if generated:
        key = aes_generate_key()

    result = aes_cbc_encrypt_with_iv(plaintext, key, os.urandom(IV_SIZE))
    logger.debug("AES-CBC cifrado: %d bytes -> %d bytes", len(plaintext), len(result.ciphertext))
    if generated:
        return result.model_copy(update={"key": key})
    return result


def aes_cbc_decrypt(result: SymmetricResult, key: Optional[bytes] = None) -> bytes:
    """Descifra un resultado AES-256-CBC y valida el relleno.

    La clave explícita tiene prioridad sobre la embebida en `result.key`.

    Args:
        result (SymmetricResult): Resultado producido por :func:`aes_cbc_encrypt`.
        key (Optional[bytes]): Clave explícita de 32 bytes.

    Returns:
        bytes: Mensaje original en claro.

    Raises:
        MissingKeyError: Si no hay clave explícita ni embebida.
        InvalidKeyLengthError: Si la clave efectiva no mide 32 bytes.
        InvalidIvLengthError: Si el IV no mide 16 bytes.
        InvalidPaddingError: Si el ciphertext no está alineado o el relleno es inconsistente.

    """

    effective_key = key if key is not None else result.key
    if effective_key is None:
        raise MissingKeyError("No se ha proporcionado clave para descifrar")
    if key is not None and result.key is not None and key != result.key:
        logger.debug("Se ignora la clave embebida en favor de la clave explícita")

    _check_key(effective_key)
    _check_iv(result.iv)

    ciphertext = result.ciphertext
    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise InvalidPaddingError("El ciphertext no es múltiplo del tamaño de bloque")

    decryptor = Cipher(algorithms.AES(effective_key), modes.CBC(result.iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise InvalidPaddingError("Relleno PKCS#7 inválido") from exc
