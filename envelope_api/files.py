# --------------------------------------------------------------
# File: files.py
# Description: Adaptadores de ficheros: leer completo, llamar a la API y escribir atómico.
# --------------------------------------------------------------
"""Variantes basadas en rutas de las operaciones de cifrado, firma y gestión de claves.

Los ficheros cifrados contienen la forma de texto estructurado del resultado.
Un fichero cifrado simétricamente nunca incluye la clave: quien cifra recibe
el resultado completo y decide dónde guardarla.
"""

import logging
import os
from typing import Optional, Tuple, Type, TypeVar

from envelope.codec import from_text, to_text
from envelope.crypto_asym import rsa_sign, rsa_verify
from envelope.crypto_sym import aes_cbc_decrypt, aes_cbc_encrypt
from envelope.errors import FormatError
from envelope.hybrid import hybrid_decrypt, hybrid_encrypt
from envelope.keystore import protect_private_key, unprotect_private_key
from envelope.models import HybridResult, KeyPair, ProtectedKey, SignatureResult, SymmetricResult
from envelope.storage import PathLike, read_bytes, write_bytes_atomic

logger = logging.getLogger(__name__)

PUBLIC_KEY_FILE = "public.pem"
PRIVATE_KEY_FILE = "private.pem"
PRIVATE_KEY_MODE = 0o600

_R = TypeVar("_R")


def _read_result(path: PathLike, expected: Type[_R]) -> _R:
    raw = read_bytes(path)
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError(f"{os.fspath(path)} no contiene un sobre en texto") from exc
    result = from_text(text)
    if not isinstance(result, expected):
        raise FormatError(f"{os.fspath(path)} no contiene un resultado de tipo {expected.__name__}")
    return result


def _write_result(path: PathLike, result, mode: Optional[int] = None) -> None:
    write_bytes_atomic(path, to_text(result).encode("ascii"), mode=mode)


def encrypt_file(src: PathLike, dst: PathLike, key: Optional[bytes] = None) -> SymmetricResult:
    """Cifra un fichero con AES-256-CBC.

    Args:
        src (PathLike): Fichero en claro.
        dst (PathLike): Destino del sobre simétrico (sin clave).
        key (Optional[bytes]): Clave de 32 bytes; si se omite se genera.

    Returns:
        SymmetricResult: El mismo resultado que :func:`aes_cbc_encrypt`,
        incluida la clave generada.

    """

    result = aes_cbc_encrypt(read_bytes(src), key)
    _write_result(dst, result.model_copy(update={"key": None}))
    logger.info("Fichero cifrado: %s -> %s", os.fspath(src), os.fspath(dst))
    return result


def decrypt_file(src: PathLike, dst: PathLike, key: bytes) -> bytes:
    """Descifra un sobre simétrico guardado por :func:`encrypt_file`.

    Returns:
        bytes: Contenido en claro escrito en `dst`.

    """

    plaintext = aes_cbc_decrypt(_read_result(src, SymmetricResult), key)
    write_bytes_atomic(dst, plaintext)
    return plaintext


def hybrid_encrypt_file(src: PathLike, dst: PathLike, recipient_public_pem: bytes) -> HybridResult:
    """Cifra un fichero de cualquier tamaño para el titular de una clave RSA."""

    envelope = hybrid_encrypt(read_bytes(src), recipient_public_pem)
    _write_result(dst, envelope)
    logger.info("Sobre híbrido escrito en %s", os.fspath(dst))
    return envelope


def hybrid_decrypt_file(src: PathLike, dst: PathLike, recipient_private_pem: bytes) -> bytes:
    plaintext = hybrid_decrypt(_read_result(src, HybridResult), recipient_private_pem)
    write_bytes_atomic(dst, plaintext)
    return plaintext


def sign_file(src: PathLike, dst: PathLike, private_pem: bytes) -> SignatureResult:
    """Firma un fichero y guarda la firma (con el mensaje) en `dst`."""

    result = rsa_sign(read_bytes(src), private_pem)
    _write_result(dst, result)
    return result


def verify_file(src: PathLike, signature_path: PathLike, public_pem: bytes) -> bool:
    """Verifica que `signature_path` firme exactamente el contenido de `src`.

    Un fichero de firma ilegible cuenta como firma inválida; sólo los errores
    de E/S se propagan.

    Returns:
        bool: ``True`` si la firma es válida para el contenido actual.

    """

    try:
        signature = _read_result(signature_path, SignatureResult)
    except FormatError:
        logger.debug("Fichero de firma mal formado: %s", os.fspath(signature_path))
        return False
    if signature.data != read_bytes(src):
        return False
    return rsa_verify(signature, public_pem)


def save_keypair(keypair: KeyPair, directory: PathLike, passphrase: Optional[str] = None) -> Tuple[str, str]:
    """Guarda un par de claves en `directory`.

    Args:
        keypair (KeyPair): Par generado por :func:`rsa_generate_keypair`.
        directory (PathLike): Directorio de destino; se crea si no existe.
        passphrase (Optional[str]): Si se indica, la clave privada se guarda
            protegida con Argon2id + AES-GCM en lugar de en PEM claro.

    Returns:
        Tuple[str, str]: Rutas de la clave pública y de la privada.

    """

    public_path = os.path.join(os.fspath(directory), PUBLIC_KEY_FILE)
    private_path = os.path.join(os.fspath(directory), PRIVATE_KEY_FILE)

    write_bytes_atomic(public_path, keypair.public_key)
    if passphrase:
        _write_result(private_path, protect_private_key(keypair.private_key, passphrase), mode=PRIVATE_KEY_MODE)
    else:
        write_bytes_atomic(private_path, keypair.private_key, mode=PRIVATE_KEY_MODE)
    return public_path, private_path


def load_keypair(directory: PathLike, passphrase: Optional[str] = None) -> KeyPair:
    """Carga un par guardado con :func:`save_keypair`.

    Raises:
        FormatError: Si la clave privada está protegida y no se indica passphrase.
        DecryptionFailedError: Si la passphrase es incorrecta.

    """

    public_path = os.path.join(os.fspath(directory), PUBLIC_KEY_FILE)
    private_path = os.path.join(os.fspath(directory), PRIVATE_KEY_FILE)

    public_pem = read_bytes(public_path)
    if passphrase:
        private_pem = unprotect_private_key(_read_result(private_path, ProtectedKey), passphrase)
    else:
        private_pem = read_bytes(private_path)
        if not private_pem.startswith(b"-----BEGIN"):
            raise FormatError("La clave privada está protegida: se necesita passphrase")
    return KeyPair(public_key=public_pem, private_key=private_pem)
