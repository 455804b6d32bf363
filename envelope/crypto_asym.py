# --------------------------------------------------------------
# File: crypto_asym.py
# Description: Funciones para gestionar claves RSA, cifrado directo y firmas.
# --------------------------------------------------------------
"""Abstracciones criptográficas RSA: generación, cifrado PKCS#1 v1.5 y firma SHA-256."""

import logging
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from envelope import config
from envelope.errors import (
    DecryptionFailedError,
    FormatError,
    PlaintextTooLargeError,
    UnsupportedKeySizeError,
)
from envelope.models import AsymmetricResult, KeyPair, SignatureResult

logger = logging.getLogger(__name__)

# Sobrecoste fijo del relleno PKCS#1 v1.5.
PKCS1_OVERHEAD = 11
PUBLIC_EXPONENT = 65537


def _load_public_key(public_pem: bytes) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_pem_public_key(public_pem)
    except (ValueError, TypeError) as exc:
        raise FormatError("Clave pública PEM mal formada") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise FormatError("La clave pública no es RSA")
    return key


def _load_private_key(private_pem: bytes) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(private_pem, password=None)
    except (ValueError, TypeError) as exc:
        raise FormatError("Clave privada PEM mal formada") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise FormatError("La clave privada no es RSA")
    return key


def rsa_generate_keypair(bits: Optional[int] = None) -> KeyPair:
    """Genera un par de claves RSA en formato PEM sin cifrar.

    Args:
        bits (Optional[int]): Tamaño del módulo; por defecto ``config.RSA_DEFAULT_BITS``.

    Returns:
        KeyPair: Clave pública SubjectPublicKeyInfo y privada PKCS#8.

    Raises:
        UnsupportedKeySizeError: Si `bits` no está en ``config.RSA_ALLOWED_BITS``.

    """

    bits = config.RSA_DEFAULT_BITS if bits is None else bits
    if bits not in config.RSA_ALLOWED_BITS:
        raise UnsupportedKeySizeError(
            f"Tamaño RSA no soportado: {bits}. Permitidos: {', '.join(map(str, config.RSA_ALLOWED_BITS))}"
        )

    private_key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bits)
    priv_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    pub_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    logger.info("Generado par RSA de %d bits", bits)
    return KeyPair(public_key=pub_pem, private_key=priv_pem)


def rsa_max_plaintext_size(public_pem: bytes) -> int:
    """Calcula el tamaño máximo de mensaje cifrable directamente con RSA.

    Args:
        public_pem (bytes): Clave pública en formato PEM.

    Returns:
        int: ``tamaño_clave_en_bytes - 11``.

    """

    key = _load_public_key(public_pem)
    return (key.key_size + 7) // 8 - PKCS1_OVERHEAD


def rsa_encrypt(plaintext: bytes, public_pem: bytes) -> AsymmetricResult:
    """Cifra un mensaje corto con RSA PKCS#1 v1.5.

    Args:
        plaintext (bytes): Mensaje a cifrar, limitado por el tamaño de la clave.
        public_pem (bytes): Clave pública del destinatario.

    Returns:
        AsymmetricResult: Ciphertext del tamaño del módulo.

    Raises:
        PlaintextTooLargeError: Si el mensaje supera ``tamaño_clave - 11`` bytes.

    """

    key = _load_public_key(public_pem)
    limit = (key.key_size + 7) // 8 - PKCS1_OVERHEAD
    if len(plaintext) > limit:
        raise PlaintextTooLargeError(
            f"El mensaje mide {len(plaintext)} bytes y el máximo para esta clave es {limit}"
        )
    return AsymmetricResult(ciphertext=key.encrypt(plaintext, padding.PKCS1v15()))


def rsa_decrypt(result: AsymmetricResult, private_pem: bytes) -> bytes:
    """Descifra un resultado RSA con la clave privada.

    Cualquier fallo interno se reporta con el mismo error y mensaje para no
    actuar como oráculo de relleno.

    Args:
        result (AsymmetricResult): Resultado de :func:`rsa_encrypt`.
        private_pem (bytes): Clave privada PEM.

    Returns:
        bytes: Mensaje original.

    Raises:
        DecryptionFailedError: Ante cualquier fallo de relleno o de clave.

    """

    key = _load_private_key(private_pem)
    try:
        return key.decrypt(result.ciphertext, padding.PKCS1v15())
    except (ValueError, TypeError):
        raise DecryptionFailedError("Descifrado fallido") from None


def rsa_sign(data: bytes, private_pem: bytes) -> SignatureResult:
    """Firma un mensaje con RSA PKCS#1 v1.5 sobre SHA-256.

    Args:
        data (bytes): Mensaje que se firmará.
        private_pem (bytes): Clave privada PEM.

    Returns:
        SignatureResult: Mensaje y firma resultante.

    """

    key = _load_private_key(private_pem)
    signature = key.sign(data, padding.PKCS1v15(), hashes.SHA256())
    return SignatureResult(data=data, signature=signature)


def rsa_verify(result: SignatureResult, public_pem: bytes) -> bool:
    """Verifica una firma RSA sin lanzar excepciones ante entradas no fiables.

    Args:
        result (SignatureResult): Mensaje y firma a comprobar.
        public_pem (bytes): Clave pública PEM del firmante.

    Returns:
        bool: ``True`` si la firma es válida; ``False`` en caso contrario.

    """

    try:
        key = _load_public_key(public_pem)
        key.verify(result.signature, result.data, padding.PKCS1v15(), hashes.SHA256())
        return True
    except (InvalidSignature, FormatError, ValueError, TypeError):
        logger.debug("Firma rechazada")
        return False
