# --------------------------------------------------------------
# File: text.py
# Description: Variantes de texto de las operaciones de cifrado y firma.
# --------------------------------------------------------------
"""Adaptadores `str` que codifican el texto y delegan en la API de bytes."""

from typing import Optional

from envelope import config
from envelope.crypto_asym import rsa_decrypt, rsa_encrypt, rsa_sign, rsa_verify
from envelope.crypto_sym import aes_cbc_decrypt, aes_cbc_encrypt
from envelope.errors import FormatError
from envelope.hybrid import hybrid_decrypt, hybrid_encrypt
from envelope.models import AsymmetricResult, HybridResult, SignatureResult, SymmetricResult


def _encode(text: str) -> bytes:
    return text.encode(config.TEXT_ENCODING)


def _decode(data: bytes) -> str:
    try:
        return data.decode(config.TEXT_ENCODING)
    except UnicodeDecodeError as exc:
        raise FormatError(f"El contenido descifrado no es texto {config.TEXT_ENCODING} válido") from exc


def encrypt_text(text: str, key: Optional[bytes] = None) -> SymmetricResult:
    """Cifra un texto con AES-256-CBC."""

    return aes_cbc_encrypt(_encode(text), key)


def decrypt_text(result: SymmetricResult, key: Optional[bytes] = None) -> str:
    """Descifra un resultado AES y devuelve el texto original."""

    return _decode(aes_cbc_decrypt(result, key))


def rsa_encrypt_text(text: str, public_pem: bytes) -> AsymmetricResult:
    return rsa_encrypt(_encode(text), public_pem)


def rsa_decrypt_text(result: AsymmetricResult, private_pem: bytes) -> str:
    return _decode(rsa_decrypt(result, private_pem))


def sign_text(text: str, private_pem: bytes) -> SignatureResult:
    """Firma la codificación del texto."""

    return rsa_sign(_encode(text), private_pem)


def verify_text(text: str, signature: bytes, public_pem: bytes) -> bool:
    """Verifica una firma sobre un texto.

    Args:
        text (str): Texto supuestamente firmado.
        signature (bytes): Firma recibida.
        public_pem (bytes): Clave pública del firmante.

    Returns:
        bool: ``True`` si la firma corresponde al texto.

    """

    return rsa_verify(SignatureResult(data=_encode(text), signature=signature), public_pem)


def hybrid_encrypt_text(text: str, recipient_public_pem: bytes) -> HybridResult:
    return hybrid_encrypt(_encode(text), recipient_public_pem)


def hybrid_decrypt_text(envelope: HybridResult, recipient_private_pem: bytes) -> str:
    return _decode(hybrid_decrypt(envelope, recipient_private_pem))
