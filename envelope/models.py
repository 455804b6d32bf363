# --------------------------------------------------------------
# File: models.py
# Description: Modelos de resultado inmutables producidos por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan los resultados de cifrado, firma y sobre híbrido."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "SymmetricResult",
    "AsymmetricResult",
    "SignatureResult",
    "HybridResult",
    "KeyPair",
    "ProtectedKey",
]

MIN_SALT_SIZE = 8
MAX_TIME_COST = 64
MAX_MEMORY_COST = 4 * 1024 * 1024
MAX_PARALLELISM = 64


class _FrozenModel(BaseModel):
    """Base común: los resultados sólo se construyen, nunca se modifican."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class SymmetricResult(_FrozenModel):
    """Representa el resultado de una operación AES-256-CBC.

    Attributes:
        iv (bytes): Vector de inicialización aleatorio de 16 bytes.
        ciphertext (bytes): Datos cifrados con relleno PKCS#7.
        key (Optional[bytes]): Clave de 32 bytes, presente sólo si la operación
            la generó automáticamente.

    """

    iv: bytes
    ciphertext: bytes
    key: Optional[bytes] = Field(default=None, repr=False)


class AsymmetricResult(_FrozenModel):
    """Resultado de un cifrado RSA directo.

    Attributes:
        ciphertext (bytes): Bloque cifrado del tamaño del módulo.

    """

    ciphertext: bytes


class SignatureResult(_FrozenModel):
    """Firma RSA junto con el mensaje firmado.

    Attributes:
        data (bytes): Mensaje original, conservado por comodidad.
        signature (bytes): Firma PKCS#1 v1.5 sobre el digest SHA-256.

    """

    data: bytes
    signature: bytes


class HybridResult(_FrozenModel):
    """Sobre híbrido: clave efímera envuelta con RSA y payload cifrado con AES.

    Attributes:
        encrypted_key (AsymmetricResult): Clave efímera cifrada con la pública del destinatario.
        payload (SymmetricResult): Datos cifrados con la clave efímera, sin la clave.

    """

    encrypted_key: AsymmetricResult
    payload: SymmetricResult

    @model_validator(mode="after")
    def _payload_without_key(self) -> "HybridResult":
        if self.payload.key is not None:
            raise ValueError("El payload de un sobre híbrido no puede transportar la clave en claro")
        return self


class KeyPair(_FrozenModel):
    """Par de claves RSA en formato PEM.

    Attributes:
        public_key (bytes): Clave pública SubjectPublicKeyInfo.
        private_key (bytes): Clave privada PKCS#8 sin cifrar.

    """

    public_key: bytes
    private_key: bytes = Field(repr=False)


class ProtectedKey(_FrozenModel):
    """Clave privada PEM cifrada con una KEK Argon2id y AES-GCM.

    Los parámetros de la KDF viajan con el registro; se acotan para que un
    documento manipulado no pueda pedir una derivación imposible o costosa.

    Attributes:
        salt (bytes): Salt Argon2, al menos 8 bytes.
        nonce (bytes): Nonce AES-GCM.
        ciphertext (bytes): Clave privada cifrada con el tag GCM.
        time_cost (int): Iteraciones Argon2.
        memory_cost (int): Memoria en KiB, como máximo 4 GiB.
        parallelism (int): Carriles Argon2.

    """

    salt: bytes = Field(min_length=MIN_SALT_SIZE)
    nonce: bytes
    ciphertext: bytes
    time_cost: int = Field(gt=0, le=MAX_TIME_COST)
    memory_cost: int = Field(gt=0, le=MAX_MEMORY_COST)
    parallelism: int = Field(gt=0, le=MAX_PARALLELISM)

    @model_validator(mode="after")
    def _memory_covers_lanes(self) -> "ProtectedKey":
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("memory_cost debe ser al menos 8 KiB por carril")
        return self
