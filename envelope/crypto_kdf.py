# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de KEK con Argon2id para proteger claves privadas.
# --------------------------------------------------------------
"""Derivación de claves de cifrado de claves (KEK) a partir de passphrases."""

from typing import Optional

from argon2.low_level import Type, hash_secret_raw

from envelope import config


def derive_kek(
    passphrase: str,
    salt: bytes,
    *,
    t: Optional[int] = None,
    m: Optional[int] = None,
    p: Optional[int] = None,
    outlen: Optional[int] = None,
) -> bytes:
    """Deriva una KEK Argon2id para envolver una clave privada.

    Los parámetros omitidos se leen de ``config.KDF_PARAMS`` en el momento
    de la llamada.

    Args:
        passphrase (str): Passphrase del titular de la clave privada.
        salt (bytes): Salt aleatoria guardada con la clave protegida.
        t (Optional[int]): Iteraciones.
        m (Optional[int]): Memoria en KiB.
        p (Optional[int]): Carriles.
        outlen (Optional[int]): Bytes de KEK.

    Returns:
        bytes: KEK apta para AES-GCM.

    Raises:
        argon2.exceptions.HashingError: Si Argon2 rechaza los parámetros.

    """

    params = config.KDF_PARAMS
    return hash_secret_raw(
        passphrase.encode(config.TEXT_ENCODING),
        salt,
        time_cost=params["t"] if t is None else t,
        memory_cost=params["m"] if m is None else m,
        parallelism=params["p"] if p is None else p,
        hash_len=params["outlen"] if outlen is None else outlen,
        type=Type.ID,
    )
