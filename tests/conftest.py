# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas: pares RSA reutilizables y KDF de bajo coste.
# --------------------------------------------------------------

from typing import Iterator

import pytest

from envelope import config
from envelope.crypto_asym import rsa_generate_keypair
from envelope.models import KeyPair


@pytest.fixture(scope="session")
def keypair() -> KeyPair:
    """Par RSA de 2048 bits compartido por toda la sesión.

    Returns:
        KeyPair: Claves pública y privada en PEM.
    """
    return rsa_generate_keypair(2048)


@pytest.fixture(scope="session")
def other_keypair() -> KeyPair:
    """Segundo par RSA independiente para probar claves equivocadas.

    Returns:
        KeyPair: Claves pública y privada en PEM.
    """
    return rsa_generate_keypair(2048)


@pytest.fixture(autouse=True)
def _cheap_kdf(monkeypatch) -> Iterator[None]:
    """Reduce el coste Argon2id para que las pruebas del keystore sean rápidas.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar la configuración.

    Returns:
        Iterator[None]: Control del fixture autouse durante cada test.
    """
    monkeypatch.setitem(config.KDF_PARAMS, "t", 1)
    monkeypatch.setitem(config.KDF_PARAMS, "m", 1024)
    yield
