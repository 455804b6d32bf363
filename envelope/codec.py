# --------------------------------------------------------------
# File: codec.py
# Description: Serialización textual canónica de todos los tipos de resultado.
# --------------------------------------------------------------
"""Codificación de resultados en forma de texto estructurado o compacto.

La forma estructurada es un mapa plano ``campo -> str`` con nombres fijos;
los campos binarios van en Base64 estándar. El formato concreto del mapa
(JSON por defecto) se abstrae detrás de :class:`TextCodec`.

La forma compacta es Base64 puro y sólo aplica a resultados con un único
campo binario (:class:`AsymmetricResult`).
"""

from __future__ import annotations

import base64
import binascii
import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from envelope.errors import FormatError
from envelope.models import (
    AsymmetricResult,
    HybridResult,
    ProtectedKey,
    SignatureResult,
    SymmetricResult,
)

__all__ = [
    "TextCodec",
    "JsonTextCodec",
    "FORMAT_VERSION",
    "to_text",
    "from_text",
    "to_compact",
    "from_compact",
]

FORMAT_VERSION = "1"
_MAX_INT_DIGITS = 18

Result = Union[AsymmetricResult, HybridResult, ProtectedKey, SignatureResult, SymmetricResult]


class TextCodec(ABC):
    """Contrato de un formato de texto estructurado para mapas ``str -> str``."""

    @abstractmethod
    def encode(self, fields: Dict[str, str]) -> str:
        """Serializa el mapa de campos de forma determinista."""

    @abstractmethod
    def decode(self, text: str) -> Dict[str, str]:
        """Reconstruye el mapa de campos o lanza :class:`FormatError`."""


class JsonTextCodec(TextCodec):
    """Implementación JSON con claves ordenadas y sin espacios."""

    def encode(self, fields: Dict[str, str]) -> str:
        return json.dumps(fields, separators=(",", ":"), sort_keys=True, ensure_ascii=True)

    def decode(self, text: str) -> Dict[str, str]:
        if not isinstance(text, str):
            raise FormatError("El texto serializado debe ser str")
        try:
            fields = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FormatError(f"JSON mal formado: {exc.msg}") from exc
        except RecursionError as exc:
            raise FormatError("JSON con anidamiento excesivo") from exc
        if not isinstance(fields, dict):
            raise FormatError("El documento debe ser un objeto JSON")
        for name, value in fields.items():
            if not isinstance(value, str):
                raise FormatError(f"El campo '{name}' debe ser una cadena")
        return fields


_DEFAULT_CODEC = JsonTextCodec()


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(name: str, value: str) -> bytes:
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise FormatError(f"El campo '{name}' no es Base64 válido") from exc


def _parse_int(name: str, value: str) -> int:
    # Los rangos válidos los impone el modelo; aquí sólo se acota la longitud.
    if not (value.isascii() and value.isdigit()) or len(value) > _MAX_INT_DIGITS:
        raise FormatError(f"El campo '{name}' debe ser un entero decimal sin signo")
    return int(value)


# --- Tabla de tipos -------------------------------------------------------
# Cada entrada: etiqueta, campos obligatorios, campos opcionales,
# función modelo -> campos binarios/enteros y función campos -> kwargs.


def _symmetric_fields(result: SymmetricResult) -> Dict[str, str]:
    fields = {"iv": _b64(result.iv), "ciphertext": _b64(result.ciphertext)}
    if result.key is not None:
        fields["key"] = _b64(result.key)
    return fields


def _symmetric_build(fields: Dict[str, str]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "iv": _unb64("iv", fields["iv"]),
        "ciphertext": _unb64("ciphertext", fields["ciphertext"]),
    }
    if "key" in fields:
        kwargs["key"] = _unb64("key", fields["key"])
    return kwargs


def _hybrid_fields(result: HybridResult) -> Dict[str, str]:
    return {
        "encrypted_key": _b64(result.encrypted_key.ciphertext),
        "iv": _b64(result.payload.iv),
        "ciphertext": _b64(result.payload.ciphertext),
    }


def _hybrid_build(fields: Dict[str, str]) -> Dict[str, Any]:
    return {
        "encrypted_key": AsymmetricResult(ciphertext=_unb64("encrypted_key", fields["encrypted_key"])),
        "payload": SymmetricResult(
            iv=_unb64("iv", fields["iv"]),
            ciphertext=_unb64("ciphertext", fields["ciphertext"]),
        ),
    }


def _protected_fields(result: ProtectedKey) -> Dict[str, str]:
    return {
        "salt": _b64(result.salt),
        "nonce": _b64(result.nonce),
        "ciphertext": _b64(result.ciphertext),
        "time_cost": str(result.time_cost),
        "memory_cost": str(result.memory_cost),
        "parallelism": str(result.parallelism),
    }


def _protected_build(fields: Dict[str, str]) -> Dict[str, Any]:
    return {
        "salt": _unb64("salt", fields["salt"]),
        "nonce": _unb64("nonce", fields["nonce"]),
        "ciphertext": _unb64("ciphertext", fields["ciphertext"]),
        "time_cost": _parse_int("time_cost", fields["time_cost"]),
        "memory_cost": _parse_int("memory_cost", fields["memory_cost"]),
        "parallelism": _parse_int("parallelism", fields["parallelism"]),
    }


_Spec = Tuple[
    str,
    Type[BaseModel],
    Tuple[str, ...],
    Tuple[str, ...],
    Callable[[Any], Dict[str, str]],
    Callable[[Dict[str, str]], Dict[str, Any]],
]

_SPECS: Tuple[_Spec, ...] = (
    ("symmetric", SymmetricResult, ("iv", "ciphertext"), ("key",), _symmetric_fields, _symmetric_build),
    (
        "asymmetric",
        AsymmetricResult,
        ("ciphertext",),
        (),
        lambda r: {"ciphertext": _b64(r.ciphertext)},
        lambda f: {"ciphertext": _unb64("ciphertext", f["ciphertext"])},
    ),
    (
        "signature",
        SignatureResult,
        ("data", "signature"),
        (),
        lambda r: {"data": _b64(r.data), "signature": _b64(r.signature)},
        lambda f: {"data": _unb64("data", f["data"]), "signature": _unb64("signature", f["signature"])},
    ),
    ("hybrid", HybridResult, ("encrypted_key", "iv", "ciphertext"), (), _hybrid_fields, _hybrid_build),
    (
        "protected-key",
        ProtectedKey,
        ("salt", "nonce", "ciphertext", "time_cost", "memory_cost", "parallelism"),
        (),
        _protected_fields,
        _protected_build,
    ),
)

_BY_TAG = {spec[0]: spec for spec in _SPECS}
_BY_TYPE = {spec[1]: spec for spec in _SPECS}

_HEADER = ("type", "version")


def to_text(result: Result, codec: Optional[TextCodec] = None) -> str:
    """Serializa un resultado a su forma de texto estructurado.

    Args:
        result (Result): Cualquier resultado de la librería.
        codec (Optional[TextCodec]): Formato de texto; JSON por defecto.

    Returns:
        str: Documento con `type`, `version` y los campos del resultado.

    Raises:
        TypeError: Si `result` no es un tipo de resultado conocido.

    """

    spec = _BY_TYPE.get(type(result))
    if spec is None:
        raise TypeError(f"Tipo de resultado no serializable: {type(result).__name__}")
    tag, _, _, _, dump, _ = spec
    fields = {"type": tag, "version": FORMAT_VERSION}
    fields.update(dump(result))
    return (codec or _DEFAULT_CODEC).encode(fields)


def from_text(text: str, codec: Optional[TextCodec] = None) -> Result:
    """Reconstruye un resultado a partir de su forma estructurada.

    Args:
        text (str): Documento producido por :func:`to_text`.
        codec (Optional[TextCodec]): Formato de texto; JSON por defecto.

    Returns:
        Result: Resultado estructuralmente igual al serializado.

    Raises:
        FormatError: Ante cualquier defecto estructural o de codificación.

    """

    fields = (codec or _DEFAULT_CODEC).decode(text)

    tag = fields.get("type")
    spec = _BY_TAG.get(tag) if tag is not None else None
    if spec is None:
        raise FormatError(f"Tipo de resultado desconocido: {tag!r}")
    if fields.get("version") != FORMAT_VERSION:
        raise FormatError(f"Versión de formato no soportada: {fields.get('version')!r}")

    _, model, required, optional, _, build = spec
    missing = [name for name in required if name not in fields]
    if missing:
        raise FormatError(f"Faltan campos obligatorios: {', '.join(missing)}")
    unknown = set(fields) - set(required) - set(optional) - set(_HEADER)
    if unknown:
        raise FormatError(f"Campos no reconocidos: {', '.join(sorted(unknown))}")

    try:
        return model(**build(fields))
    except ValidationError as exc:
        raise FormatError(f"Estructura de '{tag}' inválida") from exc


def to_compact(result: AsymmetricResult) -> str:
    """Codifica en Base64 puro un resultado con un único campo binario.

    Args:
        result (AsymmetricResult): Resultado RSA directo.

    Returns:
        str: Ciphertext en Base64 estándar.

    Raises:
        TypeError: Si el resultado tiene más de un campo binario.

    """

    if not isinstance(result, AsymmetricResult):
        raise TypeError(f"La forma compacta no aplica a {type(result).__name__}")
    return _b64(result.ciphertext)


def from_compact(text: str) -> AsymmetricResult:
    """Reconstruye un :class:`AsymmetricResult` desde su forma compacta.

    Raises:
        FormatError: Si el texto no es Base64 válido o está vacío.

    """

    if not isinstance(text, str) or not text.strip():
        raise FormatError("La forma compacta debe ser una cadena Base64 no vacía")
    return AsymmetricResult(ciphertext=_unb64("ciphertext", text.strip()))
