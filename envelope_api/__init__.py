# --------------------------------------------------------------
# File: __init__.py
# Description: Adaptadores de texto y ficheros sobre la API binaria de `envelope`.
# --------------------------------------------------------------
"""Capa de servicios que traduce `str` y rutas a llamadas de la API de bytes."""

__all__ = ["files", "text"]
