"""Upstream rate providers."""

from fxlive.core.data.providers.frankfurter import RemoteFxClient

__all__ = ["RemoteFxClient"]
