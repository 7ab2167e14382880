"""Data access layer: provider clients and payload normalization."""

from fxlive.core.data.normalizer import RateDataNormalizer

__all__ = ["RateDataNormalizer"]
