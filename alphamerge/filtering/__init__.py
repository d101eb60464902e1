"""Spectrum filters that score a single spectrum."""

from .complement import (
    ComplementFilter,
    ComplementFilterParams,
    complement_score,
)

__all__ = [
    'ComplementFilter',
    'ComplementFilterParams',
    'complement_score',
]
