"""Core data structures: peaks, spectra and experiments.

This module provides:
- PeakList with a stable sort-by-m/z primitive
- Spectrum and Precursor descriptors with meta information unification
- Experiment container with RT sorting and in-place content replacement
"""

from .peak_list import (
    Peak,
    PeakList,
)

from .spectrum import (
    Precursor,
    Spectrum,
)

from .experiment import Experiment

__all__ = [
    'Peak',
    'PeakList',
    'Precursor',
    'Spectrum',
    'Experiment',
]
