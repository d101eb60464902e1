"""Consensus spectrum building.

This module provides:
- Block-wise merging of consecutive scans within RT blocks
- Precursor-wise merging of MS2 scans clustered by precursor similarity
- m/z binning of pooled peaks (Da or ppm widths)
"""

from .binning import (
    bin_peaks,
    bin_sorted_peaks,
)

from .spectra_merger import (
    MergeBlocks,
    SpectraMerger,
    SpectraMergerParams,
)

__all__ = [
    # Binning
    'bin_peaks',
    'bin_sorted_peaks',

    # Merging
    'MergeBlocks',
    'SpectraMerger',
    'SpectraMergerParams',
]
