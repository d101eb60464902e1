"""alphamerge - Consensus spectra from LC-MS/MS runs.

This library merges the spectra of an experiment into consensus spectra,
either block-wise over consecutive scans or precursor-wise over MS2 scans
with similar precursors, using Numba-compiled binning and clustering kernels.
"""

__version__ = "0.1.0"

from alphamerge import kernel
from alphamerge import filtering
from alphamerge import clustering
from alphamerge import merging
from alphamerge import modifications

from alphamerge.exceptions import (
    AlphaMergeError,
    InvalidInput,
    InvalidParameter,
    MissingInformation,
)
from alphamerge.kernel import Experiment, Peak, PeakList, Precursor, Spectrum
from alphamerge.merging import SpectraMerger, SpectraMergerParams

__all__ = [
    "kernel",
    "filtering",
    "clustering",
    "merging",
    "modifications",
    "AlphaMergeError",
    "InvalidInput",
    "InvalidParameter",
    "MissingInformation",
    "Experiment",
    "Peak",
    "PeakList",
    "Precursor",
    "Spectrum",
    "SpectraMerger",
    "SpectraMergerParams",
]
