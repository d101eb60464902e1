"""Consolidation of m/z-sorted peaks into consensus bins.

Consecutive peaks closer than the binning width to the current bin are
summed into it. The bin keeps the m/z of its first peak; it is NOT moved
to an intensity-weighted centroid.

Examples
--------
>>> import numpy as np
>>> mz = np.array([500.0, 500.0025, 500.01])
>>> intensity = np.array([1.0, 1.0, 1.0])
>>> bin_mz, bin_intensity = bin_sorted_peaks(mz, intensity, 10.0, True)
>>> bin_mz, bin_intensity
(array([500.  , 500.01]), array([2., 1.]))
"""

from __future__ import annotations
from typing import Tuple

import numpy as np
from numba import njit

from ..constants import BINNING_UNIT_PPM, PPM


@njit
def bin_sorted_peaks(
    mz_sorted: np.ndarray,
    intensity_sorted: np.ndarray,
    binning_width: float,
    use_ppm: bool,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sum consecutive peaks within ``binning_width`` of the current bin.

    Parameters
    ----------
    mz_sorted : np.ndarray (float64)
        Peak m/z values, sorted ascending
    intensity_sorted : np.ndarray (float64)
        Intensities in the same order
    binning_width : float
        Peaks with distance < width join the current bin
    use_ppm : bool
        Distance in ppm of the current bin m/z instead of Da

    Returns
    -------
    bin_mz : np.ndarray
        m/z of the first peak of each bin
    bin_intensity : np.ndarray
        Summed intensity of each bin

    Notes
    -----
    - Distances are measured from the bin's first peak, not from the
      previous peak, so a bin never spans more than ``binning_width``
    - A ppm distance from a bin at m/z 0 is 0 for identical m/z and
      infinite otherwise
    """
    n = len(mz_sorted)
    bin_mz = np.empty(n, dtype=np.float64)
    bin_intensity = np.empty(n, dtype=np.float64)
    if n == 0:
        return bin_mz, bin_intensity

    n_bins = 0
    current_mz = mz_sorted[0]
    current_intensity = intensity_sorted[0]

    for i in range(1, n):
        delta = abs(current_mz - mz_sorted[i])
        if use_ppm:
            if current_mz > 0.0:
                distance = delta * PPM / current_mz
            elif delta == 0.0:
                distance = 0.0
            else:
                distance = np.inf
        else:
            distance = delta

        if distance < binning_width:
            current_intensity += intensity_sorted[i]
        else:
            bin_mz[n_bins] = current_mz
            bin_intensity[n_bins] = current_intensity
            n_bins += 1
            current_mz = mz_sorted[i]
            current_intensity = intensity_sorted[i]

    bin_mz[n_bins] = current_mz
    bin_intensity[n_bins] = current_intensity
    n_bins += 1

    return bin_mz[:n_bins], bin_intensity[:n_bins]


def bin_peaks(
    mz_sorted: np.ndarray,
    intensity_sorted: np.ndarray,
    binning_width: float,
    unit: str,
) -> Tuple[np.ndarray, np.ndarray]:
    """Bin sorted peaks with the width given in ``unit`` ("Da" or "ppm")."""
    return bin_sorted_peaks(
        np.ascontiguousarray(mz_sorted, dtype=np.float64),
        np.ascontiguousarray(intensity_sorted, dtype=np.float64),
        float(binning_width),
        unit == BINNING_UNIT_PPM,
    )
