"""Complement peak-pair scoring for fragment spectra.

Two singly charged fragments that together make up the precursor (e.g. a
b-ion and its complementary y-ion) have m/z values that add up to the
precursor m/z. The complement score is the total intensity of all peak pairs
whose m/z sum is within a tolerance of the precursor m/z.

Performance
-----------
- Linear two-pointer scan after the m/z sort
- Scan kernel is Numba-compiled

Examples
--------
>>> import numpy as np
>>> mz = np.array([100.0, 300.0, 700.0, 900.0])
>>> intensity = np.array([5.0, 7.0, 3.0, 2.0])
>>> complement_score(mz, intensity, 1000.0, 1.0)
17.0
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import numba

from ..constants import DEFAULT_COMPLEMENT_TOLERANCE
from ..kernel.spectrum import Spectrum


@numba.jit(nopython=True, cache=True)
def complement_score(
    mz_sorted: np.ndarray,
    intensity_sorted: np.ndarray,
    parent_mass: float,
    tolerance: float,
) -> float:
    """Sum intensities of peak pairs complementing the precursor.

    Parameters
    ----------
    mz_sorted : np.ndarray (float64)
        Peak m/z values
        CRITICAL: Must be sorted ascending! No validation for speed.
    intensity_sorted : np.ndarray (float64)
        Intensities in the same order as ``mz_sorted``
    parent_mass : float
        Precursor m/z
    tolerance : float
        Maximum absolute deviation of ``mz_i + mz_j`` from ``parent_mass``

    Returns
    -------
    float
        Total intensity of all complementing pairs, 0.0 for fewer than 2 peaks

    Notes
    -----
    - A pair (i, i) is visited when the pointers meet, so a single peak at
      half the precursor m/z contributes twice its intensity.
    - On an exact hit (sum == parent_mass) the left pointer advances, which
      can skip a second partner of the right peak.
    - ``tolerance <= 0`` never matches.
    """
    n = len(mz_sorted)
    if n < 2:
        return 0.0

    result = 0.0
    i = 0
    j = n - 1
    while i <= j:
        pair_sum = mz_sorted[i] + mz_sorted[j]

        if abs(pair_sum - parent_mass) < tolerance:
            result += intensity_sorted[i] + intensity_sorted[j]

        if pair_sum < parent_mass:
            i += 1
        elif pair_sum > parent_mass:
            j -= 1
        else:
            i += 1

    return result


@dataclass
class ComplementFilterParams:
    """Parameters for complement scoring.

    Attributes
    ----------
    tolerance : float
        Allowed deviation (Da) of a pair's m/z sum from the precursor m/z
    """

    tolerance: float = DEFAULT_COMPLEMENT_TOLERANCE


class ComplementFilter:
    """Total intensity of peak pairs that could be complementing fragments.

    Only singly charged fragments are considered.

    Parameters
    ----------
    params : ComplementFilterParams, optional
        Scoring parameters (default tolerance 1.0 Da)

    Examples
    --------
    >>> spectrum = Spectrum(
    ...     peaks=PeakList.from_pairs([(100, 5), (300, 7), (700, 3), (900, 2)]),
    ...     ms_level=2,
    ...     precursors=[Precursor(mz=1000.0)],
    ... )
    >>> ComplementFilter().apply(spectrum)
    17.0
    """

    def __init__(self, params: ComplementFilterParams = None):
        self.params = params if params is not None else ComplementFilterParams()

    @property
    def tolerance(self) -> float:
        return self.params.tolerance

    def apply(self, spectrum: Spectrum) -> float:
        """Score one spectrum.

        The spectrum's peak list is sorted by m/z in place.

        Raises
        ------
        MissingInformation
            If the spectrum has at least 2 peaks but no precursor
        """
        if len(spectrum.peaks) < 2:
            return 0.0

        parent_mass = spectrum.first_precursor_mz()
        spectrum.peaks.sort_by_position()

        return float(complement_score(
            spectrum.peaks.mz,
            spectrum.peaks.intensity,
            parent_mass,
            self.params.tolerance,
        ))

    def apply_batch(self, spectra: Iterable[Spectrum]) -> np.ndarray:
        """Score several spectra, returning one score per spectrum."""
        return np.array([self.apply(s) for s in spectra], dtype=np.float64)
