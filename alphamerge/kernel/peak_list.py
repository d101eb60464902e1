"""Peak container backed by parallel m/z and intensity arrays.

Peaks are stored as two float64 numpy arrays so that the numba kernels
(binning, complement scoring) can operate on them without conversion.

Examples
--------
>>> peaks = PeakList.from_pairs([(300.0, 7.0), (100.0, 5.0)])
>>> peaks.sort_by_position()
>>> peaks[0]
Peak(mz=100.0, intensity=5.0)
"""

from __future__ import annotations
from typing import Iterable, Iterator, NamedTuple, Optional, Tuple, Union

import numpy as np


class Peak(NamedTuple):
    """A single centroided peak."""

    mz: float
    intensity: float


class PeakList:
    """Ordered sequence of (m/z, intensity) peaks.

    Parameters
    ----------
    mz : array-like, optional
        m/z values
    intensity : array-like, optional
        Intensities, same length as ``mz``

    Notes
    -----
    - ``sort_by_position()`` uses a stable sort, so peaks with equal m/z keep
      their insertion order. Binning results depend on this order.
    - The arrays are exposed read/write through ``mz`` and ``intensity``.
    """

    __slots__ = ("_mz", "_intensity")

    def __init__(
        self,
        mz: Optional[Iterable[float]] = None,
        intensity: Optional[Iterable[float]] = None,
    ):
        mz_arr = np.asarray(mz if mz is not None else [], dtype=np.float64).ravel()
        int_arr = np.asarray(intensity if intensity is not None else [], dtype=np.float64).ravel()
        if len(mz_arr) != len(int_arr):
            raise ValueError(
                f"mz and intensity must have same length, got {len(mz_arr)} and {len(int_arr)}"
            )
        self._mz = mz_arr
        self._intensity = int_arr

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[float, float]]) -> "PeakList":
        """Build a peak list from (m/z, intensity) tuples."""
        pairs = list(pairs)
        if not pairs:
            return cls()
        mz, intensity = zip(*pairs)
        return cls(mz, intensity)

    @property
    def mz(self) -> np.ndarray:
        return self._mz

    @property
    def intensity(self) -> np.ndarray:
        return self._intensity

    def __len__(self) -> int:
        return len(self._mz)

    def __getitem__(self, index: int) -> Peak:
        return Peak(float(self._mz[index]), float(self._intensity[index]))

    def __iter__(self) -> Iterator[Peak]:
        for i in range(len(self._mz)):
            yield Peak(float(self._mz[i]), float(self._intensity[i]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PeakList):
            return NotImplemented
        return np.array_equal(self._mz, other._mz) and np.array_equal(
            self._intensity, other._intensity
        )

    def __repr__(self) -> str:
        return f"PeakList(n_peaks={len(self)})"

    def push(self, peak: Union[Peak, float], intensity: Optional[float] = None) -> None:
        """Append a peak, given as ``Peak`` or as ``(mz, intensity)`` arguments."""
        if intensity is None:
            mz, intensity = peak
        else:
            mz = peak
        self._mz = np.append(self._mz, np.float64(mz))
        self._intensity = np.append(self._intensity, np.float64(intensity))

    def extend(self, other: "PeakList") -> None:
        """Append all peaks of ``other`` after the current ones."""
        self._mz = np.concatenate((self._mz, other._mz))
        self._intensity = np.concatenate((self._intensity, other._intensity))

    def sort_by_position(self) -> None:
        """Sort peaks by ascending m/z (stable)."""
        order = np.argsort(self._mz, kind="stable")
        self._mz = self._mz[order]
        self._intensity = self._intensity[order]

    def is_sorted(self) -> bool:
        return bool(np.all(self._mz[1:] >= self._mz[:-1]))

    def total_intensity(self) -> float:
        return float(np.sum(self._intensity))

    def copy(self) -> "PeakList":
        return PeakList(self._mz.copy(), self._intensity.copy())

    @classmethod
    def concatenate(cls, peak_lists: Iterable["PeakList"]) -> "PeakList":
        """Concatenate several peak lists in the given order."""
        peak_lists = list(peak_lists)
        if not peak_lists:
            return cls()
        return cls(
            np.concatenate([p._mz for p in peak_lists]),
            np.concatenate([p._intensity for p in peak_lists]),
        )
