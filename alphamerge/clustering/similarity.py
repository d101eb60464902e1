"""Precursor similarity in the (RT, m/z) plane.

Two fragment spectra are similar when their precursors elute close together
and have close m/z values. The similarity falls linearly from 1 (identical
precursors) to 0 at the tolerance limits:

    sim = 1 - (d_rt / rt_tolerance + d_mz / mz_tolerance) / 2

and is 0 whenever either distance exceeds its tolerance.

Examples
--------
>>> sim = PrecursorSimilarity(rt_tolerance=10.0, mz_tolerance=1.0)
>>> sim((0.0, 400.0), (5.0, 400.5))
0.5
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Dict, Tuple

import numpy as np
from numba import njit

from ..constants import (
    DEFAULT_PRECURSOR_MZ_TOLERANCE,
    DEFAULT_PRECURSOR_MZ_WEIGHT,
    DEFAULT_PRECURSOR_RT_TOLERANCE,
    DEFAULT_PRECURSOR_RT_WEIGHT,
)
from ..exceptions import InvalidParameter

PARAM_SECTION = "precursor_method"


@njit
def precursor_similarity(
    rt1: float,
    mz1: float,
    rt2: float,
    mz2: float,
    rt_tolerance: float,
    mz_tolerance: float,
) -> float:
    """Similarity of two precursor points, in [0, 1]."""
    d_rt = abs(rt1 - rt2)
    d_mz = abs(mz1 - mz2)

    if d_rt > rt_tolerance or d_mz > mz_tolerance:
        return 0.0

    sim = 1.0 - (d_rt / rt_tolerance + d_mz / mz_tolerance) / 2.0
    return max(0.0, min(1.0, sim))


@njit
def precursor_similarity_matrix(
    rt_array: np.ndarray,
    mz_array: np.ndarray,
    rt_tolerance: float,
    mz_tolerance: float,
) -> np.ndarray:
    """Dense symmetric similarity matrix for n precursor points.

    Parameters
    ----------
    rt_array : np.ndarray
        Retention times (seconds)
    mz_array : np.ndarray
        Precursor m/z values, same length as ``rt_array``
    rt_tolerance : float
        Maximum RT distance (seconds)
    mz_tolerance : float
        Maximum m/z distance (Da)

    Returns
    -------
    np.ndarray
        (n, n) float64 matrix with 1.0 on the diagonal
    """
    n = len(rt_array)
    sim = np.eye(n, dtype=np.float64)

    for i in range(n):
        for j in range(i + 1, n):
            s = precursor_similarity(
                rt_array[i], mz_array[i], rt_array[j], mz_array[j],
                rt_tolerance, mz_tolerance
            )
            sim[i, j] = s
            sim[j, i] = s

    return sim


@dataclass
class PrecursorSimilarity:
    """Similarity functor over (RT, m/z) precursor points.

    Attributes
    ----------
    rt_tolerance : float
        Maximal RT distance (seconds) for two precursors
    rt_weight : float
        Multiplier for the RT distance (kept for configuration, not used
        by the similarity formula)
    mz_tolerance : float
        Maximal m/z distance (Da) for two precursors
    mz_weight : float
        Multiplier for the m/z distance (kept for configuration, not used
        by the similarity formula)
    """

    rt_tolerance: float = DEFAULT_PRECURSOR_RT_TOLERANCE
    rt_weight: float = DEFAULT_PRECURSOR_RT_WEIGHT
    mz_tolerance: float = DEFAULT_PRECURSOR_MZ_TOLERANCE
    mz_weight: float = DEFAULT_PRECURSOR_MZ_WEIGHT

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.rt_tolerance > 0:
            raise InvalidParameter(f"rt_tolerance must be > 0, got {self.rt_tolerance}")
        if not self.mz_tolerance > 0:
            raise InvalidParameter(f"mz_tolerance must be > 0, got {self.mz_tolerance}")
        if self.rt_weight < 0 or self.mz_weight < 0:
            raise InvalidParameter(
                f"Weights must be non-negative, got rt_weight={self.rt_weight}, "
                f"mz_weight={self.mz_weight}"
            )

    def __call__(self, first: Tuple[float, float], second: Tuple[float, float]) -> float:
        """Similarity of two (RT, m/z) points (1 = identical, 0 = incompatible)."""
        return float(precursor_similarity(
            float(first[0]), float(first[1]),
            float(second[0]), float(second[1]),
            self.rt_tolerance, self.mz_tolerance
        ))

    def similarity_matrix(self, rt_array: np.ndarray, mz_array: np.ndarray) -> np.ndarray:
        """Vectorised pairwise similarities (see ``precursor_similarity_matrix``)."""
        rt_array = np.asarray(rt_array, dtype=np.float64)
        mz_array = np.asarray(mz_array, dtype=np.float64)
        if rt_array.shape != mz_array.shape:
            raise ValueError(
                f"rt and mz must have same shape, got {rt_array.shape} and {mz_array.shape}"
            )
        return precursor_similarity_matrix(
            rt_array, mz_array, self.rt_tolerance, self.mz_tolerance
        )

    @classmethod
    def from_dict(cls, values: Dict[str, float]) -> "PrecursorSimilarity":
        """Create from ``{"rt_tolerance": ...}`` or ``{"precursor_method:rt_tolerance": ...}``."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.split(":", 1)[1] if key.startswith(PARAM_SECTION + ":") else key
            if name not in known:
                raise InvalidParameter(f"Unknown precursor similarity parameter: {key}")
            try:
                kwargs[name] = float(value)
            except (TypeError, ValueError):
                raise InvalidParameter(f"{key} must be a number, got {value!r}") from None
        return cls(**kwargs)

    def to_dict(self, prefixed: bool = False) -> Dict[str, float]:
        prefix = PARAM_SECTION + ":" if prefixed else ""
        return {prefix + f.name: getattr(self, f.name) for f in fields(self)}
