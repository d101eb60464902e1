"""Spectrum and precursor descriptors."""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MissingInformation
from .peak_list import PeakList


@dataclass
class Precursor:
    """Selected ion whose fragmentation produced a spectrum.

    Attributes
    ----------
    mz : float
        Precursor m/z
    charge : int
        Charge state, 0 if unknown
    intensity : float
        Precursor intensity, 0.0 if unknown
    """

    mz: float
    charge: int = 0
    intensity: float = 0.0


@dataclass
class Spectrum:
    """A peak list plus acquisition metadata.

    Attributes
    ----------
    peaks : PeakList
        Centroided peaks
    ms_level : int
        1 for survey scans, 2 for fragment scans, ...
    rt : float
        Retention time (seconds)
    precursors : List[Precursor]
        Precursor descriptors (empty for MS1)
    meta : Dict[str, Any]
        Free-form meta information
    native_id : str
        Vendor/native identifier of the scan, if known
    """

    peaks: PeakList = field(default_factory=PeakList)
    ms_level: int = 1
    rt: float = 0.0
    precursors: List[Precursor] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    native_id: str = ""

    def __post_init__(self):
        if not isinstance(self.peaks, PeakList):
            self.peaks = PeakList.from_pairs(self.peaks)

    def __len__(self) -> int:
        return len(self.peaks)

    def unify(self, other: "Spectrum") -> None:
        """Merge the meta information of ``other`` into this spectrum.

        Conflicting keys take the value of ``other``. Precursors and peaks of
        ``other`` are left alone.
        """
        self.meta.update(other.meta)

    def first_precursor_mz(self) -> float:
        """m/z of the first precursor.

        Raises
        ------
        MissingInformation
            If the spectrum has no precursor
        """
        if not self.precursors:
            raise MissingInformation(
                f"Spectrum {self.native_id or '<unnamed>'} does not contain any precursor information"
            )
        return self.precursors[0].mz

    def copy(self) -> "Spectrum":
        return Spectrum(
            peaks=self.peaks.copy(),
            ms_level=self.ms_level,
            rt=self.rt,
            precursors=[copy.copy(p) for p in self.precursors],
            meta=copy.deepcopy(self.meta),
            native_id=self.native_id,
        )
