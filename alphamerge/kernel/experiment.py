"""Ordered, mutable container of spectra from one LC-MS run."""

from __future__ import annotations
from typing import Callable, Iterable, Iterator, List, Optional

from .spectrum import Spectrum


class Experiment:
    """Time-ordered list of spectra.

    The experiment exclusively owns its spectra. Operations mutate it in
    place; ``replace_spectra`` swaps the whole content in one step so that
    indices stay valid while a new content is being built.

    Examples
    --------
    >>> exp = Experiment([Spectrum(rt=5.0), Spectrum(rt=1.0)])
    >>> exp.sort_spectra()
    >>> [s.rt for s in exp]
    [1.0, 5.0]
    """

    def __init__(self, spectra: Optional[Iterable[Spectrum]] = None):
        self._spectra: List[Spectrum] = list(spectra) if spectra is not None else []

    def __len__(self) -> int:
        return len(self._spectra)

    def __getitem__(self, index: int) -> Spectrum:
        return self._spectra[index]

    def __iter__(self) -> Iterator[Spectrum]:
        return iter(self._spectra)

    def __repr__(self) -> str:
        return f"Experiment(n_spectra={len(self)}, ms_levels={self.get_ms_levels()})"

    @property
    def spectra(self) -> List[Spectrum]:
        return self._spectra

    def append(self, spectrum: Spectrum) -> None:
        self._spectra.append(spectrum)

    def extend(self, spectra: Iterable[Spectrum]) -> None:
        self._spectra.extend(spectra)

    def remove_if(self, predicate: Callable[[Spectrum], bool]) -> int:
        """Remove all spectra matching ``predicate``.

        Returns
        -------
        int
            Number of removed spectra
        """
        kept = [s for s in self._spectra if not predicate(s)]
        n_removed = len(self._spectra) - len(kept)
        self._spectra = kept
        return n_removed

    def replace_spectra(self, spectra: Iterable[Spectrum]) -> None:
        """Replace the whole content of the experiment."""
        self._spectra = list(spectra)

    def sort_spectra(self) -> None:
        """Sort spectra by ascending RT, ties keep their current order."""
        self._spectra.sort(key=lambda s: s.rt)

    def get_ms_levels(self) -> List[int]:
        return sorted({s.ms_level for s in self._spectra})

    def spectra_of_level(self, ms_level: int) -> List[Spectrum]:
        return [s for s in self._spectra if s.ms_level == ms_level]
