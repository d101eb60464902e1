"""Merging of spectra into consensus spectra.

Two strategies are provided:

1. Block-wise: consecutive spectra of the same MS level are grouped into
   blocks of at most ``rt_block_size`` scans spanning at most
   ``rt_max_length`` seconds.
2. Precursor-wise: MS2 spectra whose precursors are close in RT and m/z are
   grouped by single-linkage hierarchical clustering.

Each block (a master spectrum plus its member spectra) becomes one consensus
spectrum: peaks are pooled, sorted by m/z and binned, RT and precursor m/z
are averaged. The merged spectra are removed from the experiment, the
consensus spectra appended, and the experiment re-sorted by RT. Spectra of
other MS levels are left untouched.

Examples
--------
>>> merger = SpectraMerger(SpectraMergerParams(
...     ms_levels=[2], rt_block_size=2,
...     mz_binning_width=0.01, mz_binning_width_unit="Da",
... ))
>>> merger.merge_spectra_block_wise(exp)
>>> merger.merge_spectra_precursors(exp)
"""

from __future__ import annotations
import copy
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from ..clustering.hierarchical import HierarchicalClusterer, Linkage
from ..clustering.similarity import PARAM_SECTION as PRECURSOR_SECTION
from ..clustering.similarity import PrecursorSimilarity
from ..constants import (
    BINNING_UNITS,
    DEFAULT_BLOCK_MS_LEVELS,
    DEFAULT_MZ_BINNING_WIDTH,
    DEFAULT_MZ_BINNING_WIDTH_UNIT,
    DEFAULT_RT_BLOCK_SIZE,
    DEFAULT_RT_MAX_LENGTH,
    PRECURSOR_MERGE_MS_LEVEL,
)
from ..exceptions import InvalidInput, InvalidParameter, MissingInformation
from ..kernel.experiment import Experiment
from ..kernel.peak_list import PeakList
from ..kernel.spectrum import Spectrum
from .binning import bin_peaks

# master spectrum index -> indices of the spectra merged into it
MergeBlocks = Dict[int, List[int]]

BLOCK_SECTION = "block_method"

# flat parameter key -> SpectraMergerParams field
_FLAT_KEYS = {
    "mz_binning_width": "mz_binning_width",
    "mz_binning_width_unit": "mz_binning_width_unit",
    f"{BLOCK_SECTION}:ms_levels": "ms_levels",
    f"{BLOCK_SECTION}:rt_block_size": "rt_block_size",
    f"{BLOCK_SECTION}:rt_max_length": "rt_max_length",
}


def _as_integer(name: str, value: Any) -> int:
    """Return ``value`` as int, rejecting non-integral or non-numeric values."""
    try:
        as_int = int(value)
        integral = as_int == value
    except (TypeError, ValueError, OverflowError):
        integral = False
    if not integral:
        raise InvalidParameter(f"{name} must be an integer, got {value!r}")
    return as_int


def _as_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be a number, got {value!r}") from None


@dataclass
class SpectraMergerParams:
    """Parameters for spectra merging.

    Attributes
    ----------
    mz_binning_width : float
        Peaks closer than this to a consensus bin are summed into it
    mz_binning_width_unit : str
        "Da" or "ppm"
    ms_levels : List[int]
        MS levels merged by the block-wise method
    rt_block_size : int
        Maximum number of scans per block
    rt_max_length : float
        Maximum RT span of a block (seconds), 0 = unbounded
    precursor_method : PrecursorSimilarity
        Similarity settings of the precursor-wise method
    """

    mz_binning_width: float = DEFAULT_MZ_BINNING_WIDTH
    mz_binning_width_unit: str = DEFAULT_MZ_BINNING_WIDTH_UNIT
    ms_levels: List[int] = field(default_factory=lambda: list(DEFAULT_BLOCK_MS_LEVELS))
    rt_block_size: int = DEFAULT_RT_BLOCK_SIZE
    rt_max_length: float = DEFAULT_RT_MAX_LENGTH
    precursor_method: PrecursorSimilarity = field(default_factory=PrecursorSimilarity)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check all values.

        Raises
        ------
        InvalidParameter
            If any value is out of range
        """
        if not _as_float("mz_binning_width", self.mz_binning_width) >= 0:
            raise InvalidParameter(
                f"mz_binning_width must be >= 0, got {self.mz_binning_width}"
            )
        if self.mz_binning_width_unit not in BINNING_UNITS:
            raise InvalidParameter(
                f"Unknown mz_binning_width_unit: {self.mz_binning_width_unit!r}. "
                f"Use one of {BINNING_UNITS}."
            )
        if not self.ms_levels:
            raise InvalidParameter("ms_levels must contain at least one MS level")
        if any(_as_integer("ms_levels", level) < 1 for level in self.ms_levels):
            raise InvalidParameter(f"MS levels must be integers >= 1, got {self.ms_levels}")
        if _as_integer("rt_block_size", self.rt_block_size) <= 0:
            raise InvalidParameter(
                f"rt_block_size must be a positive integer, got {self.rt_block_size}"
            )
        if not _as_float("rt_max_length", self.rt_max_length) >= 0:
            raise InvalidParameter(f"rt_max_length must be >= 0, got {self.rt_max_length}")
        self.precursor_method.validate()

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SpectraMergerParams":
        """Create parameters from flat ``section:key`` settings.

        Examples
        --------
        >>> SpectraMergerParams.from_dict({
        ...     "block_method:rt_block_size": 3,
        ...     "precursor_method:mz_tolerance": 0.5,
        ...     "mz_binning_width_unit": "Da",
        ... })
        """
        kwargs: Dict[str, Any] = {}
        precursor_values: Dict[str, Any] = {}

        for key, value in values.items():
            if key.startswith(PRECURSOR_SECTION + ":"):
                precursor_values[key] = value
            elif key in _FLAT_KEYS:
                kwargs[_FLAT_KEYS[key]] = value
            else:
                raise InvalidParameter(f"Unknown spectra merger parameter: {key}")

        if "ms_levels" in kwargs:
            levels = kwargs["ms_levels"]
            if isinstance(levels, (str, bytes)) or not hasattr(levels, "__iter__"):
                raise InvalidParameter(f"ms_levels must be a list of integers, got {levels!r}")
            kwargs["ms_levels"] = [_as_integer("ms_levels", level) for level in levels]
        if "rt_block_size" in kwargs:
            kwargs["rt_block_size"] = _as_integer("rt_block_size", kwargs["rt_block_size"])
        for name in ("mz_binning_width", "rt_max_length"):
            if name in kwargs:
                kwargs[name] = _as_float(name, kwargs[name])
        kwargs["precursor_method"] = PrecursorSimilarity.from_dict(precursor_values)

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Flat ``section:key`` representation (inverse of ``from_dict``)."""
        result: Dict[str, Any] = {
            key: copy.copy(getattr(self, name)) for key, name in _FLAT_KEYS.items()
        }
        result.update(self.precursor_method.to_dict(prefixed=True))
        return result

    def updated(self, values: Dict[str, Any]) -> "SpectraMergerParams":
        """Copy with some flat settings replaced."""
        merged = self.to_dict()
        merged.update(values)
        return type(self).from_dict(merged)


class SpectraMerger:
    """Merge blocks of spectra into consensus spectra.

    Parameters
    ----------
    params : SpectraMergerParams, optional
        Merge settings (defaults if omitted)
    logger : logging.Logger, optional
        Sink for statistics and warnings (module logger if omitted)
    """

    def __init__(
        self,
        params: Optional[SpectraMergerParams] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.params = params if params is not None else SpectraMergerParams()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def set_parameters(self, values: Dict[str, Any]) -> None:
        """Update settings from flat ``section:key`` values.

        Raises
        ------
        InvalidParameter
            If a key is unknown or a value out of range; the current
            settings are kept in that case
        """
        self.params = self.params.updated(values)

    # =========================================================================
    # Block-wise merging
    # =========================================================================

    def merge_spectra_block_wise(self, exp: Experiment) -> None:
        """Merge runs of consecutive spectra of each configured MS level."""
        for ms_level in self.params.ms_levels:
            blocks = self.build_rt_blocks(exp, ms_level)
            self.merge_blocks(exp, blocks, ms_level)

        exp.sort_spectra()

    def build_rt_blocks(self, exp: Experiment, ms_level: int) -> MergeBlocks:
        """Group consecutive spectra of ``ms_level`` into RT blocks.

        A new block starts (with the current spectrum as master) when the
        current block holds ``rt_block_size`` scans or the current spectrum
        is more than ``rt_max_length`` seconds after the master.
        """
        rt_block_size = self.params.rt_block_size
        rt_max_length = self.params.rt_max_length
        if rt_max_length == 0:
            rt_max_length = np.inf

        blocks: MergeBlocks = {}
        master = -1
        block_count = 0

        for idx, spectrum in enumerate(exp):
            if spectrum.ms_level != ms_level:
                continue

            if (
                master < 0
                or block_count >= rt_block_size
                or spectrum.rt - exp[master].rt > rt_max_length
            ):
                master = idx
                blocks[master] = []
                block_count = 1
            else:
                blocks[master].append(idx)
                block_count += 1

        return blocks

    # =========================================================================
    # Precursor-wise merging
    # =========================================================================

    def merge_spectra_precursors(self, exp: Experiment) -> None:
        """Merge MS2 spectra whose precursors are close in RT and m/z.

        Raises
        ------
        MissingInformation
            If an MS2 spectrum has no precursor
        """
        blocks = self.build_precursor_blocks(exp)
        if blocks:
            self.merge_blocks(exp, blocks, PRECURSOR_MERGE_MS_LEVEL)
        else:
            self.logger.info("No precursor clusters found, nothing to merge")

        exp.sort_spectra()

    def build_precursor_blocks(self, exp: Experiment) -> MergeBlocks:
        """Cluster MS2 precursors and convert clusters of >= 2 into blocks."""
        rt_values = []
        mz_values = []
        index_mapping = []  # cluster point index -> experiment index

        for idx, spectrum in enumerate(exp):
            if spectrum.ms_level != PRECURSOR_MERGE_MS_LEVEL:
                continue

            if not spectrum.precursors:
                raise MissingInformation(
                    f"Scan #{idx} does not contain any precursor information! "
                    "Unable to cluster!",
                    index=idx,
                )
            if len(spectrum.precursors) > 1:
                self.logger.warning(
                    f"Scan #{idx}: more than one precursor found. Using first one!"
                )

            index_mapping.append(idx)
            rt_values.append(spectrum.rt)
            mz_values.append(spectrum.precursors[0].mz)

        if not index_mapping:
            return {}

        similarity = self.params.precursor_method.similarity_matrix(
            np.array(rt_values, dtype=np.float64),
            np.array(mz_values, dtype=np.float64),
        )
        distance = 1.0 - similarity
        np.fill_diagonal(distance, 0.0)

        clusterer = HierarchicalClusterer(Linkage.SINGLE)
        tree = clusterer.cluster_distance_matrix(distance)
        clusters = clusterer.extract_clusters(tree)

        blocks: MergeBlocks = {}
        for cluster in clusters:
            if len(cluster) <= 1:
                continue
            master = index_mapping[cluster[0]]
            blocks[master] = [index_mapping[point] for point in cluster[1:]]

        return blocks

    # =========================================================================
    # Consensus building
    # =========================================================================

    def merge_blocks(
        self,
        exp: Experiment,
        blocks: MergeBlocks,
        ms_level: int,
    ) -> Dict[int, int]:
        """Replace each block of spectra by one consensus spectrum.

        All spectra in any block are removed; spectra outside the blocks keep
        their relative order and are followed by the consensus spectra.
        The result is NOT sorted by RT.

        Parameters
        ----------
        exp : Experiment
            Experiment to rewrite in place
        blocks : MergeBlocks
            Master index -> member indices, all referring to ``exp``
        ms_level : int
            MS level of the consensus spectra

        Returns
        -------
        Dict[int, int]
            Histogram of block sizes (master + members) -> number of blocks

        Raises
        ------
        InvalidInput
            If block indices are out of range or used more than once
        """
        self._check_blocks(exp, blocks)

        consensus_spectra: List[Spectrum] = []
        cluster_sizes: Counter = Counter()
        merged_indices = set()

        for master, members in blocks.items():
            cluster_sizes[len(members) + 1] += 1
            merged_indices.add(master)
            merged_indices.update(members)

            consensus = self._build_consensus(exp, master, members, ms_level)
            if consensus is None:
                self.logger.warning(
                    f"Block of scan #{master} ({len(members) + 1} spectra) has no peaks, skipped"
                )
                continue
            consensus_spectra.append(consensus)

        self.logger.info("Cluster sizes:")
        for size, count in sorted(cluster_sizes.items()):
            self.logger.info(f"  size {size}: {count}x")

        kept = [s for idx, s in enumerate(exp) if idx not in merged_indices]
        exp.replace_spectra(kept + consensus_spectra)

        return dict(sorted(cluster_sizes.items()))

    def _build_consensus(
        self,
        exp: Experiment,
        master: int,
        members: List[int],
        ms_level: int,
    ) -> Optional[Spectrum]:
        master_spectrum = exp[master]
        block = [master_spectrum] + [exp[idx] for idx in members]

        consensus = Spectrum(ms_level=ms_level, native_id=master_spectrum.native_id)
        for spectrum in block:
            consensus.unify(spectrum)

        rt_sum = 0.0
        for spectrum in block:
            rt_sum += spectrum.rt
        consensus.rt = rt_sum / len(block)

        if ms_level >= 2:
            # Spectra without a precursor do not contribute to the m/z mean
            with_precursor = [
                (idx, spectrum) for idx, spectrum in zip([master] + members, block)
                if spectrum.precursors
            ]
            if with_precursor:
                mz_sum = 0.0
                for idx, spectrum in with_precursor:
                    if len(spectrum.precursors) > 1:
                        self.logger.debug(
                            f"Scan #{idx}: removing excessive precursors, keeping the first"
                        )
                    mz_sum += spectrum.precursors[0].mz
                precursor = copy.copy(with_precursor[0][1].precursors[0])
                precursor.mz = mz_sum / len(with_precursor)
                consensus.precursors = [precursor]
        else:
            consensus.precursors = [copy.copy(p) for p in master_spectrum.precursors]

        all_peaks = PeakList.concatenate(s.peaks for s in block)
        if len(all_peaks) == 0:
            return None
        all_peaks.sort_by_position()

        bin_mz, bin_intensity = bin_peaks(
            all_peaks.mz,
            all_peaks.intensity,
            self.params.mz_binning_width,
            self.params.mz_binning_width_unit,
        )
        consensus.peaks = PeakList(bin_mz, bin_intensity)

        return consensus

    @staticmethod
    def _check_blocks(exp: Experiment, blocks: MergeBlocks) -> None:
        seen = set()
        n_spectra = len(exp)
        for master, members in blocks.items():
            for idx in [master] + list(members):
                if not 0 <= idx < n_spectra:
                    raise InvalidInput(
                        f"Block index {idx} out of range for experiment of size {n_spectra}"
                    )
                if idx in seen:
                    raise InvalidInput(f"Spectrum #{idx} is part of more than one block")
                seen.add(idx)
