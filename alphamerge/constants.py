"""Physical constants and default parameters for spectral merging.

This module provides the default settings for the spectra merger, the
precursor similarity measure and the complement filter, together with the
modification mass shifts used by the built-in modification descriptors.

Key Features
------------
- Default block-wise merge settings (block size, RT span, MS levels)
- Default precursor clustering tolerances (RT in seconds, m/z in Da)
- m/z binning defaults and the accepted binning units
- Common modification mass shifts (Carbamidomethyl, Oxidation, Acetyl, ...)

Sources
-------
- Unimod modification masses: https://www.unimod.org/modifications_list.php
"""

# =============================================================================
# Units
# =============================================================================

# Parts-per-million scaling factor
PPM = 1e6

# =============================================================================
# m/z Binning
# =============================================================================

BINNING_UNIT_DA = "Da"
BINNING_UNIT_PPM = "ppm"
BINNING_UNITS = (BINNING_UNIT_DA, BINNING_UNIT_PPM)

# Peaks closer than this are summed into one consensus peak
DEFAULT_MZ_BINNING_WIDTH = 5.0
DEFAULT_MZ_BINNING_WIDTH_UNIT = BINNING_UNIT_PPM

# =============================================================================
# Block-wise Merging
# =============================================================================

DEFAULT_BLOCK_MS_LEVELS = (1,)
DEFAULT_RT_BLOCK_SIZE = 5  # scans per block
DEFAULT_RT_MAX_LENGTH = 0.0  # seconds, 0 = unbounded

# =============================================================================
# Precursor-wise Merging
# =============================================================================

DEFAULT_PRECURSOR_RT_TOLERANCE = 10.0  # seconds
DEFAULT_PRECURSOR_RT_WEIGHT = 1.0
DEFAULT_PRECURSOR_MZ_TOLERANCE = 1.0  # Da
DEFAULT_PRECURSOR_MZ_WEIGHT = 10.0

# Only fragment spectra carry the precursors that are clustered
PRECURSOR_MERGE_MS_LEVEL = 2

# =============================================================================
# Hierarchical Clustering
# =============================================================================

# Distances at or above this are never merged (similarity 0)
CLUSTER_DISTANCE_THRESHOLD = 1.0

# Tree node distance marking a disconnected (non-)merge
DISCONNECTED_DISTANCE = -1.0

# =============================================================================
# Complement Filter
# =============================================================================

DEFAULT_COMPLEMENT_TOLERANCE = 1.0  # Da

# =============================================================================
# Common Modification Masses
# =============================================================================

# Carbamidomethylation of Cysteine (Unimod:4)
# C2H3NO: 57.021464 Da
CARBAMIDOMETHYL_MASS = 57.021464
CARBAMIDOMETHYL_AVERAGE_MASS = 57.0513

# Oxidation of Methionine (Unimod:35)
# O: 15.994915 Da
OXIDATION_MASS = 15.994915
OXIDATION_AVERAGE_MASS = 15.9994

# Acetylation (Protein N-term, Unimod:1)
# C2H2O: 42.010565 Da
ACETYL_MASS = 42.010565
ACETYL_AVERAGE_MASS = 42.0367

# Phosphorylation (Unimod:21)
# HPO3: 79.966331 Da
PHOSPHO_MASS = 79.966331
PHOSPHO_AVERAGE_MASS = 79.9799

# Deamidation (Unimod:7)
# NH -> O: 0.984016 Da
DEAMIDATION_MASS = 0.984016
DEAMIDATION_AVERAGE_MASS = 0.9848


def validate_constants():
    """Validate that constants are physically reasonable.

    Raises AssertionError if any constant is out of expected range.
    """
    assert DEFAULT_MZ_BINNING_WIDTH_UNIT in BINNING_UNITS
    assert DEFAULT_RT_BLOCK_SIZE > 0
    assert DEFAULT_PRECURSOR_RT_TOLERANCE > 0 and DEFAULT_PRECURSOR_MZ_TOLERANCE > 0

    for mono, average in (
        (CARBAMIDOMETHYL_MASS, CARBAMIDOMETHYL_AVERAGE_MASS),
        (OXIDATION_MASS, OXIDATION_AVERAGE_MASS),
        (ACETYL_MASS, ACETYL_AVERAGE_MASS),
        (PHOSPHO_MASS, PHOSPHO_AVERAGE_MASS),
        (DEAMIDATION_MASS, DEAMIDATION_AVERAGE_MASS),
    ):
        assert abs(mono - average) < 0.1, f"Average/mono mismatch: {mono} vs {average}"
