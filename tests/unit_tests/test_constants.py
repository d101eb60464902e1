"""Sanity checks for default parameters and modification masses."""

from alphamerge import constants
from alphamerge.merging import SpectraMergerParams


def test_validate_constants():
    constants.validate_constants()


def test_defaults_match_params():
    params = SpectraMergerParams()
    assert params.mz_binning_width == constants.DEFAULT_MZ_BINNING_WIDTH
    assert params.mz_binning_width_unit == constants.DEFAULT_MZ_BINNING_WIDTH_UNIT
    assert params.ms_levels == list(constants.DEFAULT_BLOCK_MS_LEVELS)
    assert params.rt_block_size == constants.DEFAULT_RT_BLOCK_SIZE
    assert params.precursor_method.rt_tolerance == constants.DEFAULT_PRECURSOR_RT_TOLERANCE
