"""Tests for complement peak-pair scoring."""

import numpy as np
import pytest

from alphamerge.exceptions import MissingInformation
from alphamerge.filtering import ComplementFilter, ComplementFilterParams, complement_score
from alphamerge.kernel import PeakList, Precursor, Spectrum


def _spectrum(pairs, precursor_mz=1000.0):
    return Spectrum(
        peaks=PeakList.from_pairs(pairs),
        ms_level=2,
        precursors=[Precursor(mz=precursor_mz)] if precursor_mz is not None else [],
    )


class TestComplementScore:
    """Test the two-pointer scan kernel."""

    def test_complementing_pairs(self):
        mz = np.array([100.0, 300.0, 700.0, 900.0])
        intensity = np.array([5.0, 7.0, 3.0, 2.0])
        assert complement_score(mz, intensity, 1000.0, 1.0) == pytest.approx(17.0)

    def test_within_tolerance(self):
        mz = np.array([100.0, 900.5])
        intensity = np.array([4.0, 6.0])
        assert complement_score(mz, intensity, 1000.0, 1.0) == pytest.approx(10.0)
        assert complement_score(mz, intensity, 1000.0, 0.4) == 0.0

    def test_no_pairs(self):
        mz = np.array([100.0, 200.0, 300.0])
        intensity = np.array([1.0, 1.0, 1.0])
        assert complement_score(mz, intensity, 1000.0, 1.0) == 0.0

    def test_non_positive_tolerance(self):
        mz = np.array([100.0, 900.0])
        intensity = np.array([1.0, 1.0])
        assert complement_score(mz, intensity, 1000.0, 0.0) == 0.0
        assert complement_score(mz, intensity, 1000.0, -1.0) == 0.0

    def test_fewer_than_two_peaks(self):
        assert complement_score(np.array([500.0]), np.array([3.0]), 1000.0, 1.0) == 0.0
        assert complement_score(np.zeros(0), np.zeros(0), 1000.0, 1.0) == 0.0

    def test_self_pair_counts_twice(self):
        """Pointers meeting on a peak at half the precursor m/z."""
        mz = np.array([100.0, 500.0, 950.0])
        intensity = np.array([1.0, 4.0, 1.0])
        assert complement_score(mz, intensity, 1000.0, 1.0) == pytest.approx(8.0)

    def test_intensity_swap_symmetry(self):
        mz = np.array([100.0, 300.0, 700.0, 900.0])
        intensity = np.array([5.0, 7.0, 3.0, 2.0])
        swapped = intensity.copy()
        swapped[0], swapped[3] = swapped[3], swapped[0]
        assert complement_score(mz, intensity, 1000.0, 1.0) == pytest.approx(
            complement_score(mz, swapped, 1000.0, 1.0)
        )


class TestComplementFilter:
    """Test the spectrum-level wrapper."""

    def test_default_tolerance(self):
        assert ComplementFilter().tolerance == 1.0

    def test_unsorted_spectrum(self):
        spectrum = _spectrum([(900.0, 2.0), (100.0, 5.0), (700.0, 3.0), (300.0, 7.0)])
        assert ComplementFilter().apply(spectrum) == pytest.approx(17.0)
        # Peaks are sorted in place
        assert spectrum.peaks.is_sorted()

    def test_custom_tolerance(self):
        spectrum = _spectrum([(100.0, 5.0), (902.0, 2.0)])
        assert ComplementFilter().apply(spectrum) == 0.0
        wide = ComplementFilter(ComplementFilterParams(tolerance=3.0))
        assert wide.apply(spectrum) == pytest.approx(7.0)

    def test_small_spectrum_without_precursor(self):
        spectrum = _spectrum([(100.0, 5.0)], precursor_mz=None)
        assert ComplementFilter().apply(spectrum) == 0.0

    def test_missing_precursor(self):
        spectrum = _spectrum([(100.0, 5.0), (900.0, 1.0)], precursor_mz=None)
        with pytest.raises(MissingInformation):
            ComplementFilter().apply(spectrum)

    def test_apply_batch(self):
        spectra = [
            _spectrum([(100.0, 5.0), (300.0, 7.0), (700.0, 3.0), (900.0, 2.0)]),
            _spectrum([(100.0, 5.0)]),
        ]
        scores = ComplementFilter().apply_batch(spectra)
        np.testing.assert_allclose(scores, [17.0, 0.0])
