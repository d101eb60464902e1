"""Pytest configuration for alphamerge tests.

This module provides common fixtures and configuration for all tests.
"""

import numpy as np
import pytest

from alphamerge.kernel import Experiment, PeakList, Precursor, Spectrum


def make_spectrum(peaks, rt, ms_level=2, precursor_mz=None, **kwargs):
    """Build a spectrum from (m/z, intensity) pairs."""
    precursors = [Precursor(mz=precursor_mz)] if precursor_mz is not None else []
    return Spectrum(
        peaks=PeakList.from_pairs(peaks),
        ms_level=ms_level,
        rt=rt,
        precursors=precursors,
        **kwargs,
    )


@pytest.fixture
def spectrum_factory():
    """Factory for spectra built from (m/z, intensity) pairs."""
    return make_spectrum


@pytest.fixture
def block_experiment():
    """Four MS2 scans at RT 0-3 (block-wise scenario) plus two MS1 scans."""
    return Experiment([
        make_spectrum([(500.0, 10.0)], rt=0.0, ms_level=1, native_id="ms1_a"),
        make_spectrum([(100.0, 1.0)], rt=0.0, precursor_mz=450.0),
        make_spectrum([(100.0, 2.0)], rt=1.0, precursor_mz=451.0),
        make_spectrum([(200.0, 1.0)], rt=2.0, precursor_mz=452.0),
        make_spectrum([(200.0, 2.0)], rt=3.0, precursor_mz=453.0),
        make_spectrum([(600.0, 20.0)], rt=2.5, ms_level=1, native_id="ms1_b"),
    ])


@pytest.fixture
def precursor_experiment():
    """Five MS2 scans: one pair of close precursors, three isolated ones."""
    points = [(0.0, 400.0), (5.0, 400.5), (100.0, 600.0), (200.0, 600.4), (250.0, 800.0)]
    return Experiment([
        make_spectrum([(150.0 + i, 1.0 + i)], rt=rt, precursor_mz=mz, native_id=f"scan={i}")
        for i, (rt, mz) in enumerate(points)
    ])


# Random seed for reproducibility
@pytest.fixture(scope="session", autouse=True)
def set_random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
