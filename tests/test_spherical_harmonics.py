#!/usr/bin/env python3
"""
Test the spherical-harmonic grid: collocation points, exact transforms of
band-limited fields and interpolation to arbitrary angles.
"""

import numpy as np
import pytest

from specgr.spherical_harmonics import SphericalHarmonics


def band_limited_field(theta, phi):
    """A field with l <= 3 written in Cartesian components of the unit vector."""
    x = np.sin(theta) * np.cos(phi)
    y = np.sin(theta) * np.sin(phi)
    z = np.cos(theta)
    return 1.0 + 0.5 * x - 2.0 * y * z + x**2 * y + 0.25 * z**3


def test_collocation_grid():
    ylm = SphericalHarmonics(6)
    assert ylm.n_theta == 7 and ylm.n_phi == 13
    assert ylm.physical_size == 7 * 13
    assert ylm.spectral_size == 49

    thetas = ylm.theta_points()
    assert np.all(np.diff(thetas) > 0.0)
    assert 0.0 < thetas[0] and thetas[-1] < np.pi
    # Gauss-Legendre nodes are the roots of P_7(cos theta)
    legendre_7 = np.polynomial.legendre.Legendre.basis(7)
    np.testing.assert_allclose(legendre_7(np.cos(thetas)), 0.0, atol=1e-13)
    np.testing.assert_allclose(ylm.phi_points(), 2.0 * np.pi * np.arange(13) / 13)

    grid_thetas, grid_phis = ylm.theta_phi_points()
    # theta varies fastest
    np.testing.assert_array_equal(grid_thetas[:7], thetas)
    assert np.all(grid_phis[:7] == 0.0)
    assert grid_phis[7] == pytest.approx(2.0 * np.pi / 13)


def test_transform_round_trip_is_exact_for_band_limited_fields():
    ylm = SphericalHarmonics(5)
    thetas, phis = ylm.theta_phi_points()
    values = band_limited_field(thetas, phis)
    coefs = ylm.phys_to_spec(values)
    np.testing.assert_allclose(ylm.spec_to_phys(coefs), values, atol=1e-12)

    # Y_00 = 1 / sqrt(4 pi), so the l=0 coefficient is sqrt(4 pi) times the mean
    constant = np.full(ylm.physical_size, 3.0)
    c00 = ylm.phys_to_spec(constant)
    assert c00[0] == pytest.approx(3.0 * np.sqrt(4.0 * np.pi))
    np.testing.assert_allclose(c00[1:], 0.0, atol=1e-12)


def test_interpolation_of_band_limited_field():
    ylm = SphericalHarmonics(4)
    thetas, phis = ylm.theta_phi_points()
    values = band_limited_field(thetas, phis)

    rng = np.random.default_rng(7)
    target_thetas = rng.uniform(0.0, np.pi, 25)
    target_phis = rng.uniform(0.0, 2.0 * np.pi, 25)
    info = ylm.set_up_interpolation_info((target_thetas, target_phis))
    assert len(info) == 25
    np.testing.assert_allclose(ylm.interpolate(values, info),
                               band_limited_field(target_thetas, target_phis), atol=1e-12)


def test_invalid_sizes():
    with pytest.raises(ValueError):
        SphericalHarmonics(-1)
    with pytest.raises(ValueError):
        SphericalHarmonics(3, m_max=4)
    ylm = SphericalHarmonics(3)
    with pytest.raises(ValueError, match="Expected 28 collocation values"):
        ylm.phys_to_spec(np.zeros(10))
    with pytest.raises(ValueError):
        ylm.spec_to_phys(np.zeros(3))
    with pytest.raises(ValueError, match="differ in shape"):
        ylm.set_up_interpolation_info((np.zeros(3), np.zeros(4)))
