import logging
from dataclasses import dataclass

import numpy as np
from scipy.special import gammaln, lpmv

logger = logging.getLogger(__name__)


@dataclass
class InterpolationInfo:
    """Target angles and the basis functions evaluated there."""
    theta: np.ndarray
    phi: np.ndarray
    basis: np.ndarray

    def __len__(self):
        return self.theta.size


class SphericalHarmonics:
    """
    Real spherical-harmonic expansion on a Gauss-Legendre x uniform grid.

        n_theta = l_max + 1    (theta at the roots of P_{n_theta}(cos theta))
        n_phi   = 2 m_max + 1  (phi_k = 2 pi k / n_phi)

    Collocation values are stored with theta varying fastest, i.e. the
    index of (theta_i, phi_j) is i + n_theta * j. The transform uses
    Gauss-Legendre quadrature, which is exact for fields band-limited
    to l <= l_max.
    """
    def __init__(self, l_max, m_max=None):
        if l_max < 0:
            raise ValueError(f"l_max must be non-negative, got {l_max}")
        m_max = l_max if m_max is None else m_max
        if not 0 <= m_max <= l_max:
            raise ValueError(f"m_max must be in [0, l_max={l_max}], got {m_max}")
        self.l_max = l_max
        self.m_max = m_max
        self.n_theta = l_max + 1
        self.n_phi = 2 * m_max + 1

        x, w = np.polynomial.legendre.leggauss(self.n_theta)
        # leggauss orders x increasing, so reverse for increasing theta
        self._theta = np.arccos(x[::-1])
        self._weights = w[::-1]
        self._phi = 2.0 * np.pi * np.arange(self.n_phi) / self.n_phi

        self.modes = [(l, m) for l in range(l_max + 1)
                      for m in range(-min(l, m_max), min(l, m_max) + 1)]
        thetas, phis = self.theta_phi_points()
        self._collocation_basis = self._basis(thetas, phis)
        self._quadrature_weights = (
            np.tile(self._weights, self.n_phi) * (2.0 * np.pi / self.n_phi))

    # ---- Grid ----------------------------------------------------------
    @property
    def physical_size(self):
        return self.n_theta * self.n_phi

    @property
    def spectral_size(self):
        return len(self.modes)

    def theta_points(self):
        return self._theta.copy()

    def phi_points(self):
        return self._phi.copy()

    def theta_phi_points(self):
        """Angles of every collocation point, shape (2, physical_size)."""
        thetas = np.tile(self._theta, self.n_phi)
        phis = np.repeat(self._phi, self.n_theta)
        return np.array([thetas, phis])

    # ---- Transforms ----------------------------------------------------
    def _basis(self, theta, phi):
        theta = np.asarray(theta, dtype=float)
        phi = np.asarray(phi, dtype=float)
        cos_theta = np.cos(theta)
        basis = np.empty((theta.size, self.spectral_size))
        for k, (l, m) in enumerate(self.modes):
            am = abs(m)
            norm = np.sqrt((2 * l + 1) / (4.0 * np.pi)
                           * np.exp(gammaln(l - am + 1) - gammaln(l + am + 1)))
            legendre = norm * lpmv(am, l, cos_theta)
            if m == 0:
                basis[:, k] = legendre
            elif m > 0:
                basis[:, k] = np.sqrt(2.0) * legendre * np.cos(am * phi)
            else:
                basis[:, k] = np.sqrt(2.0) * legendre * np.sin(am * phi)
        return basis

    def _check_size(self, values):
        values = np.asarray(values)
        if values.shape[-1] != self.physical_size:
            raise ValueError(
                f"Expected {self.physical_size} collocation values for l_max={self.l_max}, "
                f"got {values.shape[-1]}")
        return values

    def phys_to_spec(self, values):
        values = self._check_size(values)
        return (values * self._quadrature_weights) @ self._collocation_basis

    def spec_to_phys(self, coefs):
        coefs = np.asarray(coefs)
        if coefs.shape[-1] != self.spectral_size:
            raise ValueError(
                f"Expected {self.spectral_size} coefficients, got {coefs.shape[-1]}")
        return coefs @ self._collocation_basis.T

    # ---- Interpolation -------------------------------------------------
    def set_up_interpolation_info(self, target_points):
        """
        Precompute the basis at ``target_points = (thetas, phis)`` so that
        several fields can be interpolated to the same points.
        """
        thetas, phis = (np.atleast_1d(np.asarray(p, dtype=float)) for p in target_points)
        if thetas.shape != phis.shape:
            raise ValueError(
                f"theta and phi target arrays differ in shape: {thetas.shape} vs {phis.shape}")
        logger.debug("Interpolation info for %d points at l_max=%d", thetas.size, self.l_max)
        return InterpolationInfo(theta=thetas, phi=phis, basis=self._basis(thetas, phis))

    def interpolate(self, values, interpolation_info):
        return interpolation_info.basis @ self.phys_to_spec(values)
