import enum
import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .options import Option, create
from .spherical_harmonics import SphericalHarmonics

logger = logging.getLogger(__name__)


class AngularOrdering(enum.Enum):
    """
    Order of the (theta, phi) samples of a surface.

    Strahlkorper: phi in the outer loop, theta varies fastest.
    Cce:          theta in the outer loop, phi varies fastest.
    """
    Strahlkorper = "Strahlkorper"
    Cce = "Cce"

    def __str__(self):
        return self.name


def _check_kerr_parameters(mass, dimensionless_spin):
    chi = np.asarray(dimensionless_spin, dtype=float)
    if chi.shape != (3,):
        raise ValueError(f"Dimensionless spin must have 3 components, got {dimensionless_spin}")
    if not mass > 0.0:
        raise ValueError(f"Kerr mass must be positive, got {mass}")
    chi_squared = float(np.dot(chi, chi))
    if chi_squared > 1.0:
        raise ValueError(
            f"Super-extremal Kerr spin: |chi| = {np.sqrt(chi_squared):.6g} > 1 "
            f"for mass {mass} and dimensionless spin {list(chi)}")
    return chi


def _mass_error(mass):
    if not mass > 0.0:
        return f"Kerr mass must be positive, got {mass}"
    return None


def _spin_error(dimensionless_spin):
    if sum(c**2 for c in dimensionless_spin) > 1.0:
        return f"Super-extremal Kerr spin {list(dimensionless_spin)}"
    return None


def kerr_horizon_radius(theta, phi, mass, dimensionless_spin):
    """
    Radius of the Kerr horizon in Kerr-Schild coordinates.

        a_i      = M chi_i
        r_+      = M + sqrt(M^2 - a^2)      (Boyer-Lindquist radius)
        r(n)^2   = (r_+^2 + a^2) / (1 + (a.n)^2 / r_+^2)

    Parameters:
    -----------
    theta, phi : array_like
        Angles of the unit direction n about the horizon center
    mass : float
        Kerr mass M (> 0)
    dimensionless_spin : sequence of 3 floats
        chi with |chi| <= 1; a ValueError is raised otherwise
    """
    chi = _check_kerr_parameters(mass, dimensionless_spin)
    theta = np.asarray(theta, dtype=float)
    phi = np.asarray(phi, dtype=float)
    spin_a = mass * chi
    spin_a_squared = np.dot(spin_a, spin_a)
    a_dot_xhat = (spin_a[0] * np.sin(theta) * np.cos(phi)
                  + spin_a[1] * np.sin(theta) * np.sin(phi)
                  + spin_a[2] * np.cos(theta))
    r_bl_squared = (mass + np.sqrt(max(mass**2 - spin_a_squared, 0.0)))**2
    return np.sqrt((r_bl_squared + spin_a_squared)
                   / (1.0 + a_dot_xhat**2 / r_bl_squared))


@dataclass(frozen=True)
class KerrHorizon:
    """
    Points on the horizon of a Kerr black hole, sampled on the collocation
    grid of a SphericalHarmonics expansion with resolution l_max.
    """
    l_max: int
    center: Tuple[float, float, float]
    mass: float
    dimensionless_spin: Tuple[float, float, float]
    angular_ordering: AngularOrdering = AngularOrdering.Strahlkorper

    help = "A Strahlkorper conforming to the horizon (in Kerr-Schild coordinates) of a Kerr black hole."
    options = [
        Option("LMax", int, "KerrHorizon is expanded in Ylms up to l=LMax", lower_bound=0),
        Option("Center", Tuple[float, float, float], "Center of black hole"),
        Option("Mass", float, "Mass of black hole", check=_mass_error),
        Option("DimensionlessSpin", Tuple[float, float, float], "Dimensionless spin of black hole",
               check=_spin_error),
        Option("AngularOrdering", AngularOrdering,
               "Chooses theta,phi ordering in 2d array"),
    ]

    def __post_init__(self):
        if self.l_max < 0:
            raise ValueError(f"l_max must be non-negative, got {self.l_max}")
        object.__setattr__(self, "center", tuple(float(c) for c in self.center))
        object.__setattr__(self, "dimensionless_spin",
                           tuple(float(c) for c in self.dimensionless_spin))
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {self.center}")
        _check_kerr_parameters(self.mass, self.dimensionless_spin)

    @classmethod
    def from_options(cls, text):
        return create(cls, text)

    @property
    def number_of_points(self):
        return (self.l_max + 1) * (2 * self.l_max + 1)

    def theta_phi_points(self):
        """Angles of the points in the configured ordering, shape (2, N)."""
        ylm = SphericalHarmonics(self.l_max)
        thetas, phis = ylm.theta_phi_points()
        if self.angular_ordering is AngularOrdering.Cce:
            # Same grid, but phi varies fastest
            shape = (ylm.n_phi, ylm.n_theta)
            thetas = thetas.reshape(shape).T.ravel()
            phis = phis.reshape(shape).T.ravel()
        return np.array([thetas, phis])

    def radius(self):
        thetas, phis = self.theta_phi_points()
        return kerr_horizon_radius(thetas, phis, self.mass, self.dimensionless_spin)

    def points(self):
        """Cartesian points on the horizon, shape (3, N)."""
        thetas, phis = self.theta_phi_points()
        r = kerr_horizon_radius(thetas, phis, self.mass, self.dimensionless_spin)
        points = np.array([r * np.sin(thetas) * np.cos(phis),
                           r * np.sin(thetas) * np.sin(phis),
                           r * np.cos(thetas)])
        points += np.asarray(self.center)[:, None]
        logger.debug("Generated %d Kerr horizon points (l_max=%d, %s ordering)",
                     points.shape[1], self.l_max, self.angular_ordering)
        return points
