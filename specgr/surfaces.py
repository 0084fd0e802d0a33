"""
Analytic curvature of surfaces in known spacetimes, used to check horizon
finding and surface-integral code:

- Schwarzschild: spatial Ricci tensor in Kerr-Schild coordinates
- Minkowski: extrinsic curvature of a coordinate sphere
- Kerr: intrinsic Ricci scalar of the horizon, for any spin direction
"""
import numpy as np

# Spins closer than this (in radians) to the z axis count as aligned
ALIGNED_SPIN_TOLERANCE = 1.0e-10


def magnitude(x):
    return np.sqrt(np.sum(np.asarray(x)**2, axis=0))


def schwarzschild_spatial_ricci(x, mass):
    """
    Spatial Ricci tensor R_ij of a Kerr-Schild slice of Schwarzschild.

    ``x`` holds the Cartesian components on its first axis (float or array
    data); the result has shape (dim, dim) + x.shape[1:].
    """
    x = np.asarray(x, dtype=float)
    dim = x.shape[0]
    r = magnitude(x)
    ricci = np.zeros((dim, dim) + x.shape[1:])
    denominator = r**4 * (2.0 * mass + r)**2
    for i in range(dim):
        for j in range(i, dim):
            component = -(8.0 * mass + 3.0 * r) * x[i] * x[j]
            if i == j:
                component = component + r**2 * (4.0 * mass + r)
            ricci[i, j] = mass * component / denominator
            ricci[j, i] = ricci[i, j]
    return ricci


def minkowski_extrinsic_curvature_sphere(x):
    """K_ij = (delta_ij - x_i x_j / r^2) / r of the sphere through ``x`` in flat space."""
    x = np.asarray(x, dtype=float)
    dim = x.shape[0]
    one_over_r = 1.0 / magnitude(x)
    curvature = np.zeros((dim, dim) + x.shape[1:])
    for i in range(dim):
        for j in range(i, dim):
            component = -x[i] * x[j] * one_over_r**2
            if i == j:
                component = component + 1.0
            curvature[i, j] = component * one_over_r
            curvature[j, i] = curvature[i, j]
    return curvature


def kerr_horizon_ricci_scalar(horizon_radius, mass, dimensionless_spin_z):
    """
    Ricci scalar of the Kerr horizon, spin along +z.

    With a = M chi and r_+ = M + sqrt(M^2 - a^2), on the horizon of
    Kerr-Schild radius r (e.g. Eq. (119) of arXiv:0706.0622):

        R = 2 (r_+^2 + a^2)(3 r^2 - 2 r_+^2 - 3 a^2) / (a^2 + 2 r_+^2 - r^2)^3
    """
    horizon_radius = np.asarray(horizon_radius, dtype=float)
    kerr_spin_a = mass * dimensionless_spin_z
    r_plus = mass + np.sqrt(mass**2 - kerr_spin_a**2)
    numerator = (2.0 * (r_plus**2 + kerr_spin_a**2)
                 * (3.0 * horizon_radius**2 - 2.0 * r_plus**2 - 3.0 * kerr_spin_a**2))
    return numerator / (-horizon_radius**2 + kerr_spin_a**2 + 2.0 * r_plus**2)**3


def rotated_kerr_horizon_ricci_scalar(horizon_radius_with_spin_on_z_axis,
                                      ylm_with_spin_on_z_axis, ylm, mass,
                                      dimensionless_spin):
    """
    Horizon Ricci scalar of a Kerr black hole with spin in any direction.

    The scalar is computed for a black hole of the same mass and spin
    magnitude with spin along +z, on the collocation points of
    ``ylm_with_spin_on_z_axis``. The collocation points of ``ylm`` are then
    rotated by -spin_phi about z and -spin_theta about y, which takes the
    spin direction to +z, and the aligned scalar is interpolated there.

    If the spin is within ALIGNED_SPIN_TOLERANCE of the z axis the aligned
    scalar is returned as is.
    """
    chi = np.asarray(dimensionless_spin, dtype=float)
    spin_magnitude = np.sqrt(np.dot(chi, chi))
    spin_theta = np.arctan2(np.hypot(chi[0], chi[1]), chi[2])

    ricci_scalar_with_spin_on_z_axis = kerr_horizon_ricci_scalar(
        horizon_radius_with_spin_on_z_axis, mass, spin_magnitude)

    eps = ALIGNED_SPIN_TOLERANCE
    if abs(spin_theta) < eps or abs(spin_theta - np.pi) < eps:
        return ricci_scalar_with_spin_on_z_axis

    spin_phi = np.arctan2(chi[1], chi[0])
    thetas, phis = ylm.theta_phi_points()

    # Unit-sphere coordinates after the rotation
    x_new = (np.cos(spin_theta) * np.cos(phis - spin_phi) * np.sin(thetas)
             - np.cos(thetas) * np.sin(spin_theta))
    y_new = np.sin(thetas) * np.sin(phis - spin_phi)
    z_new = (np.cos(thetas) * np.cos(spin_theta)
             + np.cos(phis - spin_phi) * np.sin(thetas) * np.sin(spin_theta))

    thetas_new = np.arctan2(np.hypot(x_new, y_new), z_new)
    at_pole = (np.abs(thetas_new) <= eps) | (np.abs(thetas_new - np.pi) <= eps)
    phis_new = np.where(at_pole, 0.0, np.arctan2(y_new, x_new))
    phis_new = np.where(phis_new < 0.0, phis_new + 2.0 * np.pi, phis_new)

    interpolation_info = ylm_with_spin_on_z_axis.set_up_interpolation_info(
        (thetas_new, phis_new))
    return ylm_with_spin_on_z_axis.interpolate(
        ricci_scalar_with_spin_on_z_axis, interpolation_info)
