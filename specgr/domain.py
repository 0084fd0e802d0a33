import logging
from collections import namedtuple

import numpy as np

from .options import Option, create

logger = logging.getLogger(__name__)

BlockLogicalCoords = namedtuple("BlockLogicalCoords", ["block_id", "logical_coords", "on_boundary"])
BlockLogicalCoords.__doc__ = """\
Location of a point in a domain: the id of the block containing it, its
logical coordinates in [-1, 1]^3 and whether it lies on a face shared with
another block (any of which could equally hold the point)."""

# Logical coordinates may overshoot [-1, 1] by roundoff
LOGICAL_TOLERANCE = 1.0e-12


class Wedge:
    """
    One of the six blocks of a cubed-sphere shell.

    The block covers the directions whose largest Cartesian component is
    along ``axis`` with the given ``sign``, between ``inner_radius`` and
    ``outer_radius``. Logical coordinates:

        xi, eta = p_j / |p_axis|              (or 4/pi atan(...) if equiangular)
        zeta    = 2 (r - r_in) / (r_out - r_in) - 1
    """
    def __init__(self, block_id, axis, sign, inner_radius, outer_radius,
                 use_equiangular_map=False):
        self.block_id = block_id
        self.axis = axis
        self.sign = sign
        self.inner_radius = inner_radius
        self.outer_radius = outer_radius
        self.use_equiangular_map = use_equiangular_map
        self._transverse = [j for j in range(3) if j != axis]

    @property
    def name(self):
        return f"{'Upper' if self.sign > 0 else 'Lower'}{'XYZ'[self.axis]}"

    def inverse(self, points):
        """
        Logical coordinates of ``points`` (shape (3, N)); columns are NaN
        where the point is not in this block's direction cone.
        """
        points = np.asarray(points, dtype=float)
        along = self.sign * points[self.axis]
        logical = np.full(points.shape, np.nan)
        cone = along > 0.0
        with np.errstate(divide="ignore", invalid="ignore"):
            for i, j in enumerate(self._transverse):
                ratio = points[j] / along
                if self.use_equiangular_map:
                    ratio = (4.0 / np.pi) * np.arctan(ratio)
                logical[i] = np.where(cone, ratio, np.nan)
        r = np.sqrt(np.sum(points**2, axis=0))
        zeta = 2.0 * (r - self.inner_radius) / (self.outer_radius - self.inner_radius) - 1.0
        logical[2] = np.where(cone, zeta, np.nan)
        return logical

    def __call__(self, logical_coords):
        """Map logical coordinates (shape (3, N)) to Cartesian points."""
        logical_coords = np.asarray(logical_coords, dtype=float)
        xi, eta, zeta = logical_coords
        if self.use_equiangular_map:
            xi = np.tan(0.25 * np.pi * xi)
            eta = np.tan(0.25 * np.pi * eta)
        r = self.inner_radius + 0.5 * (zeta + 1.0) * (self.outer_radius - self.inner_radius)
        norm = np.sqrt(1.0 + xi**2 + eta**2)
        points = np.empty_like(logical_coords)
        points[self.axis] = self.sign * r / norm
        points[self._transverse[0]] = xi * r / norm
        points[self._transverse[1]] = eta * r / norm
        return points


class Domain:
    def __init__(self, blocks):
        self.blocks = list(blocks)

    def __len__(self):
        return len(self.blocks)


class Sphere:
    """
    Spherical shell with an excised interior, built from six wedges
    ordered +z, -z, +y, -y, +x, -x and centered on the origin.
    """
    help = "A spherical shell covered by six wedges, with the interior excised."
    options = [
        Option("InnerRadius", float, "Radius of the excised sphere", lower_bound=0.0),
        Option("OuterRadius", float, "Radius of the outer boundary", lower_bound=0.0),
        Option("InitialRefinement", int, "Initial refinement level in each dimension",
               lower_bound=0),
        Option("InitialGridPoints", int, "Initial number of grid points in each dimension",
               lower_bound=1),
        Option("UseEquiangularMap", bool, "Use equiangular instead of equidistant angular coordinates"),
    ]

    def __init__(self, inner_radius, outer_radius, initial_refinement=1,
                 initial_number_of_grid_points=5, use_equiangular_map=False):
        if not 0.0 < inner_radius < outer_radius:
            raise ValueError(
                f"Sphere needs 0 < inner_radius < outer_radius, got "
                f"inner_radius={inner_radius}, outer_radius={outer_radius}")
        self.inner_radius = inner_radius
        self.outer_radius = outer_radius
        self.initial_refinement = initial_refinement
        self.initial_number_of_grid_points = initial_number_of_grid_points
        self.use_equiangular_map = use_equiangular_map

    @classmethod
    def from_options(cls, text):
        return create(cls, text)

    def create_domain(self):
        blocks = []
        for axis in (2, 1, 0):
            for sign in (+1, -1):
                blocks.append(Wedge(len(blocks), axis, sign, self.inner_radius,
                                    self.outer_radius, self.use_equiangular_map))
        return Domain(blocks)

    def block_names(self):
        return [block.name for block in self.create_domain().blocks]

    def initial_extents(self):
        return [[self.initial_number_of_grid_points] * 3 for _ in range(6)]

    def initial_refinement_levels(self):
        return [[self.initial_refinement] * 3 for _ in range(6)]


def block_logical_coordinates(domain, points):
    """
    Find the block and logical coordinates of every point.

    Parameters:
    -----------
    domain : Domain
    points : array_like, shape (3, N)

    Returns a list with one entry per point, in input order: a
    BlockLogicalCoords, or None when no block contains the point. A point on
    a face shared by two blocks is assigned to the first of them.
    """
    points = np.asarray(points, dtype=float)
    if points.ndim == 1:
        points = points[:, None]
    n_points = points.shape[1]
    result = [None] * n_points
    unassigned = np.ones(n_points, dtype=bool)
    bound = 1.0 + LOGICAL_TOLERANCE
    for block in domain.blocks:
        logical = block.inverse(points)
        with np.errstate(invalid="ignore"):
            inside = np.all(np.abs(logical) <= bound, axis=0)
            on_face = np.any(np.abs(np.abs(logical[:2]) - 1.0) <= LOGICAL_TOLERANCE, axis=0)
        for s in np.flatnonzero(inside & unassigned):
            result[s] = BlockLogicalCoords(block.block_id,
                                           np.clip(logical[:, s], -1.0, 1.0),
                                           bool(on_face[s]))
        unassigned &= ~inside
    n_unmapped = int(np.count_nonzero(unassigned))
    if n_unmapped:
        logger.info("%d of %d points are outside every block of the domain",
                    n_unmapped, n_points)
    return result
