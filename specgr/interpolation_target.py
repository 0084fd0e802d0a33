import logging
from abc import ABC, abstractmethod

from .domain import block_logical_coordinates
from .kerr_horizon import KerrHorizon

logger = logging.getLogger(__name__)


class InterpolationTarget(ABC):
    """
    A set of points that volume data will be interpolated onto.

    Subclasses provide the Cartesian points; locating them in a domain is
    shared.
    """
    @abstractmethod
    def points(self):
        """Cartesian target points, shape (3, N)."""

    def block_logical_coordinates(self, domain):
        return block_logical_coordinates(domain, self.points())

    def coverage(self, domain):
        """Counts of points inside a block, on a shared block face, and outside the domain."""
        coords = self.block_logical_coordinates(domain)
        mapped = [c for c in coords if c is not None]
        summary = {
            "total": len(coords),
            "mapped": len(mapped),
            "boundary": sum(1 for c in mapped if c.on_boundary),
            "unmapped": len(coords) - len(mapped),
        }
        logger.info("%s coverage: %s", type(self).__name__, summary)
        return summary


class KerrHorizonTarget(InterpolationTarget):
    """Target points on the horizon of a Kerr black hole."""
    def __init__(self, kerr_horizon):
        if not isinstance(kerr_horizon, KerrHorizon):
            raise TypeError(f"Expected KerrHorizon options, got {type(kerr_horizon).__name__}")
        self.options = kerr_horizon

    @classmethod
    def from_options(cls, text):
        return cls(KerrHorizon.from_options(text))

    def points(self):
        return self.options.points()
