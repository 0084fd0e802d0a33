
from .spin_weighted import SpinWeighted, SpinWeightMismatchError
from .spherical_harmonics import SphericalHarmonics
from .kerr_horizon import AngularOrdering, KerrHorizon, kerr_horizon_radius
from .domain import Sphere, block_logical_coordinates
from .interpolation_target import InterpolationTarget, KerrHorizonTarget
from .options import Option, OptionGroup, ParseError, create
from .logging_config import setup_logging

__all__ = [
    'SpinWeighted',
    'SpinWeightMismatchError',
    'SphericalHarmonics',
    'AngularOrdering',
    'KerrHorizon',
    'kerr_horizon_radius',
    'Sphere',
    'block_logical_coordinates',
    'InterpolationTarget',
    'KerrHorizonTarget',
    'Option',
    'OptionGroup',
    'ParseError',
    'create',
    'setup_logging'
]
