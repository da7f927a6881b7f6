"""
HCP - occupancy core for lattice-based spatial particle simulation

This package keeps a hexagonal-close-packed voxel lattice and its per-species
index consistent while particles are placed, removed and moved.

Features:
- Flat voxel array with one optional species per voxel
- Tracking (per-particle identity) or counting species entries
- Moves restricted to each species' location (substrate) species
- Dataclass configurations and factory functions
- Numba-compiled scans over the voxel array
"""

from .errors import (
    LatticeError,
    OutOfRange,
    ParticleNotFound,
    InvalidLocation,
)
from .species import (
    ParticleID,
    Species,
    SpeciesCache,
    Tracking,
    Count,
)
from .lattice import (
    HCPLatticeSize,
    HCPLatticeSpace,
)
from .configs import (
    SpeciesConfig,
    LatticeConfig,
    make_hcp_space,
    make_hcp_space_from_config,
)

__all__ = [
    "LatticeError",
    "OutOfRange",
    "ParticleNotFound",
    "InvalidLocation",
    "ParticleID",
    "Species",
    "SpeciesCache",
    "Tracking",
    "Count",
    "HCPLatticeSize",
    "HCPLatticeSpace",
    "SpeciesConfig",
    "LatticeConfig",
    "make_hcp_space",
    "make_hcp_space_from_config",
]

__version__ = "0.1.0"
