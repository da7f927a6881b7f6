"""
Lattice configurations and factory functions.

A LatticeConfig names the lattice extents, the species to register (in
SpeciesID order) and an optional counting species used to fill every voxel
before initial particles are placed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from .lattice import HCPLatticeSize, HCPLatticeSpace
from .species import ParticleID

InitialParticle = Tuple[str, int, Optional[ParticleID]]


@dataclass(frozen=True)
class SpeciesConfig:
    """One species table entry."""
    name: str
    location: str | None = None  # species required at a move destination
    tracking: bool = True        # False keeps only a count


@dataclass
class LatticeConfig:
    """Lattice configuration."""
    voxel_radius: float = 5e-9
    row: int = 10
    col: int = 10
    layer: int = 10
    species: tuple[SpeciesConfig, ...] = field(default_factory=tuple)
    fill: str | None = None

    @property
    def size(self) -> HCPLatticeSize:
        return HCPLatticeSize(self.row, self.col, self.layer)

    @property
    def num_voxels(self) -> int:
        return self.row * self.col * self.layer


def make_hcp_space(
    voxel_radius: float,
    size: HCPLatticeSize | Sequence[int],
    *,
    species: Sequence[SpeciesConfig] | None = None,
    fill: str | None = None,
    initial_particles: Sequence[InitialParticle] | None = None,
) -> HCPLatticeSpace:
    """Create a lattice space, register species, fill and populate it."""
    if not isinstance(size, HCPLatticeSize):
        if len(size) != 3:
            raise ValueError("size must be (row, col, layer).")
        size = HCPLatticeSize(*size)

    space = HCPLatticeSpace(voxel_radius, size)

    if species is not None:
        for entry in species:
            space.add_species(entry.name, entry.location, entry.tracking)

    if fill is not None:
        space.fill(fill)

    if initial_particles is not None:
        for name, coordinate, pid in initial_particles:
            space.new_particle(name, coordinate, pid)

    return space


def make_hcp_space_from_config(
    config: LatticeConfig,
    *,
    initial_particles: Sequence[InitialParticle] | None = None,
) -> HCPLatticeSpace:
    return make_hcp_space(
        config.voxel_radius,
        config.size,
        species=config.species,
        fill=config.fill,
        initial_particles=initial_particles,
    )


__all__ = [
    "SpeciesConfig",
    "LatticeConfig",
    "make_hcp_space",
    "make_hcp_space_from_config",
]
