"""
Occupancy store for a hexagonal-close-packed voxel lattice.

Features:
- Flat voxel array holding one species id (or nothing) per voxel
- Append-only species table with tracking or counting entries
- Moves restricted to voxels held by the mover's location species
- Validation of every request before any state is touched
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidLocation, OutOfRange, ParticleNotFound
from .kernels import VACANT_VOXEL, fill_vacant, species_counts, voxels_of
from .species import ParticleID, Species, SpeciesCache, Tracking, make_species_cache


@dataclass(frozen=True)
class HCPLatticeSize:
    row: int
    col: int
    layer: int

    def __post_init__(self):
        for name in ("row", "col", "layer"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise ValueError(f"{name} must be a positive integer.")

    @property
    def num_voxels(self) -> int:
        return int(self.row) * int(self.col) * int(self.layer)


class HCPLatticeSpace:
    """
    Voxel occupancy plus the per-species index that mirrors it.

    voxels[c] is the SpeciesID occupying coordinate c, or -1 when the voxel
    is empty. Every occupied voxel is accounted for by exactly one entry of
    species_cache, either as a (ParticleID, c) pair or as one unit of a count.
    """

    def __init__(self, voxel_radius: float, size: HCPLatticeSize):
        if isinstance(voxel_radius, bool) or not isinstance(voxel_radius, (float, int)) or voxel_radius <= 0:
            raise ValueError("voxel_radius must be a positive number.")
        self.voxel_radius = float(voxel_radius)
        self.size = size
        self.voxels = np.full(size.num_voxels, VACANT_VOXEL, dtype=np.int32)
        self.species_cache: list[SpeciesCache] = []
        self._ids: dict[Species, int] = {}

    @property
    def num_voxels(self) -> int:
        return int(self.voxels.shape[0])

    def get_voxel_radius(self) -> float:
        return self.voxel_radius

    # ========================================================================
    # Species table
    # ========================================================================

    def add_species(
        self,
        species: Species | str,
        location: Species | str | None = None,
        tracking: bool = True,
    ) -> int:
        """Register a species and return its SpeciesID."""
        species = _as_species(species)
        if species in self._ids:
            raise ValueError(f"species {species} is already registered.")
        location_id = None
        if location is not None:
            location = _as_species(location)
            if location not in self._ids:
                raise ValueError(f"location species {location} is not registered.")
            location_id = self._ids[location]

        species_id = len(self.species_cache)
        self.species_cache.append(make_species_cache(species, location_id, tracking))
        self._ids[species] = species_id
        return species_id

    def get_species_id(self, species: Species | str | int) -> int:
        if isinstance(species, (int, np.integer)) and not isinstance(species, bool):
            if not 0 <= species < len(self.species_cache):
                raise KeyError(f"unknown species id {species}")
            return int(species)
        species = _as_species(species)
        try:
            return self._ids[species]
        except KeyError:
            raise KeyError(f"unknown species {species}") from None

    def get_species(self, species_id: int) -> Species:
        return self.species_cache[self.get_species_id(species_id)].species

    def list_species(self) -> list[Species]:
        return [entry.species for entry in self.species_cache]

    def _entry(self, species: Species | str | int) -> SpeciesCache:
        return self.species_cache[self.get_species_id(species)]

    # ========================================================================
    # Occupancy queries
    # ========================================================================

    def _check_coordinate(self, coordinate: int) -> int:
        if isinstance(coordinate, bool) or not isinstance(coordinate, (int, np.integer)):
            raise TypeError(f"coordinate must be an integer, got {type(coordinate).__name__}")
        if not 0 <= coordinate < self.voxels.shape[0]:
            raise OutOfRange(coordinate)
        return int(coordinate)

    def get_species_id_at(self, coordinate: int) -> int | None:
        sid = int(self.voxels[self._check_coordinate(coordinate)])
        return None if sid < 0 else sid

    def get_species_at(self, coordinate: int) -> Species | None:
        sid = self.get_species_id_at(coordinate)
        return None if sid is None else self.species_cache[sid].species

    def find_particle(self, pid: ParticleID) -> tuple[Species, int] | None:
        """Linear scan over tracking entries. Count entries carry no identities."""
        for entry in self.species_cache:
            coordinate = entry.find(pid)
            if coordinate is not None:
                return entry.species, coordinate
        return None

    def num_molecules(self, species: Species | str | int) -> int:
        return len(self._entry(species))

    def list_particles(self, species: Species | str | int) -> list[tuple[ParticleID, int]]:
        entry = self._entry(species)
        if isinstance(entry.cache, Tracking):
            return list(entry.cache.particles)
        return []

    def list_coordinates(self, species: Species | str | int) -> NDArray[np.int64]:
        return voxels_of(self.voxels, self.get_species_id(species))

    def species_counts(self) -> NDArray[np.int64]:
        return species_counts(self.voxels, len(self.species_cache))

    def num_occupied(self) -> int:
        return int(np.count_nonzero(self.voxels >= 0))

    # ========================================================================
    # Mutation
    # ========================================================================

    def fill(self, species: Species | str | int) -> int:
        """Assign every empty voxel to a counting species. Returns the number filled."""
        species_id = self.get_species_id(species)
        entry = self.species_cache[species_id]
        if entry.is_tracking:
            raise ValueError(f"cannot fill with tracked species {entry.species}.")
        if entry.location is not None:
            raise ValueError(f"cannot fill with {entry.species}; it must be placed on its location species.")
        filled = int(fill_vacant(self.voxels, species_id))
        entry.cache.count += filled
        return filled

    def new_particle(
        self,
        species: Species | str | int,
        coordinate: int,
        pid: ParticleID | None = None,
    ) -> ParticleID | None:
        """
        Place a particle of species on coordinate.

        The voxel must currently hold the species' location (an empty voxel
        when the species has none). The displaced location species loses
        that voxel; its identity is returned when it is tracked.
        """
        species_id = self.get_species_id(species)
        coordinate = self._check_coordinate(coordinate)
        entry = self.species_cache[species_id]
        occupant = self.get_species_id_at(coordinate)

        if occupant != entry.location:
            raise InvalidLocation(coordinate, coordinate)
        if entry.is_tracking and pid is None:
            raise ValueError(f"species {entry.species} tracks identities; a ParticleID is required.")
        if pid is not None and self.find_particle(pid) is not None:
            raise ValueError(f"particle {pid} is already on the lattice.")

        displaced = None
        if occupant is not None:
            displaced = self.species_cache[occupant].remove(coordinate)
        entry.add(coordinate, pid)
        self.voxels[coordinate] = species_id
        return displaced

    def remove_particle(self, coordinate: int) -> ParticleID | None:
        """
        Take the occupant off coordinate and return its identity, if tracked.

        The voxel goes back to the occupant's location species, or becomes
        empty when the species has no location.
        """
        coordinate = self._check_coordinate(coordinate)
        occupant = self.get_species_id_at(coordinate)
        if occupant is None:
            raise ParticleNotFound(coordinate)

        entry = self.species_cache[occupant]
        location = entry.location
        if location is not None and self.species_cache[location].is_tracking:
            raise ValueError(
                f"cannot restore tracked location species {self.species_cache[location].species} "
                f"at {coordinate} without a ParticleID."
            )

        pid = entry.remove(coordinate)
        if location is None:
            self.voxels[coordinate] = VACANT_VOXEL
        else:
            self.species_cache[location].add(coordinate)
            self.voxels[coordinate] = location
        return pid

    def move_particle(self, from_: int, to: int) -> None:
        """
        Move the occupant of from_ onto to.

        to must hold the mover's location species (or be empty when it has
        none). The location species takes over from_, so both voxels stay
        accounted for. Nothing changes if any check fails.
        """
        from_ = self._check_coordinate(from_)
        to = self._check_coordinate(to)

        from_species_id = self.get_species_id_at(from_)
        if from_species_id is None:
            raise ParticleNotFound(from_)
        if from_ == to:
            raise InvalidLocation(from_, to)

        to_species_id = self.get_species_id_at(to)
        from_entry = self.species_cache[from_species_id]
        if from_entry.location != to_species_id:
            raise InvalidLocation(from_, to)

        from_entry.move_to(from_, to)

        if to_species_id is not None:
            self.species_cache[to_species_id].move_to(to, from_)

        self.voxels[from_], self.voxels[to] = self.voxels[to], self.voxels[from_]

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def is_consistent(self) -> bool:
        """Check that the species table and the voxel array describe the same occupancy."""
        species_total = len(self.species_cache)
        if np.any(self.voxels >= species_total):
            return False
        counts = species_counts(self.voxels, species_total)
        for species_id, entry in enumerate(self.species_cache):
            if len(entry) != counts[species_id]:
                return False
            if isinstance(entry.cache, Tracking):
                coordinates = [coordinate for _, coordinate in entry.cache.particles]
                if len(set(coordinates)) != len(coordinates):
                    return False
                for coordinate in coordinates:
                    if not 0 <= coordinate < self.voxels.shape[0]:
                        return False
                    if self.voxels[coordinate] != species_id:
                        return False
        return True


def _as_species(species: Species | str) -> Species:
    if isinstance(species, Species):
        return species
    if isinstance(species, str):
        return Species(species)
    raise TypeError(f"expected Species or str, got {type(species).__name__}")


__all__ = [
    "HCPLatticeSize",
    "HCPLatticeSpace",
]
