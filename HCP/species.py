"""
Species table entries for the HCP lattice store.

Each registered species owns one SpeciesCache. The cache is either a
Tracking list of (ParticleID, coordinate) pairs or a bare Count of voxels.
Entries are mutated only by HCPLatticeSpace; a mismatch between an entry and
the voxel array is a broken invariant and fails with AssertionError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class ParticleID(NamedTuple):
    """Compound particle identity handed out by the caller's allocator."""
    lot: int
    serial: int


@dataclass(frozen=True)
class Species:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class Tracking:
    particles: list[tuple[ParticleID, int]] = field(default_factory=list)


@dataclass
class Count:
    count: int = 0


@dataclass
class SpeciesCache:
    species: Species
    location: int | None
    cache: Tracking | Count

    @property
    def is_tracking(self) -> bool:
        return isinstance(self.cache, Tracking)

    def __len__(self) -> int:
        if isinstance(self.cache, Tracking):
            return len(self.cache.particles)
        return self.cache.count

    def add(self, coordinate: int, pid: ParticleID | None = None) -> None:
        """Register one more voxel held by this species."""
        if isinstance(self.cache, Tracking):
            assert pid is not None, f"{self.species} tracks identities but no ParticleID was given"
            self.cache.particles.append((pid, coordinate))
        else:
            self.cache.count += 1

    def remove(self, coordinate: int) -> ParticleID | None:
        """Drop the voxel at coordinate. Returns the removed identity when tracking."""
        if isinstance(self.cache, Tracking):
            particles = self.cache.particles
            for idx in range(len(particles)):
                if particles[idx][1] == coordinate:
                    pid, _ = particles.pop(idx)
                    return pid
            raise AssertionError(f"{self.species} has no particle at coordinate {coordinate}")

        assert self.cache.count > 0, f"{self.species} count underflow at coordinate {coordinate}"
        self.cache.count -= 1
        return None

    def move_to(self, from_: int, to: int) -> None:
        if not isinstance(self.cache, Tracking):
            return
        particles = self.cache.particles
        for idx in range(len(particles)):
            pid, coordinate = particles[idx]
            if coordinate == from_:
                particles[idx] = (pid, to)
                return
        raise AssertionError(f"{self.species} has no particle at coordinate {from_}")

    def find(self, pid: ParticleID) -> int | None:
        """Coordinate of pid, or None. Count caches hold no identities."""
        if isinstance(self.cache, Tracking):
            for particle, coordinate in self.cache.particles:
                if particle == pid:
                    return coordinate
        return None


def make_species_cache(
    species: Species,
    location: int | None = None,
    tracking: bool = True,
) -> SpeciesCache:
    cache = Tracking() if tracking else Count()
    return SpeciesCache(species=species, location=location, cache=cache)


__all__ = [
    "ParticleID",
    "Species",
    "Tracking",
    "Count",
    "SpeciesCache",
    "make_species_cache",
]
