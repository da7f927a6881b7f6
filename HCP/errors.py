"""Errors raised by the lattice store when a request cannot be applied."""

from __future__ import annotations


class LatticeError(Exception):
    """Base class for rejected lattice requests."""


class OutOfRange(LatticeError, IndexError):
    def __init__(self, coordinate: int):
        super().__init__(f"coordinate {coordinate} is outside the voxel array")
        self.coordinate = coordinate


class ParticleNotFound(LatticeError, LookupError):
    def __init__(self, coordinate: int):
        super().__init__(f"no particle at coordinate {coordinate}")
        self.coordinate = coordinate


class InvalidLocation(LatticeError, ValueError):
    """The destination occupant is not the location species of the mover."""

    def __init__(self, from_: int, to: int):
        super().__init__(f"cannot move from {from_} to {to}: destination is not a valid location")
        self.from_ = from_
        self.to = to


__all__ = [
    "LatticeError",
    "OutOfRange",
    "ParticleNotFound",
    "InvalidLocation",
]
