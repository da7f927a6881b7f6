from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from numba import njit

VACANT_VOXEL = np.int32(-1)


def _species_counts_impl(voxels: NDArray[np.int32], species_count: int) -> NDArray[np.int64]:
    counts = np.zeros(species_count, dtype=np.int64)
    for idx in range(voxels.shape[0]):
        sid = voxels[idx]
        if sid >= 0:
            counts[sid] += 1
    return counts


def _voxels_of_impl(voxels: NDArray[np.int32], species_id: int) -> NDArray[np.int64]:
    total = 0
    for idx in range(voxels.shape[0]):
        if voxels[idx] == species_id:
            total += 1
    result = np.empty(total, dtype=np.int64)
    slot = 0
    for idx in range(voxels.shape[0]):
        if voxels[idx] == species_id:
            result[slot] = idx
            slot += 1
    return result


def _fill_vacant_impl(voxels: NDArray[np.int32], species_id: int) -> int:
    filled = 0
    for idx in range(voxels.shape[0]):
        if voxels[idx] < 0:
            voxels[idx] = species_id
            filled += 1
    return filled


species_counts = njit(cache=True)(_species_counts_impl)
voxels_of = njit(cache=True)(_voxels_of_impl)
fill_vacant = njit(cache=True)(_fill_vacant_impl)


__all__ = [
    "VACANT_VOXEL",
    "species_counts",
    "voxels_of",
    "fill_vacant",
]
