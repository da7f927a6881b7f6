import copy

import numpy as np
import pytest

from HCP import (
    HCPLatticeSize,
    HCPLatticeSpace,
    InvalidLocation,
    LatticeError,
    ParticleID,
    ParticleNotFound,
    Species,
    SpeciesConfig,
    make_hcp_space,
)


def make_scenario():
    """2x2x1 lattice: A on voxel 0, Vacant on voxels 1-3."""
    return make_hcp_space(
        1.0,
        (2, 2, 1),
        species=[
            SpeciesConfig("Vacant", tracking=False),
            SpeciesConfig("A", location="Vacant"),
        ],
        fill="Vacant",
        initial_particles=[("A", 0, ParticleID(0, 1))],
    )


def snapshot(space):
    return space.voxels.copy(), copy.deepcopy(space.species_cache)


def assert_unchanged(space, before):
    voxels, species_cache = before
    assert np.array_equal(space.voxels, voxels)
    assert space.species_cache == species_cache


def test_scenario_move_onto_vacant():
    space = make_scenario()
    assert space.num_molecules("Vacant") == 3

    space.move_particle(0, 1)

    assert space.get_species_at(0) == Species("Vacant")
    assert space.get_species_at(1) == Species("A")
    assert space.list_particles("A") == [(ParticleID(0, 1), 1)]
    assert space.num_molecules("Vacant") == 3
    assert space.find_particle(ParticleID(0, 1)) == (Species("A"), 1)
    assert space.is_consistent()


def test_move_from_empty_voxel():
    space = HCPLatticeSpace(1.0, HCPLatticeSize(2, 2, 1))
    space.add_species("A")
    before = snapshot(space)
    with pytest.raises(ParticleNotFound) as excinfo:
        space.move_particle(2, 3)
    assert excinfo.value.coordinate == 2
    assert_unchanged(space, before)


def test_move_rejects_mismatched_substrate():
    space = make_hcp_space(
        1.0,
        (3, 1, 1),
        species=[
            SpeciesConfig("Vacant", tracking=False),
            SpeciesConfig("Membrane", tracking=False),
            SpeciesConfig("A", location="Vacant"),
        ],
        fill="Vacant",
    )
    space.new_particle("A", 0, ParticleID(0, 1))
    space.remove_particle(1)
    space.new_particle("Membrane", 1)
    space.remove_particle(2)
    before = snapshot(space)

    with pytest.raises(InvalidLocation) as excinfo:
        space.move_particle(0, 1)
    assert (excinfo.value.from_, excinfo.value.to) == (0, 1)
    assert_unchanged(space, before)

    # empty voxel is not Vacant either
    with pytest.raises(InvalidLocation):
        space.move_particle(0, 2)
    assert_unchanged(space, before)


def test_move_onto_empty_voxel_without_location():
    space = HCPLatticeSpace(1.0, HCPLatticeSize(2, 2, 1))
    space.add_species("Free")
    space.add_species("Blocker", tracking=False)
    space.new_particle("Free", 0, ParticleID(0, 1))
    space.new_particle("Blocker", 3)

    space.move_particle(0, 2)
    assert space.get_species_at(0) is None
    assert space.get_species_at(2) == Species("Free")
    assert space.list_particles("Free") == [(ParticleID(0, 1), 2)]
    assert space.is_consistent()

    before = snapshot(space)
    with pytest.raises(InvalidLocation):
        space.move_particle(2, 3)
    assert_unchanged(space, before)


def test_self_move_is_always_rejected():
    space = make_scenario()
    before = snapshot(space)
    for coordinate in range(space.num_voxels):
        with pytest.raises(InvalidLocation):
            space.move_particle(coordinate, coordinate)
        assert_unchanged(space, before)


def test_round_trip_restores_state():
    space = make_scenario()
    before = snapshot(space)
    space.move_particle(0, 3)
    space.move_particle(3, 0)
    assert_unchanged(space, before)


def test_tracked_substrate_keeps_identity():
    space = HCPLatticeSpace(1.0, HCPLatticeSize(2, 1, 1))
    space.add_species("Lipid")
    space.add_species("Protein", location="Lipid")
    space.new_particle("Lipid", 0, ParticleID(0, 1))
    space.new_particle("Lipid", 1, ParticleID(0, 2))
    space.new_particle("Protein", 0, ParticleID(1, 1))
    before_voxels = space.voxels.copy()

    space.move_particle(0, 1)
    assert space.list_particles("Lipid") == [(ParticleID(0, 2), 0)]
    assert space.list_particles("Protein") == [(ParticleID(1, 1), 1)]
    assert space.is_consistent()

    space.move_particle(1, 0)
    assert np.array_equal(space.voxels, before_voxels)
    assert space.list_particles("Lipid") == [(ParticleID(0, 2), 1)]
    assert space.list_particles("Protein") == [(ParticleID(1, 1), 0)]


def test_round_trip_keeps_tracked_substrate_order():
    space = HCPLatticeSpace(1.0, HCPLatticeSize(3, 1, 1))
    space.add_species("Lipid")
    space.add_species("Protein", location="Lipid")
    for serial in range(3):
        space.new_particle("Lipid", serial, ParticleID(0, serial + 1))
    space.new_particle("Protein", 0, ParticleID(1, 1))
    lipids = space.list_particles("Lipid")
    assert lipids == [(ParticleID(0, 2), 1), (ParticleID(0, 3), 2)]
    before = snapshot(space)

    space.move_particle(0, 1)
    assert space.list_particles("Lipid") == [(ParticleID(0, 2), 0), (ParticleID(0, 3), 2)]
    space.move_particle(1, 0)

    assert space.list_particles("Lipid") == lipids
    assert_unchanged(space, before)


def test_random_operations_keep_index_consistent():
    rng = np.random.default_rng(42)
    space = make_hcp_space(
        1.0,
        (4, 4, 2),
        species=[
            SpeciesConfig("Vacant", tracking=False),
            SpeciesConfig("A", location="Vacant"),
            SpeciesConfig("B", location="Vacant", tracking=False),
            SpeciesConfig("C"),
        ],
    )
    for coordinate in range(0, space.num_voxels, 2):
        space.new_particle("Vacant", coordinate)

    serial = 0
    for _ in range(2000):
        action = rng.integers(0, 4)
        coordinate = int(rng.integers(0, space.num_voxels))
        name = ("A", "B", "C")[int(rng.integers(0, 3))]
        occupied = space.num_occupied()
        try:
            if action == 0:
                serial += 1
                pid = None if name == "B" else ParticleID(0, serial)
                space.new_particle(name, coordinate, pid)
            elif action == 1:
                space.remove_particle(coordinate)
            else:
                space.move_particle(coordinate, int(rng.integers(0, space.num_voxels)))
                assert space.num_occupied() == occupied
        except LatticeError:
            assert space.num_occupied() == occupied
        assert space.is_consistent()

    counts = space.species_counts()
    for species_id, species in enumerate(space.list_species()):
        assert counts[species_id] == space.num_molecules(species)
