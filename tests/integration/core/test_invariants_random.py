from __future__ import annotations

"""
Integration tests: randomized edit sequences.

Drives long seeded sequences of mutator and drop operations and checks
after every step that the snapshot is still a sound tree, that the root
survived, and that the preceding snapshot was not modified.
"""

import random

import pytest

from folderviz.core.engine import mutator, placement
from folderviz.core.engine.queries import collect_subtree_ids, find_violations
from folderviz.core.serialization.flat import from_flat, to_flat
from folderviz.domain.tree_models import DropGesture, DropMode, NodeStore, default_state

STEPS = 300


def _random_step(rng: random.Random, store: NodeStore) -> NodeStore:
    ids = list(store)
    pick = rng.choice
    action = rng.randrange(7)

    if action == 0:
        return mutator.add_node(store, pick(["folder", "file"]), f"n{rng.randrange(1000)}", pick(ids))
    if action == 1:
        return mutator.remove_subtree(store, pick(ids))
    if action == 2:
        return mutator.rename(store, pick(ids), pick(["", "  ", "renamed", "x.txt"]))
    if action == 3:
        return mutator.toggle_open(store, pick(ids))
    if action == 4:
        return mutator.move(store, pick(ids), pick(ids), pick(list(DropMode)))
    if action == 5:
        parent = pick(ids)
        children = list(store.folder(parent).children) if store.folder(parent) else []
        rng.shuffle(children)
        if children and rng.random() < 0.2:
            children.pop()
        return mutator.reorder_children(store, parent, children)
    gesture = DropGesture(active_id=pick(ids), over_id=pick(ids + [None]), modifier_active=rng.random() < 0.5)
    return placement.drop(store, gesture)


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_edits_preserve_tree_invariants(seed: int) -> None:
    rng = random.Random(seed)
    store = default_state()
    for _ in range(5):
        store = mutator.add_node(store, "folder", "seed", store.root_id)

    for _ in range(STEPS):
        before = to_flat(store)
        updated = _random_step(rng, store)

        assert to_flat(store) == before
        assert find_violations(updated) == []
        assert updated.root_id == "root"
        assert updated.root.parent is None
        assert set(collect_subtree_ids(updated, updated.root_id)) == set(updated)
        assert not (set(updated) & updated.retired)
        store = updated


def test_random_tree_survives_flat_round_trip() -> None:
    rng = random.Random(99)
    store = default_state()
    for _ in range(STEPS):
        store = _random_step(rng, store)

    assert from_flat(to_flat(store)) == store
