from __future__ import annotations

"""
Unit tests for the Tree Query Engine.

Verifies ancestry checks, subtree collection, ordered walks, path lookup,
search matching, folder pickers and the invariant audit.
"""

import dataclasses

from folderviz.core.engine import queries
from folderviz.core.engine.mutator import toggle_open
from folderviz.domain.tree_models import NodeStore


def test_is_descendant_walks_parent_chain(sample_store: NodeStore) -> None:
    assert queries.is_descendant(sample_store, "util", "src") is True
    assert queries.is_descendant(sample_store, "util", "root") is True
    assert queries.is_descendant(sample_store, "src", "util") is False
    assert queries.is_descendant(sample_store, "docs", "src") is False


def test_node_is_never_its_own_descendant(sample_store: NodeStore) -> None:
    for node_id in sample_store:
        assert queries.is_descendant(sample_store, node_id, node_id) is False


def test_is_descendant_tolerates_unknown_ids(sample_store: NodeStore) -> None:
    assert queries.is_descendant(sample_store, "missing", "root") is False
    assert queries.is_descendant(sample_store, None, "root") is False


def test_collect_subtree_ids(sample_store: NodeStore) -> None:
    assert set(queries.collect_subtree_ids(sample_store, "src")) == {"src", "lib", "util", "index"}
    assert queries.collect_subtree_ids(sample_store, "readme") == ["readme"]
    assert queries.collect_subtree_ids(sample_store, "missing") == []


def test_walk_is_preorder_in_children_order(sample_store: NodeStore) -> None:
    order = [(node.id, depth) for node, depth in queries.walk(sample_store)]
    assert order == [
        ("root", 0), ("src", 1), ("lib", 2), ("util", 3),
        ("index", 2), ("docs", 1), ("guide", 2), ("readme", 1),
    ]


def test_visible_rows_skip_closed_folders(sample_store: NodeStore) -> None:
    """Root is not a row; children of a collapsed folder are hidden."""
    collapsed = toggle_open(sample_store, "src")
    rows = queries.visible_rows(collapsed)

    assert rows == [("src", 0), ("docs", 0), ("guide", 1), ("readme", 0)]


def test_path_round_trip(sample_store: NodeStore) -> None:
    assert queries.path_of(sample_store, "util") == "src/lib/util.py"
    assert queries.path_of(sample_store, "root") == ""
    assert queries.find_by_path(sample_store, "src/lib/util.py") == "util"
    assert queries.find_by_path(sample_store, "/docs/") == "docs"
    assert queries.find_by_path(sample_store, "") == "root"
    assert queries.find_by_path(sample_store, "src/nope") is None


def test_search_is_case_insensitive_containment(sample_store: NodeStore) -> None:
    flags = queries.highlight_flags(sample_store, "  READ ")

    assert flags["readme"] is True
    assert flags["src"] is False
    assert queries.matches(sample_store, ".md") == ["guide", "readme"]
    assert queries.first_match(sample_store, "LIB") == "lib"


def test_empty_query_matches_nothing(sample_store: NodeStore) -> None:
    assert not any(queries.highlight_flags(sample_store, "   ").values())
    assert queries.first_match(sample_store, "") is None


def test_first_match_skips_root(sample_store: NodeStore) -> None:
    assert queries.first_match(sample_store, "PROJECT") is None
    assert queries.matches(sample_store, "project", include_root=True) == ["root"]


def test_folder_options_root_first_then_by_name(sample_store: NodeStore) -> None:
    names = [f.id for f in queries.folder_options(sample_store)]
    assert names == ["root", "docs", "lib", "src"]


def test_move_targets_exclude_own_subtree(sample_store: NodeStore) -> None:
    for_folder = [f.id for f in queries.move_targets(sample_store, "src")]
    for_file = [f.id for f in queries.move_targets(sample_store, "util")]

    assert for_folder == ["root", "docs"]
    assert for_file == ["root", "docs", "lib", "src"]


def test_find_violations_on_sound_store(sample_store: NodeStore) -> None:
    assert queries.find_violations(sample_store) == []


def test_find_violations_reports_broken_links(sample_store: NodeStore) -> None:
    """A child whose parent field disagrees with the listing is reported."""
    broken = sample_store.evolve({"util": dataclasses.replace(sample_store["util"], parent="docs")})
    problems = queries.find_violations(broken)

    assert any("util" in p for p in problems)
