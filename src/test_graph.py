import pytest

from graph import (
    PARENT_OF,
    SPOUSE_OF,
    build_graph,
    children_of,
    extract_relationships,
    get_ego_subgraph,
    parents_of,
    spouses_of,
)
from models import Person


def test_extract_relationships(nuclear_family):
    rels = [(r.person1_id, r.person2_id, r.relationship_type) for r in extract_relationships(nuclear_family)]
    assert rels == [
        (2, 1, PARENT_OF),
        (3, 1, PARENT_OF),
        (2, 3, SPOUSE_OF),
        (3, 2, SPOUSE_OF),
        (1, 4, PARENT_OF),
    ]


def test_build_graph(nuclear_family):
    G = build_graph(nuclear_family)
    assert G.number_of_nodes() == 4
    assert G.nodes[3]["person_name"] == "Mother"
    assert G.edges[2, 1]["relationship_type"] == PARENT_OF
    assert G.edges[2, 3]["relationship_type"] == SPOUSE_OF


def test_references_outside_roster_are_dropped():
    G = build_graph([Person(id=1, name="Root", father_id=77, spouse_ids=(78,))])
    assert list(G.nodes) == [1]
    assert G.number_of_edges() == 0


def test_parent_edge_beats_spouse_edge():
    roster = [Person(id=1, name="A", spouse_ids=(2,)), Person(id=2, name="B", father_id=1)]
    G = build_graph(roster)
    assert G.edges[1, 2]["relationship_type"] == PARENT_OF


def test_neighbour_queries(half_siblings):
    G = build_graph(half_siblings)
    assert children_of(G, 2) == [10, 1, 11]
    assert parents_of(G, 1) == [2, 3]
    assert children_of(G, 404) == []
    assert parents_of(G, 404) == []
    assert spouses_of(G, 404) == []


def test_ego_subgraph(half_siblings):
    roster = half_siblings + [
        Person(id=20, name="Wife", spouse_ids=(1,)),
        Person(id=21, name="Kid", father_id=1),
        Person(id=22, name="Grandkid", father_id=21),
    ]
    H = get_ego_subgraph(build_graph(roster), 1)
    assert set(H.nodes) == {1, 2, 3, 10, 11, 12, 20, 21}


def test_ego_subgraph_unknown_center(nuclear_family):
    with pytest.raises(ValueError, match="not found"):
        get_ego_subgraph(build_graph(nuclear_family), 99)
