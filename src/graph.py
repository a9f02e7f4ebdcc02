"""NetworkX relationship graph built from a roster."""

import logging
from typing import Iterable

import networkx as nx

from models import Person, PersonId, Relationship

logger = logging.getLogger(__name__)

PARENT_OF = "PARENT_OF"
SPOUSE_OF = "SPOUSE_OF"


def extract_relationships(roster: Iterable[Person]) -> list[Relationship]:
    """
    Turn the explicit father/mother/spouse fields into relationship edges.

    Edges come out in roster order, father before mother, spouses in the order
    each person lists them.
    """
    relationships: list[Relationship] = []
    for person in roster:
        for parent_id in (person.father_id, person.mother_id):
            if parent_id is not None:
                relationships.append(Relationship(parent_id, person.id, PARENT_OF))
        for spouse_id in person.spouse_ids:
            relationships.append(Relationship(person.id, spouse_id, SPOUSE_OF))
    return relationships


def build_graph(roster: Iterable[Person]) -> nx.DiGraph:
    """Build a directed graph: person nodes, PARENT_OF (parent -> child) and SPOUSE_OF edges."""
    roster = list(roster)
    G = nx.DiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for p in roster:
        G.add_node(
            p.id,
            person_name=p.name,
            gender=p.gender,
            birth_date=p.birth_date,
            death_date=p.death_date,
        )

    # PARENT_OF edges go in first so a conflicting SPOUSE_OF never replaces one
    relationships = sorted(
        extract_relationships(roster), key=lambda r: r.relationship_type != PARENT_OF
    )
    for rel in relationships:
        if rel.person1_id not in G or rel.person2_id not in G:
            logger.debug(
                "Dropping %s edge %s -> %s: id not in roster",
                rel.relationship_type,
                rel.person1_id,
                rel.person2_id,
            )
            continue
        if G.has_edge(rel.person1_id, rel.person2_id):
            continue
        G.add_edge(rel.person1_id, rel.person2_id, relationship_type=rel.relationship_type)

    return G


def children_of(G: nx.DiGraph, person_id: PersonId) -> list[PersonId]:
    """Ids of the direct children of `person_id`, in roster order."""
    if person_id not in G:
        return []
    return [
        child
        for child in G.successors(person_id)
        if G.edges[person_id, child].get("relationship_type") == PARENT_OF
    ]


def parents_of(G: nx.DiGraph, person_id: PersonId) -> list[PersonId]:
    if person_id not in G:
        return []
    return [
        parent
        for parent in G.predecessors(person_id)
        if G.edges[parent, person_id].get("relationship_type") == PARENT_OF
    ]


def spouses_of(G: nx.DiGraph, person_id: PersonId) -> list[PersonId]:
    """
    Spouse ids in both directions: the ones `person_id` lists first, then
    anyone listing `person_id` as a spouse.
    """
    if person_id not in G:
        return []
    spouses = [
        other
        for other in G.successors(person_id)
        if G.edges[person_id, other].get("relationship_type") == SPOUSE_OF
    ]
    for other in G.predecessors(person_id):
        if (
            G.edges[other, person_id].get("relationship_type") == SPOUSE_OF
            and other not in spouses
        ):
            spouses.append(other)
    return spouses


def get_ego_subgraph(G: nx.DiGraph, center_id: PersonId) -> nx.DiGraph:
    """
    Extract the three-generation window around `center_id`.

    That is the person, their parents, the parents' other children, their
    spouses and their children: exactly the people a tree layout can show.

    Raises:
        ValueError: if `center_id` is not in the graph.
    """
    if center_id not in G:
        raise ValueError(f"Person ID {center_id} not found in graph")

    nodes = {center_id}
    parents = parents_of(G, center_id)
    nodes.update(parents)
    for parent in parents:
        nodes.update(children_of(G, parent))
    nodes.update(spouses_of(G, center_id))
    nodes.update(children_of(G, center_id))

    return G.subgraph(nodes).copy()
