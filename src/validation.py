"""Roster validation for family tree data."""

from typing import Iterable

import networkx as nx

from graph import PARENT_OF, build_graph
from models import Person
from parsing import parse_date_string


def _iso_date(value) -> str | None:
    # JSON rosters may carry years as numbers or dates in any parseable format
    if value is None or value == "":
        return None
    return parse_date_string(str(value))


def validate_roster(roster: Iterable[Person]) -> list[str]:
    """
    Check a roster for data the tree can only partly show:
    - References to ids that are not in the roster
    - People listed as their own parent or spouse
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, parent younger than 12)
    - Death before birth
    - Spouse links that are not listed back

    Returns a list of warning messages.
    """
    roster = list(roster)
    warnings: list[str] = []
    by_id = {p.id: p for p in roster}

    for p in roster:
        for label, ref in (("father", p.father_id), ("mother", p.mother_id)):
            if ref is None:
                continue
            if ref == p.id:
                warnings.append(f"Impossible: {p.name} is listed as their own {label}")
            elif ref not in by_id:
                warnings.append(f"Unknown {label} id {ref} for {p.name}")
        for ref in p.spouse_ids:
            if ref == p.id:
                warnings.append(f"Impossible: {p.name} is listed as their own spouse")
            elif ref not in by_id:
                warnings.append(f"Unknown spouse id {ref} for {p.name}")
            elif p.id not in by_id[ref].spouse_ids:
                warnings.append(
                    f"One-sided: {p.name} lists {by_id[ref].name} as spouse but not vice versa"
                )

    G = build_graph(roster)

    # Create a subgraph with only PARENT_OF edges for cycle detection
    parent_edges = [
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == PARENT_OF
    ]
    parent_graph = nx.DiGraph(parent_edges)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # dates are compared as normalized ISO strings (YYYY-MM-DD)
    births = {p.id: _iso_date(p.birth_date) for p in roster}
    for parent, child in parent_edges:
        parent_birth = births.get(parent)
        child_birth = births.get(child)
        if not (parent_birth and child_birth):
            continue

        parent_name = by_id[parent].name
        child_name = by_id[child].name
        if child_birth < parent_birth:
            warnings.append(f"Impossible: {child_name} born before parent {parent_name}")
            continue
        if int(child_birth[:4]) - int(parent_birth[:4]) < 12:
            warnings.append(
                f"Suspicious: {parent_name} was less than 12 years "
                f"old when {child_name} was born"
            )

    for p in roster:
        birth = births[p.id]
        death = _iso_date(p.death_date)
        if birth and death and death < birth:
            warnings.append(f"Impossible: {p.name} died before being born")

    return warnings
