"""
Relationship resolution strategies.

The layout engine only talks to a `RelationshipResolver`. Two strategies exist
because family records come in two shapes: explicit father/mother/spouse ids,
or a single free-text `relationship` label describing how each person relates
to the user ("Father", "Son", "Wife").
"""

import logging
from typing import Callable, Iterable, Protocol

import networkx as nx

import graph
from models import Person, PersonId

logger = logging.getLogger(__name__)


class RelationshipResolver(Protocol):
    def person(self, person_id: PersonId) -> Person | None: ...

    def parents_of(self, person_id: PersonId) -> list[Person]: ...

    def children_of(self, person_id: PersonId) -> list[Person]: ...

    def spouses_of(self, person_id: PersonId) -> list[Person]: ...


def _index(roster: Iterable[Person]) -> dict[PersonId, Person]:
    by_id: dict[PersonId, Person] = {}
    for p in roster:
        # first record wins, like a lookup with list.find
        by_id.setdefault(p.id, p)
    return by_id


class ExplicitResolver:
    """
    Resolve relatives from `father_id`, `mother_id` and `spouse_ids`.

    Args:
        roster: Everybody under consideration.
        resolve_person: Optional replacement for the id -> Person lookup.
        resolve_children_of: Optional replacement for the children lookup;
            by default children come from the relationship graph in roster order.
    """

    def __init__(
        self,
        roster: Iterable[Person],
        resolve_person: Callable[[PersonId], Person | None] | None = None,
        resolve_children_of: Callable[[PersonId], list[Person]] | None = None,
    ):
        roster = list(roster)
        self._by_id = _index(roster)
        self._graph: nx.DiGraph = graph.build_graph(roster)
        self._resolve_person = resolve_person
        self._resolve_children_of = resolve_children_of

    def person(self, person_id: PersonId) -> Person | None:
        if person_id is None:
            return None
        if self._resolve_person is not None:
            return self._resolve_person(person_id)
        return self._by_id.get(person_id)

    def _resolve_all(self, ids: Iterable[PersonId]) -> list[Person]:
        people = []
        for person_id in ids:
            p = self.person(person_id)
            if p is None:
                logger.debug("Skipping unresolvable person id %s", person_id)
                continue
            people.append(p)
        return people

    def parents_of(self, person_id: PersonId) -> list[Person]:
        """Father first, then mother; missing or unknown parents are left out."""
        p = self.person(person_id)
        if p is None:
            return []
        return self._resolve_all(pid for pid in (p.father_id, p.mother_id) if pid is not None)

    def children_of(self, person_id: PersonId) -> list[Person]:
        if self._resolve_children_of is not None:
            return list(self._resolve_children_of(person_id))
        return self._resolve_all(graph.children_of(self._graph, person_id))

    def spouses_of(self, person_id: PersonId) -> list[Person]:
        p = self.person(person_id)
        if p is None:
            return []
        ids = list(dict.fromkeys(p.spouse_ids))
        # partners who list this person without being listed back
        for other in graph.spouses_of(self._graph, person_id):
            if other not in ids:
                ids.append(other)
        return self._resolve_all(ids)


# Substrings matched against the lower-cased label, as the family pages do.
# "grandmother" counts as a parent and "stepbrother" as a sibling; that is the
# established behaviour and is kept until someone decides otherwise.
DEFAULT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "parent": ("parent", "father", "mother"),
    "child": ("child", "son", "daughter"),
    "spouse": ("spouse", "wife", "husband", "partner"),
    "sibling": ("brother", "sister", "sibling"),
}

SELF_LABELS = ("self", "me", "myself")


def label_matches(label: str | None, keywords: Iterable[str]) -> bool:
    if not label:
        return False
    label = label.lower()
    return any(k in label for k in keywords)


class FreeTextResolver:
    """
    Resolve relatives from free-text labels relative to one "self" person.

    Only self, self's labelled parents and self's labelled siblings have
    resolvable relatives; everyone else resolves to nobody. A person may match
    more than one role (e.g. "Godmother's son"); each query filters on its own
    keywords and the layout keeps whichever role is placed first.

    Args:
        roster: Everybody under consideration.
        self_id: The person the labels are relative to. Defaults to the first
            person labelled self/me/myself, else the first person with no label.
        keywords: Role -> substrings mapping, see DEFAULT_KEYWORDS.
    """

    def __init__(
        self,
        roster: Iterable[Person],
        self_id: PersonId | None = None,
        keywords: dict[str, tuple[str, ...]] | None = None,
    ):
        self._roster = list(roster)
        self._by_id = _index(self._roster)
        self.keywords = dict(DEFAULT_KEYWORDS)
        if keywords:
            self.keywords.update(keywords)
        self.self_id = self_id if self_id is not None else self._find_self()
        if self.self_id is None:
            logger.debug("No self person found; free-text labels resolve to nobody")

    def _find_self(self) -> PersonId | None:
        for p in self._roster:
            if p.relationship and p.relationship.strip().lower() in SELF_LABELS:
                return p.id
        for p in self._roster:
            if not (p.relationship or "").strip():
                return p.id
        return None

    def _labelled(self, role: str) -> list[Person]:
        return [
            p
            for p in self._roster
            if p.id != self.self_id and label_matches(p.relationship, self.keywords[role])
        ]

    def person(self, person_id: PersonId) -> Person | None:
        if person_id is None:
            return None
        return self._by_id.get(person_id)

    def _is_parent_of_self(self, person_id: PersonId) -> bool:
        return any(p.id == person_id for p in self._labelled("parent"))

    def _is_sibling_of_self(self, person_id: PersonId) -> bool:
        return any(p.id == person_id for p in self._labelled("sibling"))

    def parents_of(self, person_id: PersonId) -> list[Person]:
        if self.self_id is None:
            return []
        if person_id == self.self_id or self._is_sibling_of_self(person_id):
            return self._labelled("parent")
        return []

    def children_of(self, person_id: PersonId) -> list[Person]:
        if self.self_id is None:
            return []
        if person_id == self.self_id:
            return self._labelled("child")
        if self._is_parent_of_self(person_id):
            me = self.person(self.self_id)
            return ([me] if me else []) + self._labelled("sibling")
        return []

    def spouses_of(self, person_id: PersonId) -> list[Person]:
        if self.self_id is not None and person_id == self.self_id:
            return self._labelled("spouse")
        return []


def make_resolver(kind: str, roster: Iterable[Person], self_id: PersonId | None = None):
    """Build a resolver by name: 'explicit' or 'free-text'."""
    if kind == "explicit":
        return ExplicitResolver(roster)
    if kind in ("free-text", "freetext", "text"):
        return FreeTextResolver(roster, self_id=self_id)
    raise ValueError(f"Unknown resolver: {kind!r} (expected 'explicit' or 'free-text')")
