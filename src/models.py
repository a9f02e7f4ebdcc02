"""Data classes for family members and computed tree layouts."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Hashable

PersonId = Hashable


@dataclass(frozen=True)
class Person:
    id: PersonId
    name: str
    gender: str | None = None
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None
    relationship: str | None = None  # free-text label relative to "self"
    father_id: PersonId | None = None
    mother_id: PersonId | None = None
    spouse_ids: tuple = ()
    photo: str | None = None
    notes: str | None = None


class Role(str, Enum):
    ROOT = "root"
    PARENT = "parent"
    SIBLING = "sibling"
    SPOUSE = "spouse"
    CHILD = "child"


class LineKind(str, Enum):
    PARENT_CHILD = "parent-child"
    SPOUSE = "spouse"
    SIBLING_BRANCH = "sibling-branch"


# REST payload keys for the Person fields that are not a single word
_CAMEL_KEYS = {
    "birth_date": "birthDate",
    "death_date": "deathDate",
    "father_id": "fatherId",
    "mother_id": "motherId",
    "spouse_ids": "spouseIds",
}


@dataclass(frozen=True)
class LayoutNode:
    person: Person
    x: float
    y: float
    role: Role

    @property
    def id(self) -> PersonId:
        return self.person.id

    @property
    def name(self) -> str:
        return self.person.name

    @property
    def is_root(self) -> bool:
        return self.role is Role.ROOT

    @property
    def is_parent(self) -> bool:
        return self.role is Role.PARENT

    @property
    def is_sibling(self) -> bool:
        return self.role is Role.SIBLING

    @property
    def is_spouse(self) -> bool:
        return self.role is Role.SPOUSE

    @property
    def is_child(self) -> bool:
        return self.role is Role.CHILD

    def to_dict(self) -> dict:
        """Flatten into the renderer payload: person fields plus position and role flags."""
        data = {}
        for f in fields(Person):
            value = getattr(self.person, f.name)
            if isinstance(value, tuple):
                value = list(value)
            data[_CAMEL_KEYS.get(f.name, f.name)] = value
        data.update(
            x=self.x,
            y=self.y,
            isRoot=self.is_root,
            isParent=self.is_parent,
            isSibling=self.is_sibling,
            isSpouse=self.is_spouse,
            isChild=self.is_child,
        )
        return data


@dataclass(frozen=True)
class LineSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    kind: LineKind
    key: str

    def to_dict(self) -> dict:
        return {
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "type": self.kind.value,
            "key": self.key,
        }


@dataclass(frozen=True)
class TreeLayout:
    nodes: tuple[LayoutNode, ...] = ()
    lines: tuple[LineSegment, ...] = ()
    width: float = 0.0
    height: float = 0.0

    def __bool__(self) -> bool:
        return bool(self.nodes)

    def node(self, person_id: PersonId) -> LayoutNode | None:
        for n in self.nodes:
            if n.id == person_id:
                return n
        return None

    @property
    def root(self) -> LayoutNode | None:
        return next((n for n in self.nodes if n.is_root), None)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "nodes": [n.to_dict() for n in self.nodes],
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class Relationship:
    person1_id: PersonId
    person2_id: PersonId
    relationship_type: str  # PARENT_OF, SPOUSE_OF
