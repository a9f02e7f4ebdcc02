"""
Three-generation family tree layout.

Given a root person, places their parents above, the root with their siblings
and spouses in the middle row, and their children below, then emits the
connector lines a renderer needs. Everything is computed in a logical space
centered on the root and translated into non-negative pixel space at the end.
"""

from dataclasses import dataclass, field, replace
import logging
import math
from typing import Iterable

from config import LayoutConfig
from models import LayoutNode, LineKind, LineSegment, Person, PersonId, Role, TreeLayout
from relationships import ExplicitResolver, RelationshipResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Extent of the placed boxes; starts at the logical origin."""

    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0

    def include(self, x: float, y: float, config: LayoutConfig) -> "Bounds":
        half_w = config.node_width / 2
        half_h = config.node_height / 2
        return Bounds(
            min_x=min(self.min_x, x - half_w),
            max_x=max(self.max_x, x + half_w),
            min_y=min(self.min_y, y - half_h),
            max_y=max(self.max_y, y + half_h),
        )


@dataclass(frozen=True)
class _Line:
    # *_on_node: the endpoint is a box center and gets trimmed to the box edge
    # trim_vertical: trim through the top/bottom edges whatever the slope
    x1: float
    y1: float
    x2: float
    y2: float
    kind: LineKind
    key: str
    start_on_node: bool = True
    end_on_node: bool = True
    trim_vertical: bool = False


@dataclass(frozen=True)
class _Draft:
    """Layout under construction. Every step returns a new draft."""

    config: LayoutConfig
    nodes: tuple[LayoutNode, ...] = ()
    lines: tuple[_Line, ...] = ()
    bounds: Bounds = field(default_factory=Bounds)

    def position(self, person_id: PersonId) -> tuple[float, float]:
        for n in self.nodes:
            if n.id == person_id:
                return n.x, n.y
        raise KeyError(person_id)

    def place(self, person: Person, x: float, y: float, role: Role) -> "_Draft":
        return replace(
            self,
            nodes=self.nodes + (LayoutNode(person=person, x=x, y=y, role=role),),
            bounds=self.bounds.include(x, y, self.config),
        )

    def connect(self, *lines: _Line) -> "_Draft":
        return replace(self, lines=self.lines + lines)


def _unique(people: Iterable[Person | None], exclude: Iterable[PersonId] = ()) -> list[Person]:
    """Drop missing entries, ids in `exclude` and repeats, keeping first-seen order."""
    seen = set(exclude)
    out = []
    for p in people:
        if p is None or p.id in seen:
            continue
        seen.add(p.id)
        out.append(p)
    return out


def _row_xs(center_x: float, count: int, config: LayoutConfig) -> list[float]:
    first = center_x - config.row_width(count) / 2 + config.node_width / 2
    return [first + i * config.slot_width for i in range(count)]


def sibling_row(
    root: Person, parents: list[Person], resolver: RelationshipResolver
) -> list[Person]:
    """
    The root and their siblings, in the order the parents' children lookups
    return them.

    Siblings reachable through both parents appear once. The root keeps its
    own position when a lookup returns it, otherwise it goes last.
    """
    candidates = [child for parent in parents for child in resolver.children_of(parent.id)]
    row = []
    seen = {p.id for p in parents}
    for child in candidates:
        if child is None or child.id in seen:
            continue
        seen.add(child.id)
        row.append(root if child.id == root.id else child)
    if root.id not in seen:
        row.append(root)
    return row


def _place_parents(draft: _Draft, parents: list[Person]) -> _Draft:
    config = draft.config
    y = -config.generation_step
    n = len(parents)
    prev: tuple[Person, float] | None = None
    for i, parent in enumerate(parents):
        x = (i - (n - 1) / 2) * config.slot_width
        draft = draft.place(parent, x, y, Role.PARENT)
        if prev is not None:
            prev_parent, prev_x = prev
            draft = draft.connect(
                _Line(prev_x, y, x, y, LineKind.SPOUSE, f"s-{prev_parent.id}-{parent.id}")
            )
        prev = (parent, x)
    return draft


def _place_row(draft: _Draft, root: Person, row: list[Person], parents: list[Person]) -> _Draft:
    config = draft.config
    y = 0.0
    xs = _row_xs(0.0, len(row), config)
    for person, x in zip(row, xs):
        role = Role.ROOT if person.id == root.id else Role.SIBLING
        draft = draft.place(person, x, y, role)

    if not parents:
        return draft

    root_x, _ = draft.position(root.id)
    parent_y = -config.generation_step
    parent_xs = [draft.position(p.id)[0] for p in parents]
    for parent, px in zip(parents, parent_xs):
        draft = draft.connect(
            _Line(
                px,
                parent_y,
                root_x,
                y,
                LineKind.PARENT_CHILD,
                f"p-{parent.id}-{root.id}",
                trim_vertical=True,
            )
        )

    # parents' midpoint -> sibling bus -> one stub per row member
    mid_x = sum(parent_xs) / len(parent_xs)
    bus_y = y - config.generation_step / 2
    draft = draft.connect(
        _Line(
            mid_x,
            parent_y,
            mid_x,
            bus_y,
            LineKind.SIBLING_BRANCH,
            f"sib-trunk-{root.id}",
            start_on_node=mid_x in parent_xs,
            end_on_node=False,
        )
    )
    if len(row) > 1:
        draft = draft.connect(
            _Line(
                xs[0],
                bus_y,
                xs[-1],
                bus_y,
                LineKind.SIBLING_BRANCH,
                f"sib-bus-{root.id}",
                start_on_node=False,
                end_on_node=False,
            )
        )
    for person, x in zip(row, xs):
        draft = draft.connect(
            _Line(x, bus_y, x, y, LineKind.SIBLING_BRANCH, f"sib-{person.id}", start_on_node=False)
        )
    return draft


def _place_spouses(draft: _Draft, root: Person, spouses: list[Person]) -> _Draft:
    config = draft.config
    root_x, y = draft.position(root.id)
    prev_id, prev_x = root.id, root_x
    for k, spouse in enumerate(spouses):
        x = root_x + (k + 1) * config.spouse_offset
        draft = draft.place(spouse, x, y, Role.SPOUSE)
        draft = draft.connect(_Line(prev_x, y, x, y, LineKind.SPOUSE, f"s-{prev_id}-{spouse.id}"))
        prev_id, prev_x = spouse.id, x
    return draft


def _place_children(draft: _Draft, root: Person, children: list[Person]) -> _Draft:
    if not children:
        return draft
    config = draft.config
    root_x, root_y = draft.position(root.id)
    y = root_y + config.generation_step
    xs = _row_xs(root_x, len(children), config)
    for child, x in zip(children, xs):
        draft = draft.place(child, x, y, Role.CHILD)

    if len(children) == 1:
        return draft.connect(
            _Line(root_x, root_y, xs[0], y, LineKind.PARENT_CHILD, f"c-{children[0].id}-{root.id}")
        )

    bus_y = root_y + config.generation_step / 2
    draft = draft.connect(
        _Line(
            root_x,
            root_y,
            root_x,
            bus_y,
            LineKind.PARENT_CHILD,
            f"rc-trunk-{root.id}",
            end_on_node=False,
        ),
        _Line(
            xs[0],
            bus_y,
            xs[-1],
            bus_y,
            LineKind.PARENT_CHILD,
            f"rc-bus-{root.id}",
            start_on_node=False,
            end_on_node=False,
        ),
    )
    for child, x in zip(children, xs):
        draft = draft.connect(
            _Line(x, bus_y, x, y, LineKind.PARENT_CHILD, f"c-{child.id}-{root.id}", start_on_node=False)
        )
    return draft


def trim_to_edges(line: _Line, config: LayoutConfig) -> _Line:
    """
    Pull endpoints that sit on box centers back to the box boundary.

    Vertical-dominant lines (and lines marked trim_vertical) move by half the
    box height, horizontal-dominant ones by half the box width, always toward
    the other endpoint.
    """
    dx = line.x2 - line.x1
    dy = line.y2 - line.y1
    if dx == 0 and dy == 0:
        return line
    x1, y1, x2, y2 = line.x1, line.y1, line.x2, line.y2
    if line.trim_vertical or abs(dy) >= abs(dx):
        step = math.copysign(config.node_height / 2, dy)
        if line.start_on_node:
            y1 += step
        if line.end_on_node:
            y2 -= step
    else:
        step = math.copysign(config.node_width / 2, dx)
        if line.start_on_node:
            x1 += step
        if line.end_on_node:
            x2 -= step
    return replace(line, x1=x1, y1=y1, x2=x2, y2=y2)


def _finalize(draft: _Draft) -> TreeLayout:
    config = draft.config
    b = draft.bounds
    offset_x = -b.min_x + config.node_width
    offset_y = -b.min_y + config.node_height

    nodes = tuple(replace(n, x=n.x + offset_x, y=n.y + offset_y) for n in draft.nodes)
    lines = []
    for line in draft.lines:
        t = trim_to_edges(line, config)
        lines.append(
            LineSegment(
                x1=t.x1 + offset_x,
                y1=t.y1 + offset_y,
                x2=t.x2 + offset_x,
                y2=t.y2 + offset_y,
                kind=t.kind,
                key=t.key,
            )
        )
    return TreeLayout(
        nodes=nodes,
        lines=tuple(lines),
        width=b.max_x - b.min_x + 2 * config.node_width,
        height=b.max_y - b.min_y + 2 * config.node_height,
    )


def compute_layout(
    root_id: PersonId | None,
    roster: Iterable[Person],
    resolver: RelationshipResolver | None = None,
    config: LayoutConfig | None = None,
) -> TreeLayout:
    """
    Lay out the family tree around `root_id`.

    Args:
        root_id: The person to center the tree on.
        roster: Everybody under consideration.
        resolver: How relatives are found; defaults to the explicit
            father/mother/spouse fields of `roster`.
        config: Box sizes and spacing; defaults to LayoutConfig().

    Returns:
        A TreeLayout whose coordinates are all >= 0. It is empty when
        `root_id` is None or cannot be resolved.
    """
    roster = list(roster)
    config = config or LayoutConfig()
    if resolver is None:
        resolver = ExplicitResolver(roster)

    root = resolver.person(root_id) if root_id is not None else None
    if root is None:
        if root_id is not None:
            logger.warning("Root person not found: %s", root_id)
        return TreeLayout()

    parents = _unique(resolver.parents_of(root.id), exclude=[root.id])
    row = sibling_row(root, parents, resolver)
    taken = [root.id] + [p.id for p in parents] + [p.id for p in row]
    spouses = _unique(resolver.spouses_of(root.id), exclude=taken)
    if spouses and len(row) > 1:
        # spouses extend the row to the right of the root
        row = [p for p in row if p.id != root.id] + [root]

    draft = _Draft(config=config)
    draft = _place_parents(draft, parents)
    draft = _place_row(draft, root, row, parents)
    draft = _place_spouses(draft, root, spouses)

    taken += [p.id for p in spouses]
    children = _unique(resolver.children_of(root.id), exclude=taken)
    draft = _place_children(draft, root, children)

    logger.debug(
        "Layout for %s: %d parents, %d siblings, %d spouses, %d children",
        root.id,
        len(parents),
        len(row) - 1,
        len(spouses),
        len(children),
    )
    return _finalize(draft)
