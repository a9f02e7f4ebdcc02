"""Rendering computed tree layouts."""

import json
import logging
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch
import pydot

from config import LayoutConfig
from models import LayoutNode, LineKind, TreeLayout

logger = logging.getLogger(__name__)

POINTS_PER_PIXEL = 0.75  # Graphviz positions are in points at 96 dpi

LINE_STYLES = {
    LineKind.SPOUSE: {"color": "#ec4899", "linewidth": 3, "linestyle": (0, (5, 5))},
    LineKind.PARENT_CHILD: {"color": "#6b7280", "linewidth": 2, "linestyle": "solid"},
    LineKind.SIBLING_BRANCH: {"color": "#6b7280", "linewidth": 2, "linestyle": "solid"},
}


def fill_color(node: LayoutNode) -> str:
    # Color by gender
    if node.person.gender == "male":
        return "lightblue"
    if node.person.gender == "female":
        return "lightpink"
    return "lightgray"


def border_color(node: LayoutNode) -> str:
    if node.is_root:
        return "#fbbf24"
    if node.is_spouse:
        return "#f9a8d4"
    if node.is_parent:
        return "#93c5fd"
    if node.is_child:
        return "#86efac"
    return "#d1d5db"


def node_label(node: LayoutNode) -> str:
    """Name, free-text relationship and birth year, one per line."""
    lines = [node.name]
    if node.person.relationship:
        lines.append(node.person.relationship)
    if node.person.birth_date:
        lines.append(str(node.person.birth_date)[:4])
    return "\n".join(lines)


def plot_layout(
    layout: TreeLayout, config: LayoutConfig | None = None, output_path: Path | None = None
):
    """
    Draw the layout with matplotlib: boxes for people, lines for connectors.

    Args:
        layout: A computed TreeLayout (pixel coordinates, y pointing down).
        config: The config the layout was computed with (box sizes).
        output_path: Where to save the figure (format from the suffix). If
            None, the figure is returned without saving.

    Returns:
        The matplotlib Figure.
    """
    config = config or LayoutConfig()
    dpi = 100
    width = max(layout.width, config.node_width)
    height = max(layout.height, config.node_height)
    fig, ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # Screen coordinates: y grows downward
    ax.set_aspect("equal")
    ax.axis("off")

    for line in layout.lines:
        ax.plot([line.x1, line.x2], [line.y1, line.y2], zorder=1, **LINE_STYLES[line.kind])

    for node in layout.nodes:
        box = FancyBboxPatch(
            (node.x - config.node_width / 2, node.y - config.node_height / 2),
            config.node_width,
            config.node_height,
            boxstyle="round,pad=0,rounding_size=8",
            facecolor=fill_color(node),
            edgecolor=border_color(node),
            linewidth=3 if node.is_root else 1.5,
            zorder=2,
        )
        ax.add_patch(box)
        ax.text(
            node.x,
            node.y,
            node_label(node),
            ha="center",
            va="center",
            fontsize=8,
            fontweight="bold" if node.is_root else "normal",
            zorder=3,
        )

    if output_path:
        fig.savefig(output_path, bbox_inches="tight")
        plt.close(fig)
        print(f"Tree saved to {output_path}")
    return fig


def layout_to_dot(layout: TreeLayout, config: LayoutConfig | None = None) -> pydot.Dot:
    """
    Export the layout as a Graphviz graph with every position pinned.

    Render with `neato -n` so Graphviz keeps the computed coordinates. Lines
    become edges between invisible point nodes at their endpoints.
    """
    config = config or LayoutConfig()
    P = pydot.Dot("family_tree", graph_type="graph")
    P.set("splines", "line")
    P.set("bb", f"0,0,{layout.width * POINTS_PER_PIXEL},{layout.height * POINTS_PER_PIXEL}")

    def pos(x: float, y: float) -> str:
        # Graphviz y axis points up
        return f"{x * POINTS_PER_PIXEL:.2f},{(layout.height - y) * POINTS_PER_PIXEL:.2f}!"

    for node in layout.nodes:
        P.add_node(
            pydot.Node(
                f"p{node.id}",
                label=node_label(node),
                shape="box",
                style="rounded,filled",
                fillcolor=fill_color(node),
                color=border_color(node),
                penwidth="3" if node.is_root else "1",
                width=f"{config.node_width / 96:.3f}",
                height=f"{config.node_height / 96:.3f}",
                fixedsize="true",
                fontsize="10",
                pos=pos(node.x, node.y),
            )
        )

    for i, line in enumerate(layout.lines):
        a, b = f"l{i}a", f"l{i}b"
        for name, x, y in ((a, line.x1, line.y1), (b, line.x2, line.y2)):
            P.add_node(pydot.Node(name, shape="point", width="0", style="invis", pos=pos(x, y)))
        style = LINE_STYLES[line.kind]
        P.add_edge(
            pydot.Edge(
                a,
                b,
                color=style["color"],
                penwidth=str(style["linewidth"]),
                style="dashed" if line.kind is LineKind.SPOUSE else "solid",
                tooltip=line.key,
            )
        )
    return P


def write_layout(layout: TreeLayout, output_path: Path, config: LayoutConfig | None = None):
    """Write the layout as .json, .dot, or an image (.png, .svg, .pdf)."""
    output_path = Path(output_path)
    ext = output_path.suffix.lower().lstrip(".")

    if ext == "json":
        output_path.write_text(json.dumps(layout.to_dict(), indent=2, default=str), encoding="utf-8")
        print(f"Layout saved to {output_path}")
    elif ext in ("dot", "gv"):
        layout_to_dot(layout, config).write(str(output_path), format="raw")
        print(f"Graphviz file saved to {output_path}")
    else:
        if ext not in ("png", "svg", "pdf"):
            logger.warning("Unknown output format %r, writing PNG", ext)
            output_path = output_path.with_suffix(".png")
        plot_layout(layout, config, output_path)
    return output_path
