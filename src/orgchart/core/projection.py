"""
Projection of the ownership tree into the renderer's display tree.

The display tree is derived from scratch on every change; nothing here
mutates the OrgNode forest.
"""

from typing import Callable, Container, Optional, Sequence

from .ids import generate_unique_id
from .models import DEFAULT_NODE_NAME, DisplayNode, OrgNode


SYNTHETIC_ROOT_NAME = "Organization"


def project_node(node: OrgNode) -> DisplayNode:
    """
    Project a single node and its visible descendants.

    Empty title and department are omitted, as is an empty image URL.
    ``children`` is only set when the node is expanded and has children.
    """
    display = _display_for(node)
    stack = [(node, display)]
    while stack:
        current, current_display = stack.pop()
        if not current.children or current.collapsed:
            continue
        current_display.children = []
        for child in current.children:
            child_display = _display_for(child)
            current_display.children.append(child_display)
            stack.append((child, child_display))
    return display


def _display_for(node: OrgNode) -> DisplayNode:
    """Project one node's name and attributes, without children."""
    attributes = {"id": node.id}
    if node.title and node.title.strip():
        attributes["title"] = node.title
    if node.department and node.department.strip():
        attributes["department"] = node.department
    if node.image_url:
        attributes["imageUrl"] = node.image_url
    attributes["collapsed"] = "true" if node.collapsed else "false"
    attributes["childCount"] = str(len(node.children))
    return DisplayNode(name=node.name or DEFAULT_NODE_NAME, attributes=attributes)


def project_forest(roots: Sequence[OrgNode]) -> list[DisplayNode]:
    """Project every root without wrapping them."""
    return [project_node(root) for root in roots]


def project(
    roots: Sequence[OrgNode],
    root_name: str = SYNTHETIC_ROOT_NAME,
    id_factory: Optional[Callable[[Container[str]], str]] = None,
) -> Optional[DisplayNode]:
    """
    Project a forest into a single display tree.

    A forest with several roots is wrapped in one synthetic, expanded root
    so the renderer always receives one tree. A single root is returned as
    is, and an empty forest gives None.

    Args:
        roots: Root nodes of the ownership forest.
        root_name: Name of the synthetic wrapper node.
        id_factory: Callable returning an id not contained in the given ids.
            Defaults to generate_unique_id.

    Returns:
        The display tree, or None for an empty forest.
    """
    if not roots:
        return None

    projected = project_forest(roots)
    if len(projected) == 1:
        return projected[0]

    if id_factory is None:
        id_factory = generate_unique_id
    taken = _collect_ids(roots)

    return DisplayNode(
        name=root_name,
        attributes={
            "id": id_factory(taken),
            "collapsed": "false",
            "childCount": str(len(projected)),
        },
        children=projected,
    )


def _collect_ids(roots: Sequence[OrgNode]) -> set[str]:
    ids = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        ids.add(node.id)
        stack.extend(node.children)
    return ids
