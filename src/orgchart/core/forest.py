"""
Mutable ownership forest with an id index.

The Forest keeps the ordered root list of OrgNode trees together with an
arena index (id -> node) and a parent index (id -> parent id). Lookups are
O(1) and ancestry checks walk the parent index, so no operation needs a
full recursive search of the tree.
"""

from typing import Iterable, Iterator, Optional, Union

from .errors import CycleError, DuplicateIdError, NotFoundError
from .models import FlatRecord, OrgNode
from ..infrastructure.logging_config import get_logger


logger = get_logger(__name__)

# Scalar fields replaced by update(); children and collapse state are kept
_SCALAR_FIELDS = ("name", "title", "department", "image_url")


class Forest:
    """
    An ordered collection of OrgNode trees supporting in-place edits.

    Every mutation validates first and mutates second, so a failed call
    leaves the forest untouched.
    """

    def __init__(self, roots: Optional[Iterable[OrgNode]] = None):
        """
        Initialize the forest, indexing the given trees.

        Args:
            roots: Root nodes with attached subtrees, e.g. from build_forest().

        Raises:
            DuplicateIdError: If an id appears twice across the trees.
        """
        self._roots: list[OrgNode] = []
        self._nodes: dict[str, OrgNode] = {}
        self._parents: dict[str, Optional[str]] = {}

        for root in roots or []:
            self._index_subtree(root, None)
            self._roots.append(root)

    @property
    def roots(self) -> list[OrgNode]:
        """The root nodes in order. Treat as read-only."""
        return self._roots

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[OrgNode]:
        return self.nodes()

    def ids(self) -> set[str]:
        """Get every node id in the forest."""
        return set(self._nodes)

    def nodes(self) -> Iterator[OrgNode]:
        """Iterate over all nodes depth-first, parents before children."""
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get(self, node_id: str) -> OrgNode:
        """
        Get a node by id.

        Raises:
            NotFoundError: If no node has this id.
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NotFoundError(node_id) from None

    def parent_of(self, node_id: str) -> Optional[OrgNode]:
        """
        Get the parent node of a node, or None for a root.

        Raises:
            NotFoundError: If no node has this id.
        """
        self.get(node_id)
        parent_id = self._parents[node_id]
        return self._nodes[parent_id] if parent_id is not None else None

    def ancestor_ids(self, node_id: str) -> list[str]:
        """Get the ids from the node's parent up to its root."""
        self.get(node_id)
        ancestors = []
        current = self._parents[node_id]
        while current is not None:
            ancestors.append(current)
            current = self._parents[current]
        return ancestors

    def is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """
        Check whether ``candidate_id`` sits anywhere below ``ancestor_id``.

        A node is not its own descendant.
        """
        return ancestor_id in self.ancestor_ids(candidate_id)

    def descendant_ids(self, node_id: str) -> list[str]:
        """Get the ids of every node below the given one, in pre-order."""
        node = self.get(node_id)
        result = []
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            result.append(current.id)
            stack.extend(reversed(current.children))
        return result

    def possible_parents(self, node_id: Optional[str] = None) -> list[OrgNode]:
        """
        Get the nodes that may become the parent of a node.

        Excludes the node itself and all of its current descendants, so any
        choice keeps the forest acyclic.

        Args:
            node_id: Node being edited, or None for a node not yet inserted.

        Returns:
            Candidate parent nodes in pre-order.
        """
        if node_id is None:
            return list(self.nodes())

        excluded = set(self.descendant_ids(node_id))
        excluded.add(node_id)
        return [node for node in self.nodes() if node.id not in excluded]

    def insert(self, node: OrgNode, parent_id: Optional[str] = None) -> OrgNode:
        """
        Insert a node (and any children it carries).

        Args:
            node: Node to insert.
            parent_id: Id of the new parent, or None to append as a root.

        Returns:
            The inserted node.

        Raises:
            NotFoundError: If ``parent_id`` is given but not in the forest.
            DuplicateIdError: If the node or one of its descendants reuses an id.
        """
        parent = self.get(parent_id) if parent_id is not None else None

        pending = [node]
        seen: set[str] = set()
        while pending:
            current = pending.pop()
            if current.id in self._nodes or current.id in seen:
                raise DuplicateIdError(current.id)
            seen.add(current.id)
            pending.extend(current.children)

        self._index_subtree(node, parent_id)
        if parent is None:
            self._roots.append(node)
        else:
            parent.children.append(node)

        logger.debug(f"Inserted node {node.id} under {parent_id or 'root'}")
        return node

    def update(self, node: Union[OrgNode, FlatRecord]) -> OrgNode:
        """
        Replace the scalar fields of the node with the same id.

        Children are never touched. When ``parent_id`` differs from the
        node's current parent, the node is moved to the new parent.

        Args:
            node: Node or record carrying the new values.

        Returns:
            The updated node in the forest.

        Raises:
            NotFoundError: If the node or its new parent does not exist.
            CycleError: If the new parent is the node or one of its descendants.
        """
        existing = self.get(node.id)
        new_parent_id = node.parent_id or None
        moving = new_parent_id != self._parents[node.id]
        if moving:
            self._check_move(node.id, new_parent_id)

        for field_name in _SCALAR_FIELDS:
            setattr(existing, field_name, getattr(node, field_name))

        if moving:
            self._relink(existing, new_parent_id)

        logger.debug(f"Updated node {node.id}")
        return existing

    def move(self, node_id: str, new_parent_id: Optional[str]) -> OrgNode:
        """
        Reparent a node, carrying its subtree along.

        Args:
            node_id: Node to move.
            new_parent_id: New parent id, or None to make it a root.

        Returns:
            The moved node.

        Raises:
            NotFoundError: If either id does not exist.
            CycleError: If the new parent is the node or one of its descendants.
        """
        node = self.get(node_id)
        self._check_move(node_id, new_parent_id)
        if new_parent_id != self._parents[node_id]:
            self._relink(node, new_parent_id)
        return node

    def delete(self, node_id: str) -> OrgNode:
        """
        Remove a node and its entire subtree.

        Returns:
            The removed node, still holding its children.

        Raises:
            NotFoundError: If no node has this id.
        """
        node = self.get(node_id)
        self._detach(node)

        removed = [node_id, *self.descendant_ids(node_id)]
        for removed_id in removed:
            del self._nodes[removed_id]
            del self._parents[removed_id]

        logger.debug(f"Deleted node {node_id} and {len(removed) - 1} descendant(s)")
        return node

    def toggle_collapse(self, node_id: str) -> bool:
        """
        Flip the collapsed flag of one node. Children keep their own flags.

        Returns:
            The new collapsed state.

        Raises:
            NotFoundError: If no node has this id.
        """
        node = self.get(node_id)
        node.collapsed = not node.collapsed
        return node.collapsed

    def _check_move(self, node_id: str, new_parent_id: Optional[str]) -> None:
        """Validate a reparenting before anything is changed."""
        if new_parent_id is None:
            return
        self.get(new_parent_id)
        if new_parent_id == node_id or self.is_descendant(new_parent_id, node_id):
            raise CycleError(node_id, new_parent_id)

    def _relink(self, node: OrgNode, new_parent_id: Optional[str]) -> None:
        """Move an already validated node to the end of its new sibling list."""
        self._detach(node)
        if new_parent_id is None:
            self._roots.append(node)
        else:
            self._nodes[new_parent_id].children.append(node)
        self._parents[node.id] = new_parent_id
        node.parent_id = new_parent_id
        logger.debug(f"Moved node {node.id} under {new_parent_id or 'root'}")

    def _detach(self, node: OrgNode) -> None:
        """Remove a node from its parent's children or from the root list."""
        parent_id = self._parents[node.id]
        siblings = self._roots if parent_id is None else self._nodes[parent_id].children
        for index, sibling in enumerate(siblings):
            if sibling is node:
                del siblings[index]
                break

    def _index_subtree(self, node: OrgNode, parent_id: Optional[str]) -> None:
        """Add a subtree to the id and parent indexes."""
        pending = [(node, parent_id)]
        while pending:
            current, current_parent = pending.pop()
            if current.id in self._nodes:
                raise DuplicateIdError(current.id)
            self._nodes[current.id] = current
            self._parents[current.id] = current_parent
            current.parent_id = current_parent
            pending.extend((child, current.id) for child in current.children)
