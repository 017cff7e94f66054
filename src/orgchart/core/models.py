"""
Core domain models for org chart representation.

This module contains the three shapes the same hierarchy takes:
flat records (import/export), the ownership tree (editing) and the
display tree (rendering). These models are GUI-agnostic and should not
import any UI frameworks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


CSV_COLUMNS = ("id", "name", "title", "department", "parentId", "imageUrl")
"""Recognized column names, in export order."""

DEFAULT_NODE_NAME = "Unnamed"


@dataclass
class FlatRecord:
    """A single row of organizational data."""

    id: str
    """Record identifier, unique within a record set."""

    name: str = ""
    """Display name of the person or unit."""

    title: str = ""
    """Job title (optional)."""

    department: str = ""
    """Department name (optional)."""

    parent_id: Optional[str] = None
    """Id of the parent record, or None for no parent."""

    image_url: str = ""
    """Profile image URL (optional)."""

    @classmethod
    def from_row(cls, row: dict) -> "FlatRecord":
        """
        Create a record from a mapping keyed by column name.

        Missing optional fields default to an empty string. Both an absent
        and an empty ``parentId`` become None.

        Args:
            row: Mapping of column name to cell value.

        Returns:
            A new FlatRecord.
        """
        parent_id = row.get("parentId")
        return cls(
            id=row.get("id") or "",
            name=row.get("name") or "",
            title=row.get("title") or "",
            department=row.get("department") or "",
            parent_id=parent_id if parent_id else None,
            image_url=row.get("imageUrl") or "",
        )

    def to_row(self) -> dict[str, str]:
        """
        Convert the record to a mapping keyed by column name.

        Returns:
            Dictionary with every column in CSV_COLUMNS; roots get an
            empty ``parentId``.
        """
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "department": self.department,
            "parentId": self.parent_id or "",
            "imageUrl": self.image_url,
        }


@dataclass(eq=False)
class OrgNode:
    """
    A node of the ownership tree.

    A node owns its children: deleting a node deletes its subtree. Nodes
    compare by identity, since two people can share every field but the id
    is what the forest indexes on.
    """

    id: str
    name: str = DEFAULT_NODE_NAME
    title: str = ""
    department: str = ""
    parent_id: Optional[str] = None
    image_url: str = ""
    collapsed: bool = False
    """UI flag hiding the children from the display tree (not inherited)."""

    children: list["OrgNode"] = field(default_factory=list)
    """Direct children in insertion order."""

    @classmethod
    def from_record(cls, record: FlatRecord) -> "OrgNode":
        """Create a childless, expanded node from a flat record."""
        return cls(
            id=record.id,
            name=record.name or DEFAULT_NODE_NAME,
            title=record.title or "",
            department=record.department or "",
            parent_id=record.parent_id,
            image_url=record.image_url or "",
        )

    def to_record(self, parent_id: Optional[str] = None) -> FlatRecord:
        """
        Convert the node back to a flat record.

        Args:
            parent_id: Parent id as seen during traversal.

        Returns:
            A FlatRecord carrying the node's scalar fields.
        """
        return FlatRecord(
            id=self.id,
            name=self.name,
            title=self.title,
            department=self.department,
            parent_id=parent_id,
            image_url=self.image_url,
        )


@dataclass
class DisplayNode:
    """
    A node of the display tree handed to the renderer.

    ``children`` is None (absent) when the source node is collapsed or has no
    children; a collapsed node keeps a nonzero ``childCount`` attribute so the
    two cases can be told apart.
    """

    name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: Optional[list["DisplayNode"]] = None

    def to_dict(self) -> dict:
        """
        Convert to the plain mapping consumed by renderers.

        Returns:
            Dictionary with ``name`` and ``attributes``; ``children`` is only
            present when the node shows its children.
        """
        data: dict = {"name": self.name, "attributes": dict(self.attributes)}
        stack = [(self, data)]
        while stack:
            node, node_data = stack.pop()
            if node.children is None:
                continue
            node_data["children"] = []
            for child in node.children:
                child_data = {"name": child.name, "attributes": dict(child.attributes)}
                node_data["children"].append(child_data)
                stack.append((child, child_data))
        return data


class IntentKind(str, Enum):
    """What the renderer wants done with a clicked node."""

    EDIT = "edit"
    TOGGLE_COLLAPSE = "toggleCollapse"


@dataclass(frozen=True)
class NodeIntent:
    """An explicit user intent emitted by the renderer for one node."""

    kind: IntentKind
    node_id: str

    @classmethod
    def from_dict(cls, data: dict) -> "NodeIntent":
        """
        Create an intent from a renderer payload like
        ``{"kind": "toggleCollapse", "nodeId": "a1"}``.

        Raises:
            ValueError: If the kind is unknown.
        """
        return cls(kind=IntentKind(data["kind"]), node_id=str(data["nodeId"]))
