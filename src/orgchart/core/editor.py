"""
Editing session over an org chart.

OrgChartEditor is the single entry point a renderer talks to. It holds the
current Forest, turns user intents (import a file, click a node, submit the
node form, delete, toggle) into state transitions, and hands a freshly
projected display tree to the renderer after every change.
"""

import warnings
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

from .builder import build_forest
from .errors import EmptyResultWarning, ValidationError
from .flatten import flatten
from .forest import Forest
from .ids import generate_unique_id
from .models import DisplayNode, FlatRecord, IntentKind, NodeIntent, OrgNode
from .projection import project
from ..config.settings import AppSettings, get_settings
from ..infrastructure.csv_loader import load_csv_file, parse_records, records_to_csv, write_csv_file
from ..infrastructure.logging_config import get_logger
from ..infrastructure.paths import default_delimiter_for


logger = get_logger(__name__)

# Form field name -> FlatRecord attribute
FORM_FIELDS = {
    "name": "name",
    "title": "title",
    "department": "department",
    "parentId": "parent_id",
    "imageUrl": "image_url",
}


class EditorMode(Enum):
    """What the editor is currently doing."""

    IDLE = "idle"
    EDITING = "editing"
    ADDING = "adding"


@dataclass
class EditForm:
    """State of the open node form."""

    values: FlatRecord
    """Current field values; ``values.id`` is the node being edited or added."""

    is_new: bool
    """True when adding a node, False when editing an existing one."""

    parent_choices: list[tuple[str, str]] = field(default_factory=list)
    """Allowed parents as (id, name) pairs; never the node or its descendants."""

    @property
    def node_id(self) -> str:
        return self.values.id


class OrgChartEditor:
    """
    Holds the forest of one editing session and applies user intents to it.

    Every operation either completes or raises and leaves the forest as it
    was. After each successful change the ``on_change`` callback receives
    the new display tree.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        on_change: Optional[Callable[[Optional[DisplayNode]], None]] = None,
    ):
        """
        Initialize an empty session.

        Args:
            settings: Settings to use. If None, the global settings are used.
            on_change: Optional callback invoked with the display tree after
                every successful change.
        """
        self._settings = settings if settings is not None else get_settings()
        self._on_change = on_change
        self._forest = Forest()
        self._form: Optional[EditForm] = None
        self.notices: list[str] = []
        """Warnings raised by the last import, for the UI to show."""

    @property
    def forest(self) -> Forest:
        return self._forest

    @property
    def form(self) -> Optional[EditForm]:
        return self._form

    @property
    def mode(self) -> EditorMode:
        if self._form is None:
            return EditorMode.IDLE
        return EditorMode.ADDING if self._form.is_new else EditorMode.EDITING

    # Import / export

    def import_records(self, records: Iterable[FlatRecord]) -> Forest:
        """
        Replace the session's forest with one built from records.

        Isolated records are dropped. If nothing is left from a non-empty
        input, an EmptyResultWarning is issued and the chart becomes empty.
        Warnings are also kept in ``notices``.

        Args:
            records: Flat records to build from.

        Returns:
            The new forest.
        """
        records = list(records)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            roots = build_forest(records)
            if records and not roots:
                warnings.warn(
                    "All imported records are isolated (no parent and no children) "
                    "and were left out; the chart is empty",
                    EmptyResultWarning,
                )
            forest = Forest(roots)

        self._forest = forest
        self._form = None
        self.notices = [str(w.message) for w in caught]

        logger.info(f"Imported {len(records)} record(s), {len(forest)} node(s) in chart")
        self._changed()

        # Logged through logging.captureWarnings once setup_logging() has run
        for w in caught:
            warnings.warn(w.message, stacklevel=2)
        return forest

    def import_text(self, text: str, delimiter: Optional[str] = None) -> Forest:
        """
        Parse delimited text and import it.

        Raises:
            ParseError: If the text is malformed. The current forest is kept.
        """
        records = parse_records(text, delimiter=delimiter or self._settings.csv_delimiter)
        return self.import_records(records)

    def import_file(self, file_path: Path, delimiter: Optional[str] = None) -> Forest:
        """
        Load a CSV/TSV file and import it.

        Raises:
            ParseError: If the file is unreadable or malformed. The current
                forest is kept.
        """
        file_path = Path(file_path)
        if delimiter is None:
            delimiter = default_delimiter_for(file_path, fallback=self._settings.csv_delimiter)
        records = load_csv_file(file_path, delimiter=delimiter)
        return self.import_records(records)

    def export_records(self) -> list[FlatRecord]:
        """Get the chart as flat records, parents before children."""
        return flatten(self._forest.roots)

    def export_csv(self, delimiter: Optional[str] = None) -> str:
        """Get the chart as delimited text."""
        return records_to_csv(self.export_records(), delimiter=delimiter or self._settings.csv_delimiter)

    def export_file(self, file_path: Optional[Path] = None, delimiter: Optional[str] = None) -> Path:
        """
        Write the chart to a CSV/TSV file.

        Args:
            file_path: Destination. Defaults to the configured export
                filename in the current directory.
            delimiter: Column delimiter. If None, tab is used for ``.tsv``
                files and the configured delimiter for anything else.

        Returns:
            The path written to.
        """
        if file_path is None:
            file_path = Path(self._settings.export_filename)
        file_path = Path(file_path)
        if delimiter is None:
            delimiter = default_delimiter_for(file_path, fallback=self._settings.csv_delimiter)
        return write_csv_file(self.export_records(), file_path, delimiter=delimiter)

    # Display

    def display_tree(self) -> Optional[DisplayNode]:
        """Project the current forest for the renderer."""
        return project(
            self._forest.roots,
            root_name=self._settings.synthetic_root_name,
            id_factory=partial(generate_unique_id, length=self._settings.id_length),
        )

    # Intents

    def handle_intent(self, intent: NodeIntent) -> Optional[EditForm]:
        """
        Apply a renderer intent.

        Args:
            intent: What the user asked for on which node.

        Returns:
            The opened form for ``edit`` intents, None otherwise.

        Raises:
            NotFoundError: If the node is not in the chart.
        """
        if intent.kind is IntentKind.TOGGLE_COLLAPSE:
            self.toggle_collapse(intent.node_id)
            return None
        return self.open_editor(intent.node_id)

    def toggle_collapse(self, node_id: str) -> bool:
        """Flip the collapsed flag of a node and return the new state."""
        collapsed = self._forest.toggle_collapse(node_id)
        logger.debug(f"Node {node_id} {'collapsed' if collapsed else 'expanded'}")
        self._changed()
        return collapsed

    def open_editor(self, node_id: str) -> EditForm:
        """
        Open the form for an existing node.

        Raises:
            NotFoundError: If the node is not in the chart.
        """
        node = self._forest.get(node_id)
        parent = self._forest.parent_of(node_id)
        self._form = EditForm(
            values=node.to_record(parent.id if parent else None),
            is_new=False,
            parent_choices=self._parent_choices(node_id),
        )
        return self._form

    def begin_add(self) -> EditForm:
        """Open an empty form for a new node with a fresh id."""
        node_id = generate_unique_id(self._forest, length=self._settings.id_length)
        self._form = EditForm(
            values=FlatRecord(id=node_id),
            is_new=True,
            parent_choices=self._parent_choices(None),
        )
        return self._form

    def submit(self, values: Optional[Mapping[str, Optional[str]]] = None) -> OrgNode:
        """
        Apply the open form.

        Args:
            values: Submitted form fields keyed by column name
                (``name``, ``title``, ``department``, ``parentId``,
                ``imageUrl``). Missing keys keep the form's current value;
                an empty ``parentId`` means no parent.

        Returns:
            The inserted or updated node.

        Raises:
            ValidationError: If no form is open or the name is blank.
            NotFoundError: If the chosen parent is not in the chart.
            CycleError: If the chosen parent is the node or a descendant.
        """
        if self._form is None:
            raise ValidationError("No node form is open")

        record = self._apply_values(self._form.values, values or {})
        if not record.name.strip():
            raise ValidationError("Name is required")

        if self._form.is_new:
            node = self._forest.insert(OrgNode.from_record(record), record.parent_id)
            logger.info(f"Added node {node.id} ({node.name})")
        else:
            node = self._forest.update(record)
            logger.info(f"Updated node {node.id} ({node.name})")

        self._form = None
        self._changed()
        return node

    def cancel(self) -> None:
        """Close the form without applying it."""
        self._form = None

    def delete(self, node_id: str) -> OrgNode:
        """
        Delete a node and its subtree, closing any open form.

        Raises:
            NotFoundError: If the node is not in the chart.
        """
        removed = self._forest.delete(node_id)
        self._form = None
        logger.info(f"Deleted node {node_id}")
        self._changed()
        return removed

    def _apply_values(self, current: FlatRecord, values: Mapping[str, Optional[str]]) -> FlatRecord:
        changes = {}
        for key, value in values.items():
            if key not in FORM_FIELDS:
                logger.debug(f"Ignoring unknown form field: {key}")
                continue
            value = (value or "").strip()
            changes[FORM_FIELDS[key]] = value if key != "parentId" else (value or None)
        return replace(current, **changes)

    def _parent_choices(self, node_id: Optional[str]) -> list[tuple[str, str]]:
        return [(node.id, node.name) for node in self._forest.possible_parents(node_id)]

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.display_tree())
