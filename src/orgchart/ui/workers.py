"""
Worker threads for background operations.

This module provides a worker thread that reads and parses an org chart
file without blocking the UI thread. The parsed records are delivered in a
single signal so the editor can swap its state in one step.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QThread, Signal

from orgchart.core.editor import OrgChartEditor
from orgchart.infrastructure.csv_loader import load_csv_file
from orgchart.infrastructure.logging_config import get_logger


logger = get_logger(__name__)


class ImportWorkerThread(QThread):
    """
    Worker thread for loading an org chart file without blocking the UI.

    On success ``import_complete`` carries the parsed FlatRecord list;
    on failure ``import_error`` carries the exception and nothing is
    applied anywhere.
    """

    # Signal emitted when parsing is complete (list of FlatRecord)
    import_complete = Signal(object)

    # Signal emitted when an error occurs (exception)
    import_error = Signal(Exception)

    def __init__(self, file_path: Path, delimiter: Optional[str] = None, parent=None):
        """
        Initialize the import thread.

        Args:
            file_path: CSV/TSV file to read.
            delimiter: Column delimiter, or None to pick from the extension.
            parent: Parent QObject.
        """
        super().__init__(parent)
        self._file_path = Path(file_path)
        self._delimiter = delimiter

    def run(self):
        """Read and parse the file."""
        try:
            records = load_csv_file(self._file_path, delimiter=self._delimiter)
            self.import_complete.emit(records)
        except Exception as e:
            logger.error(f"Error importing {self._file_path} in thread: {e}", exc_info=True)
            self.import_error.emit(e)


def start_import(editor: OrgChartEditor, file_path: Path, parent=None) -> ImportWorkerThread:
    """
    Start a background import that replaces the editor's chart on success.

    The caller connects ``import_error`` to surface failures; the editor's
    current chart is untouched when parsing fails.

    Args:
        editor: Session whose chart is replaced once parsing completes.
        file_path: CSV/TSV file to read.
        parent: Parent QObject for the thread.

    Returns:
        The started worker thread.
    """
    worker = ImportWorkerThread(file_path, parent=parent)
    worker.import_complete.connect(editor.import_records)
    worker.start()
    return worker
