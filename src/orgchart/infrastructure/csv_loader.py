"""
Delimited file loading and writing utilities.

This module parses org chart records from CSV/TSV text and writes them
back out. Parsing is all-or-nothing: any malformed row aborts the whole
import with a ParseError so callers can keep their previous state.
"""

import csv
import io
from pathlib import Path
from typing import Iterable, Optional

from ..core.errors import ParseError
from ..core.models import CSV_COLUMNS, FlatRecord
from .logging_config import get_logger
from .paths import default_delimiter_for

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("id", "name")

# DictReader key collecting cells beyond the header width
_EXTRA_CELLS = "__extra__"


def parse_records(text: str, delimiter: str = ",") -> list[FlatRecord]:
    """
    Parse delimited text with a header row into flat records.

    Columns are matched by exact header name; unknown columns are ignored.
    Keys and values are stripped of surrounding whitespace and blank lines
    are skipped.

    Args:
        text: Raw delimited text, header row first.
        delimiter: Column delimiter.

    Returns:
        One FlatRecord per data row, in file order.

    Raises:
        ParseError: If the text has no header, lacks a required column,
            contains a row wider than the header or cannot be tokenized.
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise ParseError("Input is empty, expected a header row")

    reader = csv.DictReader(
        io.StringIO(text),
        delimiter=delimiter,
        restkey=_EXTRA_CELLS,
        strict=True,
    )

    records = []
    try:
        if not reader.fieldnames:
            raise ParseError("Missing header row")
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise ParseError(f"Missing required column(s): {', '.join(missing)}", line=1)

        for row in reader:
            if _EXTRA_CELLS in row:
                raise ParseError(
                    f"Row has {len(reader.fieldnames) + len(row[_EXTRA_CELLS])} fields, "
                    f"header has {len(reader.fieldnames)}",
                    line=reader.line_num,
                )
            cleaned_row = {k: (v.strip() if v is not None else "") for k, v in row.items()}
            records.append(FlatRecord.from_row(cleaned_row))
    except csv.Error as e:
        raise ParseError(f"Malformed delimited text: {e}", line=reader.line_num) from e

    logger.debug(f"Parsed {len(records)} record(s)")
    return records


def load_csv_file(file_path: Path, delimiter: Optional[str] = None) -> list[FlatRecord]:
    """
    Load and parse a CSV or TSV file.

    Args:
        file_path: Path to the file.
        delimiter: Column delimiter. If None, tab is used for ``.tsv``
            files and comma for anything else.

    Returns:
        Parsed records.

    Raises:
        ParseError: If the file cannot be read or parsed.
    """
    file_path = Path(file_path)
    if delimiter is None:
        delimiter = default_delimiter_for(file_path)

    try:
        with open(file_path, 'r', encoding='utf-8-sig', newline='') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not read {file_path}: {e}") from e

    records = parse_records(text, delimiter=delimiter)
    logger.info(f"Loaded {len(records)} record(s) from {file_path.name}")
    return records


def records_to_csv(records: Iterable[FlatRecord], delimiter: str = ",") -> str:
    """
    Render records as delimited text.

    The header always lists every column in CSV_COLUMNS order; roots get an
    empty ``parentId`` cell.

    Args:
        records: Records to write, already in export order.
        delimiter: Column delimiter.

    Returns:
        The delimited text including the header row.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, delimiter=delimiter, lineterminator="\n")
    writer.writeheader()
    for record in records:
        writer.writerow(record.to_row())
    return buffer.getvalue()


def write_csv_file(records: Iterable[FlatRecord], file_path: Path, delimiter: Optional[str] = None) -> Path:
    """
    Write records to a CSV or TSV file.

    Args:
        records: Records to write.
        file_path: Destination path. Parent directories are created.
        delimiter: Column delimiter. If None, chosen from the extension.

    Returns:
        The path written to.
    """
    file_path = Path(file_path)
    if delimiter is None:
        delimiter = default_delimiter_for(file_path)

    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8', newline='') as f:
        f.write(records_to_csv(records, delimiter=delimiter))

    logger.info(f"Exported records to {file_path}")
    return file_path
