"""Loading of schedule spreadsheets into rows of named cells."""

import logging
from pathlib import Path
from typing import Any, Union
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

LOG = logging.getLogger(__name__)

EXCEL_ENGINES = {".xlsx": "openpyxl", ".xlsm": "openpyxl", ".xls": "xlrd"}
CSV_SUFFIXES = (".csv",)
HEADER_MARKER = "course listing"


class SpreadsheetError(Exception):
    """Raised when a file cannot be read as a schedule spreadsheet."""


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    try:
        if suffix in EXCEL_ENGINES:
            return pd.read_excel(path, header=None, dtype=object, engine=EXCEL_ENGINES[suffix])
        if suffix in CSV_SUFFIXES:
            return pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    except (OSError, ValueError, BadZipFile, InvalidFileException, XLRDError) as e:
        raise SpreadsheetError(
            f"Unable to read '{path.name}'. Make sure it's a valid Excel or CSV file."
        ) from e
    raise SpreadsheetError(
        f"Unsupported file type '{suffix or path.name}'. Please use an Excel (.xlsx or .xls) or CSV file."
    )


def _find_header_row(frame: pd.DataFrame) -> int:
    """Return the index of the first row with a "Course Listing" cell.

    Workday exports put a title and blank rows above the table header.
    """
    for index, values in enumerate(frame.itertuples(index=False)):
        for value in values:
            if isinstance(value, str) and value.strip().lower() == HEADER_MARKER:
                return index
    return 0


def _cell(value: Any) -> Any:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    return value


def load_rows(path: Union[str, Path]) -> list[dict[str, Any]]:
    """Read a spreadsheet into a list of rows.

    Args:
        path: Path to an .xlsx, .xlsm, .xls or .csv file.

    Returns:
        Rows as dictionaries keyed by header name, with "" for empty cells.

    Raises:
        SpreadsheetError: If the file is missing, unsupported or unreadable.
    """
    path = Path(path)
    frame = _read_frame(path)
    if frame.empty:
        return []

    header_index = _find_header_row(frame)
    records = list(frame.itertuples(index=False))
    header = records[header_index]

    columns: list[tuple[int, str]] = []
    seen: set[str] = set()
    for position, name in enumerate(header):
        name = str(_cell(name)).strip()
        if not name or name in seen:
            continue
        seen.add(name)
        columns.append((position, name))

    LOG.debug("Header found on row %d of %s: %s", header_index + 1, path.name, [c for _, c in columns])

    return [
        {name: _cell(values[position]) for position, name in columns}
        for values in records[header_index + 1:]
    ]
