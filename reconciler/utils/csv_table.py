"""CSV table loading utilities.

Parses comma separated text into a header and rows. Fields may be wrapped
in double quotes, in which case commas and line breaks inside them are
literal and a doubled quote stands for one quote character.

Rows are not validated against the header: a short row simply has fewer
cells, and callers treat a missing cell as "field not present". Malformed
input never raises; parsing stops with a warning and the records read so
far are kept.
"""

import csv
import io
import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

Row = List[str]

_LONE_CR = re.compile(r'\r(?!\n)')
# Private use code point standing in for a lone \r while the csv module parses
_CR_PLACEHOLDER = '\ue000'


def load_table(text: str) -> Tuple[Row, List[Row]]:
    """Parse CSV text into header and rows.

    Args:
        text: Full CSV content

    Returns:
        Tuple of (header, rows). Both are empty for empty input.

    Examples:
        >>> load_table('"Acme, Inc.","123 Main St","St. Louis"')
        (['Acme, Inc.', '123 Main St', 'St. Louis'], [])
    """
    if not text:
        return [], []

    # Records end only at \n or \r\n; a lone \r is cell content
    reader = csv.reader(io.StringIO(_LONE_CR.sub(_CR_PLACEHOLDER, text), newline=''))
    records = []
    try:
        for record in reader:
            # Blank lines come back as empty lists
            if record:
                records.append([value.replace(_CR_PLACEHOLDER, '\r') for value in record])
    except csv.Error as e:
        logger.warning(f"CSV parsing stopped at line {reader.line_num}, keeping {len(records)} records: {e}")

    if not records:
        return [], []

    header, rows = records[0], records[1:]
    logger.debug(f"Loaded table with {len(header)} columns and {len(rows)} rows")
    return header, rows


def read_table(path: Union[str, Path], encoding: str = 'utf-8') -> Tuple[Row, List[Row]]:
    """Read and parse a CSV file.

    Args:
        path: CSV file location
        encoding: File encoding

    Returns:
        Tuple of (header, rows)
    """
    path = Path(path)
    logger.info(f"Reading CSV table from {path}")
    # Keep \r\n inside the text so the parser sees the original line endings
    with open(path, encoding=encoding, newline='') as f:
        return load_table(f.read())


def cell(row: Sequence[str], index: int) -> Optional[str]:
    """Return a cell value, or None if the row does not reach that column."""
    if index < 0 or index >= len(row):
        return None
    return row[index]


def table_to_frame(header: Sequence[str], rows: Sequence[Sequence[str]]) -> pd.DataFrame:
    """Build a DataFrame from parsed rows.

    Short rows are padded with None so absent cells stay distinguishable
    from empty strings. Cells beyond the header width are dropped.

    Args:
        header: Column names
        rows: Parsed rows

    Returns:
        DataFrame with object dtype columns
    """
    width = len(header)
    padded = []
    for i, row in enumerate(rows):
        if len(row) > width:
            logger.debug(f"Row {i + 1} has {len(row)} cells, header has {width}; extra cells dropped")
        padded.append([cell(row, j) for j in range(width)])
    return pd.DataFrame(padded, columns=list(header), dtype=object)


def validate_required_columns(header: Sequence[str], required_columns: Sequence[str]) -> List[str]:
    """Check that required column names are present in the header.

    Column names are matched by exact string.

    Args:
        header: Column names from the CSV
        required_columns: Names that must be present

    Returns:
        List of missing column names (empty when all present)
    """
    missing = [col for col in required_columns if col not in header]
    if missing:
        logger.warning(f"Missing required columns: {missing}")
    return missing
