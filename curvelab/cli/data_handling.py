"""
Loading of delimited text tables into rows and columns for the engine.
"""

import csv
import logging
from typing import Any, Optional

from ..extraction import Column

logger = logging.getLogger(__name__)

DELIMITERS = ',;\t'


class CurveLabError(Exception):
    """Raised by the CLI for problems outside the fitting engine (files, formats)."""
    pass


def load_table(filename: str,
               delimiter: Optional[str] = None) -> tuple[list[dict[str, Any]], list[Column]]:
    """
    Read a delimited text file.

    Lines starting with '#' and blank lines are ignored. The delimiter is
    sniffed among comma, semicolon and tab unless given. Cell values are
    returned as strings; numeric coercion is left to the extractor.

    Returns
    -------
    rows : list of dict
        One mapping per data line, column key -> raw cell text.
    columns : list of Column
        Header keys, in file order.

    Raises
    ------
    CurveLabError
        If the file cannot be read or has no header.
    """
    try:
        with open(filename, 'r', encoding='utf-8-sig', newline='') as f:
            lines = [line for line in f if line.strip() and not line.lstrip().startswith('#')]
    except FileNotFoundError:
        raise CurveLabError(f"File not found: {filename}")
    except (OSError, UnicodeDecodeError) as e:
        raise CurveLabError(f"Error reading file {filename}: {e}")

    if not lines:
        raise CurveLabError(f"No header line found in {filename}")

    if delimiter is None:
        try:
            delimiter = csv.Sniffer().sniff(''.join(lines[:10]), delimiters=DELIMITERS).delimiter
        except csv.Error:
            delimiter = ','
    logger.debug("Reading %s with delimiter %r", filename, delimiter)

    reader = csv.reader(lines, delimiter=delimiter)
    header = next(reader)
    keys = [h.strip() for h in header]
    columns = [Column(key=k, label=k) for k in keys]

    rows = []
    for record in reader:
        rows.append({k: (record[i] if i < len(record) else None) for i, k in enumerate(keys)})

    logger.debug("Loaded %d rows, columns %s", len(rows), keys)
    return rows, columns
