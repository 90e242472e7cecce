"""
Distribution List Loader

Reads a table of (role, address) rows into a DistributionList.

Supported sources:
- Delimited text files (CSV, TSV, semicolon separated) with a header row
- Inline tables: an iterable of (role, address) pairs or of mappings keyed
  by the role/address column names

The whole source is read before returning; any unreadable or malformed
input raises LoadError and no partial list is produced. Address syntax is
not validated here.
"""

import csv
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import LoadError
from .models import DistributionEntry, DistributionList

logger = logging.getLogger(__name__)

DEFAULT_ROLE_COLUMN = "role"
DEFAULT_ADDRESS_COLUMN = "address"

# Extension -> delimiter for files that are not sniffed
EXTENSION_DELIMITERS = {
    ".tsv": "\t",
    ".tab": "\t",
}
SNIFF_DELIMITERS = ",;\t|"
SNIFF_SAMPLE_SIZE = 4096
BOM = "\ufeff"

Source = Union[str, Path, Iterable[Any]]


def load_distribution_list(
    source: Source,
    *,
    role_column: str = DEFAULT_ROLE_COLUMN,
    address_column: str = DEFAULT_ADDRESS_COLUMN,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> DistributionList:
    """
    Load a distribution list.

    Args:
        source: Path to a delimited file, or an inline table
        role_column: Header of the role column (case-insensitive)
        address_column: Header of the address column (case-insensitive)
        delimiter: Field delimiter for files (detected when omitted)
        encoding: File encoding

    Returns:
        DistributionList in source order

    Raises:
        LoadError: If the source is unreadable or malformed
    """
    if isinstance(source, (str, Path)):
        return load_from_file(
            source,
            role_column=role_column,
            address_column=address_column,
            delimiter=delimiter,
            encoding=encoding,
        )
    return load_from_rows(source, role_column=role_column, address_column=address_column)


def load_from_file(
    path: Union[str, Path],
    *,
    role_column: str = DEFAULT_ROLE_COLUMN,
    address_column: str = DEFAULT_ADDRESS_COLUMN,
    delimiter: Optional[str] = None,
    encoding: str = "utf-8",
) -> DistributionList:
    """Load a distribution list from a delimited text file with a header row."""
    path = Path(path)

    try:
        with path.open("r", encoding=encoding, newline="") as fh:
            sample = fh.read(SNIFF_SAMPLE_SIZE)
            fh.seek(0)
            dialect_delimiter = delimiter or _detect_delimiter(path, sample)
            reader = csv.DictReader(fh, delimiter=dialect_delimiter)
            entries = _read_rows(
                reader,
                role_column=role_column,
                address_column=address_column,
                source=str(path),
            )
    except FileNotFoundError as e:
        raise LoadError(f"Distribution list not found: {path}") from e
    except UnicodeDecodeError as e:
        raise LoadError(f"Distribution list {path} is not valid {encoding} text: {e}") from e
    except csv.Error as e:
        raise LoadError(f"Distribution list {path} is malformed: {e}") from e
    except OSError as e:
        raise LoadError(f"Cannot read distribution list {path}: {e}") from e

    logger.info(f"Loaded {len(entries)} distribution entries from {path}")
    return DistributionList(entries=tuple(entries), source=str(path))


def load_from_rows(
    rows: Iterable[Any],
    *,
    role_column: str = DEFAULT_ROLE_COLUMN,
    address_column: str = DEFAULT_ADDRESS_COLUMN,
) -> DistributionList:
    """
    Load a distribution list from an inline table.

    Each row is either a (role, address) pair or a mapping containing the
    role and address columns.
    """
    try:
        iterator = iter(rows)
    except TypeError as e:
        raise LoadError(f"Unsupported distribution list source: {type(rows).__name__}") from e

    entries: List[DistributionEntry] = []
    for row_number, row in enumerate(iterator, start=1):
        if isinstance(row, Mapping):
            columns = _match_columns(list(row.keys()), role_column, address_column, "inline table")
            role = row.get(columns[role_column])
            address = row.get(columns[address_column])
        elif isinstance(row, Sequence) and not isinstance(row, (str, bytes)) and len(row) == 2:
            role, address = row
        else:
            raise LoadError(
                f"Row {row_number} of inline table must be a (role, address) pair or a mapping"
            )

        entry = _build_entry(role, address, row_number, "inline table")
        if entry is not None:
            entries.append(entry)

    logger.debug(f"Loaded {len(entries)} distribution entries from inline table")
    return DistributionList(entries=tuple(entries), source="inline")


def _detect_delimiter(path: Path, sample: str) -> str:
    """Pick the delimiter by extension, then by sniffing the header sample."""
    by_extension = EXTENSION_DELIMITERS.get(path.suffix.lower())
    if by_extension:
        return by_extension
    try:
        return csv.Sniffer().sniff(sample, delimiters=SNIFF_DELIMITERS).delimiter
    except csv.Error:
        return ","


def _match_columns(
    fieldnames: Sequence[Any],
    role_column: str,
    address_column: str,
    source: str,
) -> Dict[str, Any]:
    """Map the requested column names onto the actual (case-insensitive) headers."""
    normalized = {}
    for name in fieldnames:
        if name is None:
            continue
        # Excel "CSV UTF-8" exports start the first header with a byte-order mark
        normalized.setdefault(str(name).lstrip(BOM).strip().lower(), name)

    matched = {}
    for wanted in (role_column, address_column):
        actual = normalized.get(wanted.strip().lower())
        if actual is None:
            raise LoadError(f"Distribution list {source} is missing required column '{wanted}'")
        matched[wanted] = actual
    return matched


def _read_rows(
    reader: csv.DictReader,
    *,
    role_column: str,
    address_column: str,
    source: str,
) -> List[DistributionEntry]:
    if not reader.fieldnames:
        raise LoadError(f"Distribution list {source} has no header row")

    columns = _match_columns(reader.fieldnames, role_column, address_column, source)

    entries: List[DistributionEntry] = []
    for row in reader:
        entry = _build_entry(
            row.get(columns[role_column]),
            row.get(columns[address_column]),
            reader.line_num,
            source,
        )
        if entry is not None:
            entries.append(entry)
    return entries


def _build_entry(role: Any, address: Any, row_number: int, source: str) -> Optional[DistributionEntry]:
    role_text = "" if role is None else str(role)
    address_text = "" if address is None else str(address)

    if not role_text.strip() and not address_text.strip():
        return None

    try:
        return DistributionEntry(role=role_text, address=address_text)
    except ValueError as e:
        raise LoadError(f"Row {row_number} of {source}: {e}") from e
