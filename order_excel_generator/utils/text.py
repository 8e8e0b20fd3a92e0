# This module holds the placeholder substitution engine.
# A placeholder is a {name} token inside the text of a cell. Values are
# resolved in two scopes: the header scope, applied once to every cell
# outside the template row, and the line scope, applied to a fresh copy of
# the template row for each generated row.

import re
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..data.value_formatter import ValueFormatter
from ..exceptions import NamespaceConflictError
from .sheet_grid import CellRecord, SheetGrid

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}\s]+)\}")

Formatter = Callable[[Any], str]


def find_placeholders(text: str) -> List[str]:
    """Returns the names of the {name} tokens in text, in order of appearance."""
    if not isinstance(text, str):
        return []
    return PLACEHOLDER_PATTERN.findall(text)


def replace_placeholders(text: str, values: Mapping[str, Any], formatter: Optional[Formatter] = None) -> str:
    """
    Resolves every known {name} token of text in a single pass.

    Names missing from values, or mapped to None, keep their token verbatim.
    Substituted text is never rescanned, so a value that itself looks like a
    placeholder is written as-is.
    """
    formatter = formatter or ValueFormatter()

    def _resolve(match):
        value = values.get(match.group(1))
        if value is None:
            return match.group(0)
        return formatter(value)

    return PLACEHOLDER_PATTERN.sub(_resolve, text)


def _substitute_record(record: CellRecord, values: Mapping[str, Any], formatter: Formatter) -> bool:
    if not record.is_text or '{' not in record.value:
        return False
    new_text = replace_placeholders(record.value, values, formatter)
    if new_text == record.value:
        return False
    record.set_text(new_text)
    return True


def substitute_global(grid: SheetGrid, exclude_row: int, values: Mapping[str, Any],
                      formatter: Optional[Formatter] = None) -> int:
    """
    Applies the header scope to every text cell of the grid except those in
    exclude_row (the template row, reserved for the line scope).

    Returns the number of cells whose text changed.
    """
    formatter = formatter or ValueFormatter()
    changed = 0
    for row, col, record in grid.iter_cells(exclude_row=exclude_row):
        if _substitute_record(record, values, formatter):
            changed += 1
            logger.debug(f"Header placeholders resolved at ({row}, {col}): '{record.value}'")
    return changed


def substitute_line(row_cells: Mapping[int, CellRecord], values: Mapping[str, Any],
                    formatter: Optional[Formatter] = None) -> Dict[int, CellRecord]:
    """
    Returns a copy of row_cells with the line scope applied.

    The input snapshot is left untouched so it can be reused for the next
    line-item. Every record is copied, including the ones without text, so
    the style of every populated column carries over.
    """
    formatter = formatter or ValueFormatter()
    filled = {}
    for col, record in row_cells.items():
        new_record = record.clone()
        _substitute_record(new_record, values, formatter)
        filled[col] = new_record
    return filled


def check_disjoint(header: Mapping[str, Any], items: Iterable[Mapping[str, Any]]):
    """Raises NamespaceConflictError when a key is both a header and a line field."""
    line_keys = set()
    for item in items:
        line_keys.update(item.keys())
    overlap = line_keys.intersection(header.keys())
    if overlap:
        raise NamespaceConflictError(overlap)
