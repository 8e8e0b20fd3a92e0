# This module contains the in-memory cell grid the generator mutates.
# It is filled from an openpyxl worksheet, edited without touching the
# workbook, and only written back once every edit has succeeded.

import logging
from copy import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from openpyxl.styles.cell_style import StyleArray
from openpyxl.worksheet.cell_range import CellRange

logger = logging.getLogger(__name__)

Address = Tuple[int, int]


@dataclass
class CellRecord:
    """
    One populated cell.

    style_ref is the openpyxl StyleArray of the source cell: a row of indices
    into the workbook's shared font/fill/border/alignment/number-format tables.
    Copying a record copies those indices, never the style objects themselves.
    """
    value: Any = None
    data_type: str = 'n'
    style_ref: Optional[StyleArray] = None
    formatted_value: Optional[str] = None

    def __post_init__(self):
        if self.formatted_value is None and self.value is not None:
            self.formatted_value = str(self.value)

    @property
    def is_text(self) -> bool:
        return self.data_type == 's' and isinstance(self.value, str)

    def set_text(self, text: str):
        self.value = text
        self.formatted_value = text

    def clone(self) -> 'CellRecord':
        style_ref = copy(self.style_ref) if self.style_ref is not None else None
        return CellRecord(self.value, self.data_type, style_ref, self.formatted_value)


@dataclass
class RowFormat:
    """Row-level attributes that travel with a row: height, visibility, outline and row style."""
    height: Optional[float] = None
    hidden: bool = False
    outline_level: int = 0
    collapsed: bool = False
    style_ref: Optional[StyleArray] = None

    def clone(self) -> 'RowFormat':
        style_ref = copy(self.style_ref) if self.style_ref is not None else None
        return RowFormat(self.height, self.hidden, self.outline_level, self.collapsed, style_ref)


@dataclass
class RangeRule:
    """
    A conditional format (rule is the list of openpyxl Rules) or a data
    validation (rule is the DataValidation) bound to cell ranges that move
    with the rows they cover.
    """
    ranges: List[CellRange]
    rule: Any


class SheetGrid:
    """
    Sparse, address-indexed store of CellRecords plus an explicitly tracked
    bounding range.

    Rows and columns are 1-based. The bounds are never recomputed from the
    stored cells: every operation that adds rows must grow them itself, and
    writes outside the bounds are rejected.
    """

    def __init__(self, title: str, bounds: CellRange):
        self.title = title
        self.bounds = bounds
        self.cells: Dict[Address, CellRecord] = {}
        self.merged_ranges: List[CellRange] = []
        self.row_formats: Dict[int, RowFormat] = {}
        self.conditional_formats: List[RangeRule] = []
        self.data_validations: List[RangeRule] = []

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, address: Address) -> bool:
        return address in self.cells

    @property
    def row_count(self) -> int:
        return self.bounds.max_row - self.bounds.min_row + 1

    @property
    def col_count(self) -> int:
        return self.bounds.max_col - self.bounds.min_col + 1

    def in_bounds(self, row: int, col: int) -> bool:
        return (self.bounds.min_row <= row <= self.bounds.max_row
                and self.bounds.min_col <= col <= self.bounds.max_col)

    def get(self, row: int, col: int) -> Optional[CellRecord]:
        return self.cells.get((row, col))

    def set(self, row: int, col: int, record: CellRecord):
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) lies outside the sheet range {self.bounds.coord}")
        self.cells[(row, col)] = record

    def pop(self, row: int, col: int) -> Optional[CellRecord]:
        return self.cells.pop((row, col), None)

    def row_cells(self, row: int) -> Dict[int, CellRecord]:
        """Returns the populated cells of one row keyed by column, in column order."""
        return {col: self.cells[(row, col)]
                for col in range(self.bounds.min_col, self.bounds.max_col + 1)
                if (row, col) in self.cells}

    def pop_row(self, row: int) -> Dict[int, CellRecord]:
        popped = self.row_cells(row)
        for col in popped:
            del self.cells[(row, col)]
        return popped

    def populated_rows(self, min_row: Optional[int] = None) -> List[int]:
        rows = {row for row, _ in self.cells}
        if min_row is not None:
            rows = {row for row in rows if row >= min_row}
        return sorted(rows)

    def iter_cells(self, exclude_row: Optional[int] = None) -> Iterator[Tuple[int, int, CellRecord]]:
        """Yields (row, col, record) in row-major order within the declared bounds."""
        for row in range(self.bounds.min_row, self.bounds.max_row + 1):
            if row == exclude_row:
                continue
            for col, record in self.row_cells(row).items():
                yield row, col, record

    def grow_rows(self, amount: int = 1):
        self.bounds.expand(down=amount)
        logger.debug(f"Sheet '{self.title}' range grown to {self.bounds.coord}")
