# order_excel_generator/builders/row_expansion_builder.py
# Expands the template row into one row per line-item.
#
# Rows below the insertion point are moved bottom-first so that no row is
# written over before it has itself been moved. The sheet range grows by one
# row per inserted row; it is never recomputed from the stored cells.

import logging
from typing import Any, List, Mapping, Optional, Sequence

from openpyxl.worksheet.cell_range import CellRange

from ..utils.sheet_grid import SheetGrid
from ..utils.text import Formatter, substitute_line

logger = logging.getLogger(__name__)


def _shift_range(cell_range: CellRange, start_row: int, amount: int):
    if cell_range.min_row >= start_row:
        cell_range.shift(row_shift=amount)
    elif cell_range.max_row >= start_row:
        # The range straddles the insertion point, so it takes the new row in.
        cell_range.expand(down=amount)


def shift_rows_down(grid: SheetGrid, start_row: int, amount: int = 1):
    """
    Moves every cell, merged range, row format and conditional format or
    data validation range at or below start_row down by amount rows,
    leaving start_row empty.

    The grid bounds must already cover the destination rows.
    """
    for row in reversed(grid.populated_rows(min_row=start_row)):
        for col, record in grid.pop_row(row).items():
            grid.set(row + amount, col, record)

    for merged in grid.merged_ranges:
        _shift_range(merged, start_row, amount)

    for range_rule in grid.conditional_formats + grid.data_validations:
        for cell_range in range_rule.ranges:
            _shift_range(cell_range, start_row, amount)

    for row in sorted((r for r in grid.row_formats if r >= start_row), reverse=True):
        grid.row_formats[row + amount] = grid.row_formats.pop(row)

    logger.debug(f"Shifted rows {start_row}+ of sheet '{grid.title}' down by {amount}")


def _single_row_merges(grid: SheetGrid, row: int) -> List[CellRange]:
    return [CellRange(merged.coord) for merged in grid.merged_ranges
            if merged.min_row == merged.max_row == row]


def _extend_rules_onto(grid: SheetGrid, template_row: int, new_row: int):
    """Stretches rule ranges that cover the template row over the row just inserted."""
    for range_rule in grid.conditional_formats + grid.data_validations:
        for cell_range in range_rule.ranges:
            if cell_range.min_row <= template_row and cell_range.max_row == new_row - 1:
                cell_range.expand(down=1)


def expand(grid: SheetGrid, template_row: int, items: Sequence[Mapping[str, Any]],
           formatter: Optional[Formatter] = None) -> int:
    """
    Writes one row per item, starting at template_row.

    The first item is written over the template row itself; every further
    item inserts a new row directly below the previous one, pushing the rest
    of the sheet down. Each generated row is a copy of the template row as
    it was before any item was applied (values and style references of every
    populated column, its row format and its single-row merges) with the item's
    placeholders resolved.

    With no items nothing changes and the template row keeps its unresolved
    placeholders. Returns the number of rows written.
    """
    if not items:
        logger.warning(f"No line items supplied; template row {template_row} is left unexpanded")
        return 0

    snapshot = {col: record.clone() for col, record in grid.row_cells(template_row).items()}
    template_format = grid.row_formats.get(template_row)
    template_merges = _single_row_merges(grid, template_row)
    original_rows = grid.row_count

    for index, item in enumerate(items):
        target_row = template_row + index
        if index > 0:
            grid.grow_rows(1)
            shift_rows_down(grid, target_row)
            for merged in template_merges:
                grid.merged_ranges.append(CellRange(min_col=merged.min_col, min_row=target_row,
                                                    max_col=merged.max_col, max_row=target_row))
            _extend_rules_onto(grid, template_row, target_row)
            if template_format is not None:
                grid.row_formats[target_row] = template_format.clone()

        for col, record in substitute_line(snapshot, item, formatter).items():
            grid.set(target_row, col, record)
        logger.debug(f"Line {index + 1} written to row {target_row}")

    logger.info(f"Generated {len(items)} rows from template row {template_row}; "
                f"sheet range grew from {original_rows} to {grid.row_count} rows")
    return len(items)
