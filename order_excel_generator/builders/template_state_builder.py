import logging
from copy import copy

from openpyxl.cell.cell import MergedCell
from openpyxl.formatting.formatting import ConditionalFormattingList
from openpyxl.worksheet.cell_range import CellRange, MultiCellRange
from openpyxl.worksheet.datavalidation import DataValidationList
from openpyxl.worksheet.worksheet import Worksheet

from ..utils.sheet_grid import CellRecord, RangeRule, RowFormat, SheetGrid

logger = logging.getLogger(__name__)


def _ranges_of(sqref: MultiCellRange):
    return sorted((CellRange(cell_range.coord) for cell_range in sqref.ranges),
                  key=lambda cell_range: (cell_range.min_row, cell_range.min_col))


def _sqref(ranges) -> str:
    return ' '.join(cell_range.coord for cell_range in ranges)


class TemplateStateBuilder:
    """
    Moves sheet state between an openpyxl worksheet and a SheetGrid.

    capture() reads every cell with a value or a style, the merged ranges,
    the row formats and the conditional format and data validation ranges
    into a grid. restore() clears the worksheet and writes a (possibly
    mutated) grid back into it, reusing the workbook's shared style tables
    through each record's style array.
    """

    def __init__(self, worksheet: Worksheet, debug: bool = False):
        self.worksheet = worksheet
        self.debug = debug or logger.isEnabledFor(logging.DEBUG)

    def capture(self) -> SheetGrid:
        worksheet = self.worksheet
        bounds = CellRange(worksheet.calculate_dimension())
        grid = SheetGrid(worksheet.title, bounds)

        for row in worksheet.iter_rows(min_row=bounds.min_row, max_row=bounds.max_row,
                                       min_col=bounds.min_col, max_col=bounds.max_col):
            for cell in row:
                if cell.value is None and not cell.has_style:
                    continue
                grid.cells[(cell.row, cell.column)] = CellRecord(
                    value=cell.value,
                    data_type=cell.data_type,
                    style_ref=copy(cell._style),
                )

        grid.merged_ranges = [CellRange(merged.coord) for merged in worksheet.merged_cells.ranges]
        self._capture_row_formats(grid)

        grid.conditional_formats = [RangeRule(_ranges_of(cf.sqref), list(cf.rules))
                                    for cf in worksheet.conditional_formatting]
        grid.data_validations = [RangeRule(_ranges_of(dv.sqref), dv)
                                 for dv in worksheet.data_validations.dataValidation]

        if self.debug:
            logger.debug(f"Captured {len(grid)} cells, {len(grid.merged_ranges)} merged ranges, "
                         f"{len(grid.row_formats)} row formats, {len(grid.conditional_formats)} conditional "
                         f"formats and {len(grid.data_validations)} data validations "
                         f"from '{grid.title}' ({bounds.coord})")
        return grid

    def _capture_row_formats(self, grid: SheetGrid):
        for idx, dim in self.worksheet.row_dimensions.items():
            row_format = RowFormat(
                height=dim.height,
                hidden=bool(dim.hidden),
                outline_level=dim.outlineLevel or 0,
                collapsed=bool(dim.collapsed),
                style_ref=copy(dim._style) if dim.has_style else None,
            )
            if row_format != RowFormat():
                grid.row_formats[idx] = row_format

    def restore(self, grid: SheetGrid):
        worksheet = self.worksheet

        # Drops every cell record, MergedCells included; row-level state is rebuilt below.
        worksheet.merged_cells = MultiCellRange()
        worksheet.delete_rows(1, worksheet.max_row)
        worksheet.row_dimensions.clear()
        worksheet.conditional_formatting = ConditionalFormattingList()
        worksheet.data_validations = DataValidationList()

        # Merges go in first so that their covered cells already exist as
        # MergedCells when the records are written.
        for merged in grid.merged_ranges:
            worksheet.merge_cells(merged.coord)

        for (row, col), record in sorted(grid.cells.items()):
            cell = worksheet.cell(row=row, column=col)
            if not isinstance(cell, MergedCell):
                cell.value = record.value
                if record.is_text:
                    # Keeps text such as '=A1' from turning into a formula.
                    cell.data_type = 's'
            if record.style_ref is not None:
                cell._style = copy(record.style_ref)

        for idx, row_format in sorted(grid.row_formats.items()):
            dim = worksheet.row_dimensions[idx]
            dim.height = row_format.height
            dim.hidden = row_format.hidden
            dim.outlineLevel = row_format.outline_level
            dim.collapsed = row_format.collapsed
            if row_format.style_ref is not None:
                dim._style = copy(row_format.style_ref)

        for range_rule in grid.conditional_formats:
            for rule in range_rule.rule:
                worksheet.conditional_formatting.add(_sqref(range_rule.ranges), rule)

        for range_rule in grid.data_validations:
            range_rule.rule.sqref = MultiCellRange(_sqref(range_rule.ranges))
            worksheet.data_validations.append(range_rule.rule)

        if self.debug:
            logger.debug(f"Restored {len(grid)} cells into '{worksheet.title}', "
                         f"dimension now {worksheet.calculate_dimension()}")
