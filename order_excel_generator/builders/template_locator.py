# order_excel_generator/builders/template_locator.py
import logging
from typing import List

from ..config.models import DEFAULT_MARKER
from ..exceptions import AmbiguousTemplateError, TemplateNotFoundError
from ..utils.sheet_grid import SheetGrid

logger = logging.getLogger(__name__)


def find_marker_rows(grid: SheetGrid, marker: str = DEFAULT_MARKER) -> List[int]:
    """Returns every row holding a text cell that contains marker, top to bottom."""
    rows = []
    for row, col, record in grid.iter_cells():
        if record.is_text and marker in record.value and row not in rows:
            rows.append(row)
    return rows


def locate(grid: SheetGrid, marker: str = DEFAULT_MARKER, strict: bool = False) -> int:
    """
    Finds the template row: the first row, scanning row by row within the
    sheet range, with a text cell containing marker.

    A template without the marker raises TemplateNotFoundError. When several
    rows carry it the first one wins and the rest are reported as a warning;
    with strict=True that case raises AmbiguousTemplateError instead.
    """
    rows = find_marker_rows(grid, marker)
    if not rows:
        logger.error(f"Template row not found: no cell in sheet '{grid.title}' contains {marker}")
        raise TemplateNotFoundError(marker)
    if len(rows) > 1:
        if strict:
            logger.error(f"Placeholder {marker} appears in rows {rows} of sheet '{grid.title}'")
            raise AmbiguousTemplateError(marker, rows)
        logger.warning(f"Placeholder {marker} appears in rows {rows}; only row {rows[0]} will be expanded")
    logger.info(f"Template row located at row {rows[0]} of sheet '{grid.title}'")
    return rows[0]
