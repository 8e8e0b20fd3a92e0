# order_excel_generator/builders/workbook_builder.py
# Template loading and serialization: the two steps that touch the
# workbook format itself, both delegated to openpyxl.

import logging
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Union

import openpyxl
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..exceptions import SerializationError, TemplateLoadError
from ..utils.sheet_grid import SheetGrid
from .template_state_builder import TemplateStateBuilder

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def load_template_bytes(template_path: Union[str, Path]) -> bytes:
    """
    Reads a template file once and caches its bytes.

    bytes are immutable, so the cached value can be shared between
    generations; each generation still builds its own workbook from it.
    """
    try:
        data = Path(template_path).read_bytes()
    except OSError as e:
        logger.error(f"Could not read template file {template_path}: {e}")
        raise TemplateLoadError(f"Could not read template file {template_path}: {e}") from e
    logger.debug(f"Template file {template_path} read ({len(data)} bytes)")
    return data


def load_template(template_bytes: bytes) -> Workbook:
    """Parses template bytes into a fresh, writable workbook."""
    if not template_bytes:
        raise TemplateLoadError("Template is empty")
    try:
        # read_only=False keeps merged ranges and row dimensions available.
        workbook = openpyxl.load_workbook(BytesIO(template_bytes), read_only=False)
    except Exception as e:
        logger.error(f"Error loading template workbook: {e}")
        raise TemplateLoadError(f"Could not load template workbook: {e}") from e
    if not workbook.sheetnames:
        raise TemplateLoadError("The template contains no worksheets")
    logger.debug(f"Template loaded, sheets: {workbook.sheetnames}")
    return workbook


def serialize(workbook: Workbook) -> bytes:
    """Writes the workbook to an in-memory .xlsx and returns its bytes."""
    buffer = BytesIO()
    try:
        workbook.save(buffer)
    except Exception as e:
        logger.error(f"Error writing workbook: {e}")
        raise SerializationError(f"Could not write workbook: {e}") from e
    return buffer.getvalue()


class WorkbookBuilder:
    """
    Owns the workbook of one generation call.

    capture() hands out the sheet as a SheetGrid; build() writes the grid back
    into the same workbook, so sheet order, sheet name and the shared style
    table are those of the template, and returns the serialized bytes.
    """

    def __init__(self, template_bytes: bytes, sheet_index: int = 0):
        self.workbook = load_template(template_bytes)
        if sheet_index >= len(self.workbook.worksheets):
            raise TemplateLoadError(f"Sheet index {sheet_index} out of range; "
                                    f"template has {len(self.workbook.worksheets)} sheet(s)")
        self.worksheet: Worksheet = self.workbook.worksheets[sheet_index]
        self.state_builder = TemplateStateBuilder(self.worksheet)

    def capture(self) -> SheetGrid:
        return self.state_builder.capture()

    def build(self, grid: SheetGrid) -> bytes:
        try:
            self.state_builder.restore(grid)
        except Exception as e:
            logger.error(f"Error writing cells back into sheet '{self.worksheet.title}': {e}")
            raise SerializationError(f"Could not write sheet '{self.worksheet.title}': {e}") from e
        content = serialize(self.workbook)
        logger.info(f"Workbook serialized ({len(content)} bytes)")
        return content

    def close(self):
        self.workbook.close()
