import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from openpyxl.utils import get_column_letter

from ..data.value_formatter import ValueFormatter
from ..utils.sheet_grid import SheetGrid
from ..utils.text import Formatter, find_placeholders, substitute_global

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnresolvedPlaceholder:
    coordinate: str
    name: str

    @property
    def token(self) -> str:
        return '{' + self.name + '}'


class TextReplacementBuilder:
    def __init__(self, grid: SheetGrid, formatter: Optional[Formatter] = None):
        self.grid = grid
        self.formatter = formatter or ValueFormatter()

    def replace_header_placeholders(self, values: Mapping[str, Any], template_row: int) -> int:
        """Resolves the header scope everywhere except the template row."""
        changed = substitute_global(self.grid, template_row, values, self.formatter)
        logger.info(f"Header placeholders resolved in {changed} cells")
        return changed

    def collect_unresolved(self) -> List[UnresolvedPlaceholder]:
        """
        Lists every {name} token still present in the grid.

        Unresolved tokens are left in the output on purpose; this only
        reports them.
        """
        unresolved = []
        for row, col, record in self.grid.iter_cells():
            if not record.is_text:
                continue
            for name in find_placeholders(record.value):
                unresolved.append(UnresolvedPlaceholder(f"{get_column_letter(col)}{row}", name))
        for item in unresolved:
            logger.warning(f"Unresolved placeholder {item.token} left at {item.coordinate}")
        return unresolved
