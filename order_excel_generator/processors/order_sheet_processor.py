# order_excel_generator/processors/order_sheet_processor.py
# Runs one generation: load, locate, header text, row expansion, serialize.

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..builders.row_expansion_builder import expand
from ..builders.template_locator import locate
from ..builders.text_replacement_builder import TextReplacementBuilder, UnresolvedPlaceholder
from ..builders.workbook_builder import WorkbookBuilder
from ..config.models import GeneratorConfig
from ..data.order_models import OrderData
from ..data.value_formatter import ValueFormatter
from ..utils.text import check_disjoint

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    content: bytes
    sheet_name: str
    anchor_row: int
    rows_generated: int
    unresolved: List[UnresolvedPlaceholder] = field(default_factory=list)


class OrderSheetProcessor:
    """
    Generates an order document from a template holding one anchor row.

    Each call to process() loads its own workbook from the template bytes, so
    one processor can serve any number of calls, and the only state shared
    between them is the immutable template. Nothing is serialized until
    every edit has succeeded, so a failing call produces no output.
    """

    def __init__(self, template_bytes: bytes, config: Optional[GeneratorConfig] = None):
        self.template_bytes = template_bytes
        self.config = config or GeneratorConfig()
        self.formatter = ValueFormatter.from_config(self.config)

    def process(self, header: Mapping[str, Any], items: Sequence[Mapping[str, Any]]) -> GenerationResult:
        check_disjoint(header, items)

        workbook_builder = WorkbookBuilder(self.template_bytes, self.config.sheet_index)
        try:
            grid = workbook_builder.capture()
            logger.info(f"Processing sheet '{grid.title}' ({grid.bounds.coord}) with {len(items)} line items")

            anchor_row = locate(grid, self.config.marker, strict=self.config.reject_duplicate_anchors)

            text_builder = TextReplacementBuilder(grid, self.formatter)
            text_builder.replace_header_placeholders(header, anchor_row)
            rows_generated = expand(grid, anchor_row, items, self.formatter)
            unresolved = text_builder.collect_unresolved()

            content = workbook_builder.build(grid)
        finally:
            workbook_builder.close()

        return GenerationResult(
            content=content,
            sheet_name=grid.title,
            anchor_row=anchor_row,
            rows_generated=rows_generated,
            unresolved=unresolved,
        )

    def process_order(self, order: Union[OrderData, Dict[str, Any]]) -> GenerationResult:
        if not isinstance(order, OrderData):
            order = OrderData.model_validate(order)
        logger.info(f"Generating document for order '{order.num_pedido}'")
        return self.process(order.header_values(), order.line_values(self.config.need_by_days))


def render_template(template_bytes: bytes, header: Mapping[str, Any], items: Sequence[Mapping[str, Any]],
                    config: Optional[GeneratorConfig] = None) -> bytes:
    """Expands the template for one header record and its line items and returns the .xlsx bytes."""
    return OrderSheetProcessor(template_bytes, config).process(header, items).content


def generate_order_document(template_bytes: bytes, order: Union[OrderData, Dict[str, Any]],
                            config: Optional[GeneratorConfig] = None) -> bytes:
    """Builds the supplier order document for one order record."""
    return OrderSheetProcessor(template_bytes, config).process_order(order).content
