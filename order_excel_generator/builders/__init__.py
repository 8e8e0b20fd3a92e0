# order_excel_generator/builders/__init__.py
from .workbook_builder import WorkbookBuilder
from .template_state_builder import TemplateStateBuilder
from .template_locator import locate
from .text_replacement_builder import TextReplacementBuilder
from .row_expansion_builder import expand

__all__ = [
    'WorkbookBuilder',
    'TemplateStateBuilder',
    'locate',
    'TextReplacementBuilder',
    'expand',
]
