# order_excel_generator/__init__.py
from .exceptions import (
    OrderExcelError,
    TemplateLoadError,
    TemplateNotFoundError,
    AmbiguousTemplateError,
    SerializationError,
    ConfigError,
    NamespaceConflictError,
)
from .config.models import GeneratorConfig
from .config.loader import load_config
from .data.order_models import OrderData, OrderLine, Supplier
from .processors.order_sheet_processor import (
    GenerationResult,
    OrderSheetProcessor,
    render_template,
    generate_order_document,
)

__all__ = [
    'OrderExcelError',
    'TemplateLoadError',
    'TemplateNotFoundError',
    'AmbiguousTemplateError',
    'SerializationError',
    'ConfigError',
    'NamespaceConflictError',
    'GeneratorConfig',
    'load_config',
    'OrderData',
    'OrderLine',
    'Supplier',
    'GenerationResult',
    'OrderSheetProcessor',
    'render_template',
    'generate_order_document',
]
