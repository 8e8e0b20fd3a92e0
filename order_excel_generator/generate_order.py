# order_excel_generator/generate_order.py
# Command-line entry point: renders one order record into the supplier
# order template and writes the resulting workbook.

import sys
import json
import time
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .builders.workbook_builder import load_template_bytes
from .config.loader import load_config
from .data.order_models import OrderData
from .exceptions import OrderExcelError
from .processors.order_sheet_processor import OrderSheetProcessor

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[0m',        # White (reset)
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    FORMATS = {
        logging.DEBUG: '>>> %(levelname)s >>> [%(filename)s:%(lineno)d in %(funcName)s()] %(message)s',
        logging.INFO: '>>> %(levelname)s >>> %(message)s',
        logging.WARNING: '>>> %(levelname)s >>> %(message)s',
        logging.ERROR: '>>> %(levelname)s >>> [%(filename)s:%(lineno)d in %(funcName)s()] %(message)s',
        logging.CRITICAL: '>>> %(levelname)s >>> [%(filename)s:%(lineno)d in %(funcName)s()] %(message)s',
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        return logging.Formatter(log_fmt).format(record)


def configure_logging(level: int):
    """INFO/DEBUG go to stdout, WARNING and above to stderr."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    formatter = ColoredFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(lambda record: record.levelno <= logging.INFO)
    root.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)


def load_order(data_path: Path) -> Optional[Dict[str, Any]]:
    """Loads the order record from a JSON file."""
    logger.info(f"Loading order data from: {data_path}")
    try:
        with open(data_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading data file {data_path}: {e}")
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a supplier order workbook from a template and an order record.")
    parser.add_argument("input_data_file", help="Path to the order record (.json).")
    parser.add_argument("-t", "--template", required=True, help="Path to the .xlsx template.")
    parser.add_argument("-o", "--output", default="result.xlsx", help="Path for the output Excel file.")
    parser.add_argument("-c", "--config", default=None, help="Optional generator configuration JSON file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging (shows all DEBUG messages).")
    parser.add_argument("--log-level", choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO', help="Set logging level (default: INFO).")
    return parser


def main(argv=None) -> int:
    start_time = time.time()
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else getattr(logging, args.log_level, logging.INFO))

    logger.info("=== Starting Order Document Generation ===")
    logger.debug(f"Arguments: {vars(args)}")

    order_data = load_order(Path(args.input_data_file))
    if order_data is None:
        return 1

    try:
        order = OrderData.model_validate(order_data)
    except ValidationError as e:
        logger.error(f"Invalid order record in {args.input_data_file}: {e}")
        return 1

    output_path = Path(args.output).resolve()
    try:
        config = load_config(args.config)
        processor = OrderSheetProcessor(load_template_bytes(Path(args.template).resolve()), config)
        result = processor.process_order(order)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(result.content)
    except (OrderExcelError, OSError) as e:
        logger.error(f"Generation failed: {e}")
        return 1

    logger.info(f"Workbook saved successfully: '{output_path}'")
    logger.info(f"Rows generated: {result.rows_generated} (anchor row {result.anchor_row} of '{result.sheet_name}')")
    if result.unresolved:
        logger.warning(f"{len(result.unresolved)} placeholder(s) left unresolved: "
                       f"{', '.join(f'{u.coordinate} {u.token}' for u in result.unresolved)}")
    logger.info(f"Total Time: {time.time() - start_time:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
