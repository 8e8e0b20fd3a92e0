# order_excel_generator/data/value_formatter.py
from datetime import date
from decimal import Decimal
from typing import Any

DEFAULT_DATE_FORMAT = '%d/%m/%Y'
DEFAULT_TRUE_LABEL = 'SÍ'
DEFAULT_FALSE_LABEL = 'NO'


class ValueFormatter:
    """
    Renders placeholder values as the text written into a cell.

    Booleans become the yes/no labels, dates (and datetimes) use the date
    format, floats with no fractional part drop the trailing '.0', and
    everything else uses str().
    """

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT,
                 true_label: str = DEFAULT_TRUE_LABEL, false_label: str = DEFAULT_FALSE_LABEL):
        self.date_format = date_format
        self.true_label = true_label
        self.false_label = false_label

    @classmethod
    def from_config(cls, config) -> 'ValueFormatter':
        return cls(config.date_format, config.true_label, config.false_label)

    def format(self, value: Any) -> str:
        # bool first: it is a subclass of int
        if isinstance(value, bool):
            return self.true_label if value else self.false_label
        if isinstance(value, date):
            return value.strftime(self.date_format)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, Decimal):
            return format(value, 'f')
        return str(value)

    __call__ = format
