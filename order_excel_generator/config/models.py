from pydantic import BaseModel, ConfigDict, Field

from ..data.value_formatter import DEFAULT_DATE_FORMAT, DEFAULT_FALSE_LABEL, DEFAULT_TRUE_LABEL

DEFAULT_MARKER = '{descripcion}'


class GeneratorConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    marker: str = DEFAULT_MARKER
    sheet_index: int = Field(default=0, ge=0, alias='sheetIndex')
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, alias='dateFormat')
    true_label: str = Field(default=DEFAULT_TRUE_LABEL, alias='trueLabel')
    false_label: str = Field(default=DEFAULT_FALSE_LABEL, alias='falseLabel')
    need_by_days: int = Field(default=15, alias='needByDays')
    reject_duplicate_anchors: bool = Field(default=False, alias='rejectDuplicateAnchors')
