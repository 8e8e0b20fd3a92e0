# order_excel_generator/data/order_models.py
# Pydantic models for the repair order record handed to the generator.
# The aliases accept the record exactly as the order store returns it
# (tbl_proveedores, tbl_ln_pedidos_rep, matricula_89).

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_text(value: Any) -> Any:
    """None becomes an empty string and plain numbers their text, as the order store mixes both."""
    if value is None:
        return ''
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Supplier(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    nombre: str = ''
    direccion: str = ''
    ciudad: str = ''
    codigo_postal: str = ''
    provincia: str = ''
    email: str = ''
    persona_contacto: str = ''

    @field_validator('*', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return as_text(value)


class OrderLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    matricula: str = Field(default='', alias='matricula_89')
    descripcion: str = ''
    nenv: Optional[Union[int, float]] = None
    nsenv: str = ''

    @field_validator('matricula', 'descripcion', 'nsenv', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return as_text(value)


class OrderData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    num_pedido: str = ''
    fecha_envio: Optional[date] = None
    garantia: bool = False
    averia_declarada: str = ''
    vehiculo: str = ''
    alm_envia: str = ''
    supplier: Supplier = Field(default_factory=Supplier, alias='tbl_proveedores')
    lines: List[OrderLine] = Field(default_factory=list, alias='tbl_ln_pedidos_rep')

    @field_validator('num_pedido', 'averia_declarada', 'vehiculo', 'alm_envia', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return as_text(value)

    @field_validator('supplier', mode='before')
    @classmethod
    def missing_supplier(cls, value):
        return {} if value is None else value

    @field_validator('fecha_envio', mode='before')
    @classmethod
    def date_part(cls, value):
        # The order store sends ISO timestamps; only the calendar day matters.
        if isinstance(value, str):
            value = value.strip()
            return value[:10] or None
        return value

    def header_values(self) -> Dict[str, Any]:
        """Placeholder values resolved once across the whole sheet."""
        return {
            'num_pedido': self.num_pedido,
            'fecha_envio': self.fecha_envio or '',
            'garantia': self.garantia,
            'averia_declarada': self.averia_declarada,
            'alm_envia': self.alm_envia,
            'nombre': self.supplier.nombre,
            'direccion': self.supplier.direccion,
            'ciudad': self.supplier.ciudad,
            'codigo_postal': self.supplier.codigo_postal,
            'provincia': self.supplier.provincia,
            'email': self.supplier.email,
            'persona_contacto': self.supplier.persona_contacto,
        }

    def need_by_date(self, need_by_days: int = 15) -> Optional[date]:
        if self.fecha_envio is None:
            return None
        return self.fecha_envio + timedelta(days=need_by_days)

    def line_values(self, need_by_days: int = 15) -> List[Dict[str, Any]]:
        """
        One placeholder mapping per order line, in order.

        Besides the line's own fields each mapping carries the order-level
        values the template row prints on every line (vehicle, sending
        warehouse as 'almacen', and the need-by date).
        """
        need_by = self.need_by_date(need_by_days)
        return [
            {
                'matricula': line.matricula,
                'descripcion': line.descripcion,
                'nenv': line.nenv,
                'nsenv': line.nsenv,
                'vehiculo': self.vehiculo,
                'almacen': self.alm_envia,
                'fecha_necesidad': need_by if need_by is not None else '',
            }
            for line in self.lines
        ]
