"""
Order records as returned by the marketplace orders listing (OR11).

Orders are read-only snapshots. Each `Order` keeps the complete wire record in
`raw` so it can be written back out untouched; the typed attributes are the
parts the sync itself looks at.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from common.exceptions import DecodeError


# =====================================================================================
# --- Additional fields ---
# =====================================================================================
# Orders and order lines carry a list of typed key/value pairs. The "type"
# key selects the variant; every variant holds a single text value except
# MULTIPLE_VALUES_LIST, which holds a list of them.

@dataclass(frozen=True)
class AdditionalField:
    code: str
    value: str

    TYPE = None

    def to_dict(self):
        return {'code': self.code, 'type': self.TYPE, 'value': self.value}


@dataclass(frozen=True)
class BooleanField(AdditionalField):
    TYPE = 'BOOLEAN'


@dataclass(frozen=True)
class DateField(AdditionalField):
    TYPE = 'DATE'


@dataclass(frozen=True)
class LinkField(AdditionalField):
    TYPE = 'LINK'


@dataclass(frozen=True)
class ListField(AdditionalField):
    TYPE = 'LIST'


@dataclass(frozen=True)
class NumericField(AdditionalField):
    TYPE = 'NUMERIC'


@dataclass(frozen=True)
class RegexField(AdditionalField):
    TYPE = 'REGEX'


@dataclass(frozen=True)
class StringField(AdditionalField):
    TYPE = 'STRING'


@dataclass(frozen=True)
class TextareaField(AdditionalField):
    TYPE = 'TEXTAREA'


@dataclass(frozen=True)
class MultipleValuesListField:
    code: str
    value: List[str]

    TYPE = 'MULTIPLE_VALUES_LIST'

    def to_dict(self):
        return {'code': self.code, 'type': self.TYPE, 'value': list(self.value)}


ADDITIONAL_FIELD_TYPES = {
    cls.TYPE: cls
    for cls in (
        BooleanField,
        DateField,
        LinkField,
        ListField,
        MultipleValuesListField,
        NumericField,
        RegexField,
        StringField,
        TextareaField,
    )
}


def parse_additional_field(data):
    """
    Builds the variant selected by `data['type']`.

    Raises:
        DecodeError: unknown type, missing code, or a value of the wrong shape.
    """
    if not isinstance(data, dict):
        raise DecodeError("additional field", f"expected an object, got {type(data).__name__}")

    field_type = data.get('type')
    cls = ADDITIONAL_FIELD_TYPES.get(field_type)
    if cls is None:
        raise DecodeError("additional field", f"unknown type {field_type!r}")
    if not data.get('code'):
        raise DecodeError("additional field", f"{field_type} field without a code")

    value = data.get('value')
    if cls is MultipleValuesListField:
        if value is None:
            value = []
        if not isinstance(value, list):
            raise DecodeError("additional field", f"{data['code']}: expected a list of values")
        return cls(code=data['code'], value=[str(v) for v in value])

    if isinstance(value, (list, dict)):
        raise DecodeError("additional field", f"{data['code']}: expected a single value")
    return cls(code=data['code'], value='' if value is None else str(value))


def parse_additional_fields(items):
    return [parse_additional_field(item) for item in (items or [])]


# =====================================================================================
# --- Orders ---
# =====================================================================================

@dataclass(frozen=True)
class OrderLine:
    order_line_id: str
    order_line_state: Optional[str] = None
    offer_sku: Optional[str] = None
    product_title: Optional[str] = None
    quantity: int = 0
    price: float = 0.0
    total_price: float = 0.0
    additional_fields: List[AdditionalField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or not data.get('order_line_id'):
            raise DecodeError("order line", "missing order_line_id")
        return cls(
            order_line_id=str(data['order_line_id']),
            order_line_state=data.get('order_line_state'),
            offer_sku=data.get('offer_sku'),
            product_title=data.get('product_title'),
            quantity=data.get('quantity') or 0,
            price=data.get('price') or 0.0,
            total_price=data.get('total_price') or 0.0,
            additional_fields=parse_additional_fields(data.get('order_line_additional_fields')),
        )


@dataclass(frozen=True)
class Order:
    """One marketplace order, exactly as listed."""

    order_id: str
    order_state: str
    raw: dict = field(repr=False, compare=False)
    commercial_id: Optional[str] = None
    created_date: Optional[str] = None
    last_updated_date: Optional[str] = None
    currency_iso_code: Optional[str] = None
    price: float = 0.0
    shipping_price: float = 0.0
    total_price: float = 0.0
    total_commission: float = 0.0
    customer: dict = field(default_factory=dict, repr=False)
    fulfillment_center_code: Optional[str] = None
    order_lines: List[OrderLine] = field(default_factory=list, repr=False)
    additional_fields: List[AdditionalField] = field(default_factory=list, repr=False)

    @classmethod
    def from_dict(cls, data):
        """
        Decodes one entry of the `orders` array.

        Only `order_id` and `order_state` are required; everything else the
        marketplace omits falls back to an empty default.

        Raises:
            DecodeError: if the entry is not an object or lacks a required key.
        """
        if not isinstance(data, dict):
            raise DecodeError("order", f"expected an object, got {type(data).__name__}")
        for key in ('order_id', 'order_state'):
            if not data.get(key):
                raise DecodeError("order", f"missing {key}")

        fulfillment = data.get('fulfillment') or {}
        center = fulfillment.get('center') or {}
        return cls(
            order_id=str(data['order_id']),
            order_state=data['order_state'],
            raw=data,
            commercial_id=data.get('commercial_id'),
            created_date=data.get('created_date'),
            last_updated_date=data.get('last_updated_date'),
            currency_iso_code=data.get('currency_iso_code'),
            price=data.get('price') or 0.0,
            shipping_price=data.get('shipping_price') or 0.0,
            total_price=data.get('total_price') or 0.0,
            total_commission=data.get('total_commission') or 0.0,
            customer=data.get('customer') or {},
            fulfillment_center_code=center.get('code'),
            order_lines=[OrderLine.from_dict(line) for line in data.get('order_lines') or []],
            additional_fields=parse_additional_fields(data.get('order_additional_fields')),
        )


@dataclass(frozen=True)
class OrderPage:
    """
    One page of the orders listing.

    The continuation target is not part of the body; the marketplace sends it
    in the `Link` response header.
    """

    orders: List[Order]
    total_count: int

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise DecodeError("orders page", f"expected an object, got {type(data).__name__}")
        orders = data.get('orders')
        if orders is None:
            orders = []
        if not isinstance(orders, list):
            raise DecodeError("orders page", "'orders' is not a list")
        total_count = data.get('total_count')
        if total_count is None:
            total_count = len(orders)
        return cls(orders=[Order.from_dict(o) for o in orders], total_count=total_count)
