"""
Data shapes for the record projection.

`SourceDocument` and `LineItem` wrap the parsed model answer, whose fields
are all optional and untyped. Every field is read through exactly one
property so the defaulting policy lives in one place. The three record
classes are the rows handed to the display layer.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from receipt_records.utils import get_path, is_truthy, or_default

NOT_AVAILABLE = "N/A"
UNKNOWN_CUSTOMER = "Unknown"


class MalformedDocumentError(ValueError):
    """The parsed answer cannot be projected (bad JSON or wrong shape)."""


class LineItem:
    """Read-only view over one entry of `items`."""

    def __init__(self, raw: Any):
        # Non-mapping entries read as an item with every field absent.
        self._raw = raw if isinstance(raw, Mapping) else {}

    def _field(self, key: str, default: Any) -> Any:
        # Copied so rows built from the same item never share a value.
        return copy.deepcopy(or_default(self._raw.get(key), default))

    @property
    def description(self) -> Any:
        return self._field('description', NOT_AVAILABLE)

    @property
    def quantity(self) -> Any:
        return self._field('quantity', 0)

    @property
    def rate(self) -> Any:
        return self._field('rate', 0)

    @property
    def gst(self) -> Any:
        return self._field('gst', 0)

    @property
    def amount(self) -> Any:
        return self._field('amount', 0)


class SourceDocument:
    """Read-only view over the parsed answer for one receipt or invoice."""

    def __init__(self, raw: Mapping[str, Any]):
        if not isinstance(raw, Mapping):
            raise MalformedDocumentError(
                f"Expected a JSON object, got {type(raw).__name__}"
            )
        self._raw = raw

    @property
    def serial(self) -> Any:
        return or_default(self._raw.get('invoice_number'), NOT_AVAILABLE)

    @property
    def has_invoice_number(self) -> bool:
        return is_truthy(self._raw.get('invoice_number'))

    @property
    def customer_name(self) -> Any:
        return or_default(get_path(self._raw, 'customer', 'name'), UNKNOWN_CUSTOMER)

    @property
    def has_customer(self) -> bool:
        return is_truthy(self._raw.get('customer'))

    @property
    def total_amount(self) -> Any:
        return or_default(get_path(self._raw, 'total', 'amount'), 0)

    @property
    def date(self) -> Any:
        return or_default(self._raw.get('invoice_date'), NOT_AVAILABLE)

    @property
    def items(self) -> Optional[List[LineItem]]:
        """
        Line items in their original order.

        Returns None when `items` is absent or falsy. A present `items`
        value that is not a list raises MalformedDocumentError.
        """
        raw_items = self._raw.get('items')
        if not is_truthy(raw_items):
            return None
        if not isinstance(raw_items, list):
            raise MalformedDocumentError(
                f"'items' must be a list, got {type(raw_items).__name__}"
            )
        return [LineItem(item) for item in raw_items]


@dataclass(frozen=True)
class InvoiceRecord:
    serial: Any
    customer: Any
    product: Any
    qty: Any
    tax: Any
    total: Any
    date: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            'serial': self.serial,
            'customer': self.customer,
            'product': self.product,
            'qty': self.qty,
            'tax': self.tax,
            'total': self.total,
            'date': self.date,
        }


@dataclass(frozen=True)
class ProductRecord:
    name: Any
    qty: Any
    unit_price: Any
    tax: Any
    price_with_tax: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'qty': self.qty,
            'unitPrice': self.unit_price,
            'tax': self.tax,
            'priceWithTax': self.price_with_tax,
        }


@dataclass(frozen=True)
class CustomerRecord:
    name: Any
    qty: Any = 0
    unit_price: Any = 0
    tax: Any = 0
    price_with_tax: Any = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'qty': self.qty,
            'unitPrice': self.unit_price,
            'tax': self.tax,
            'priceWithTax': self.price_with_tax,
        }


@dataclass
class CustomerTotals:
    """
    Running totals for a customer across line items.

    qty, tax and price_with_tax are summed; unit_price is overwritten by
    every item, so only the last item's rate survives.
    """
    name: Any
    qty: Any = 0
    unit_price: Any = 0
    tax: Any = 0
    price_with_tax: Any = 0

    def add(self, item: LineItem) -> None:
        self.qty += item.quantity
        self.unit_price = item.rate
        self.tax += item.gst
        self.price_with_tax += item.amount

    def to_record(self) -> CustomerRecord:
        return CustomerRecord(
            name=self.name,
            qty=self.qty,
            unit_price=self.unit_price,
            tax=self.tax,
            price_with_tax=self.price_with_tax,
        )
