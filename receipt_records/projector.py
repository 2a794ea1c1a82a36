"""
Project a sanitized model answer into invoice, product and customer rows.

`project` never raises: a parse failure or a wrongly shaped document is
logged and returned as an empty `ProjectionResult`.
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from receipt_records.models import (
    CustomerRecord,
    CustomerTotals,
    InvoiceRecord,
    MalformedDocumentError,
    ProductRecord,
    SourceDocument,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    invoices: Tuple[InvoiceRecord, ...] = ()
    products: Tuple[ProductRecord, ...] = ()
    customers: Tuple[CustomerRecord, ...] = ()
    error: Optional[str] = None

    @classmethod
    def empty(cls, reason: Optional[str] = None) -> "ProjectionResult":
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return not (self.invoices or self.products or self.customers)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Plain-dict form used by the API, CLI and viewer."""
        return {
            'invoices': [record.to_dict() for record in self.invoices],
            'products': [record.to_dict() for record in self.products],
            'customers': [record.to_dict() for record in self.customers],
        }


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_document(text: str) -> SourceDocument:
    """Parse sanitized JSON text into a SourceDocument.

    NaN, Infinity and -Infinity are rejected like any other invalid JSON.
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (TypeError, ValueError) as e:
        raise MalformedDocumentError(f"Sanitized text is not valid JSON: {e}") from e
    return SourceDocument(data)


def derive_invoices(doc: SourceDocument) -> List[InvoiceRecord]:
    """One row per line item, only for documents with an invoice number."""
    items = doc.items
    if not doc.has_invoice_number or not items:
        return []

    serial = doc.serial
    customer = doc.customer_name
    total = doc.total_amount
    date = doc.date

    return [
        InvoiceRecord(
            serial=copy.deepcopy(serial),
            customer=copy.deepcopy(customer),
            product=item.description,
            qty=item.quantity,
            tax=item.gst,
            total=copy.deepcopy(total),
            date=copy.deepcopy(date),
        )
        for item in items
    ]


def derive_products(doc: SourceDocument) -> List[ProductRecord]:
    """One row per line item, whether or not an invoice number exists."""
    items = doc.items
    if items is None:
        return []

    return [
        ProductRecord(
            name=item.description,
            qty=item.quantity,
            unit_price=item.rate,
            tax=item.gst,
            price_with_tax=item.amount,
        )
        for item in items
    ]


def derive_customers(doc: SourceDocument) -> List[CustomerRecord]:
    """At most one row, aggregated over all line items."""
    if not doc.has_customer:
        return []

    totals = CustomerTotals(name=doc.customer_name)
    for item in doc.items or []:
        totals.add(item)
    return [totals.to_record()]


def project(sanitized: str) -> ProjectionResult:
    """
    Build the three record collections from sanitized JSON text.

    Args:
        sanitized: Output of `sanitizer.sanitize`.

    Returns:
        ProjectionResult with the derived rows, or an empty result carrying
        the error message when the text cannot be projected.
    """
    try:
        doc = parse_document(sanitized)
        invoices = derive_invoices(doc)
        products = derive_products(doc)
        customers = derive_customers(doc)
    except MalformedDocumentError as e:
        logger.warning(f"Error parsing response: {e}")
        return ProjectionResult.empty(str(e))
    except (TypeError, ValueError, AttributeError, KeyError) as e:
        logger.exception("Error projecting records from parsed response")
        return ProjectionResult.empty(f"{type(e).__name__}: {e}")

    logger.debug(
        f"Projected {len(invoices)} invoice(s), {len(products)} product(s), "
        f"{len(customers)} customer(s)"
    )
    return ProjectionResult(
        invoices=tuple(invoices),
        products=tuple(products),
        customers=tuple(customers),
    )
