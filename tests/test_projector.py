import json

import pytest

from receipt_records import projector
from receipt_records.models import CustomerRecord, InvoiceRecord, ProductRecord


def _doc(**fields):
    return json.dumps(fields)


WIDGET = {'description': 'Widget', 'quantity': 2, 'rate': 10, 'gst': 1, 'amount': 21}


def test_single_item_invoice():
    text = _doc(
        invoice_number='INV1',
        customer={'name': 'Acme'},
        total={'amount': 100},
        items=[WIDGET],
    )

    res = projector.project(text).to_dict()

    assert res['invoices'] == [{
        'serial': 'INV1', 'customer': 'Acme', 'product': 'Widget',
        'qty': 2, 'tax': 1, 'total': 100, 'date': 'N/A',
    }]
    assert res['products'] == [{
        'name': 'Widget', 'qty': 2, 'unitPrice': 10, 'tax': 1, 'priceWithTax': 21,
    }]
    assert res['customers'] == [{
        'name': 'Acme', 'qty': 2, 'unitPrice': 10, 'tax': 1, 'priceWithTax': 21,
    }]


def test_record_key_order_matches_columns():
    text = _doc(invoice_number='INV1', customer={'name': 'Acme'}, items=[WIDGET])
    res = projector.project(text).to_dict()

    assert list(res['invoices'][0]) == ['serial', 'customer', 'product', 'qty', 'tax', 'total', 'date']
    assert list(res['products'][0]) == ['name', 'qty', 'unitPrice', 'tax', 'priceWithTax']
    assert list(res['customers'][0]) == ['name', 'qty', 'unitPrice', 'tax', 'priceWithTax']


def test_customer_unit_price_is_last_rate_not_sum():
    # unitPrice keeps only the last item's rate while the other fields are summed.
    text = _doc(
        customer={'name': 'Acme'},
        items=[
            {'description': 'A', 'quantity': 1, 'rate': 10, 'gst': 1, 'amount': 11},
            {'description': 'B', 'quantity': 3, 'rate': 15, 'gst': 2, 'amount': 47},
        ],
    )

    customers = projector.project(text).customers

    assert customers == (CustomerRecord(name='Acme', qty=4, unit_price=15, tax=3, price_with_tax=58),)


def test_invoice_rows_share_document_fields():
    text = _doc(
        invoice_number='INV7',
        invoice_date='2024-03-15',
        customer={'name': 'Acme'},
        total={'amount': 58},
        items=[
            {'description': 'A', 'quantity': 1, 'gst': 1},
            {'description': 'B', 'quantity': 3, 'gst': 2},
        ],
    )

    invoices = projector.project(text).invoices

    assert [inv.product for inv in invoices] == ['A', 'B']
    assert [inv.qty for inv in invoices] == [1, 3]
    assert {(inv.serial, inv.customer, inv.total, inv.date) for inv in invoices} == {
        ('INV7', 'Acme', 58, '2024-03-15'),
    }


def test_invoice_rows_do_not_share_nested_values():
    text = _doc(invoice_number='INV1', total={'amount': {'value': 5}}, items=[WIDGET, WIDGET])

    first, second = projector.project(text).invoices
    first.total['value'] = 99

    assert second.total == {'value': 5}


def test_invoice_and_product_rows_do_not_share_item_values():
    text = _doc(invoice_number='INV1', customer={'name': 'Acme'}, items=[{'description': {'sku': 'W1'}}])

    res = projector.project(text)
    invoice, product = res.invoices[0], res.products[0]

    assert invoice.product == product.name == {'sku': 'W1'}
    assert invoice.product is not product.name
    product.name['sku'] = 'changed'
    assert invoice.product == {'sku': 'W1'}


def test_items_without_invoice_number_produce_products_only():
    text = _doc(items=[WIDGET, {'description': 'Gadget'}])

    res = projector.project(text)

    assert res.invoices == ()
    assert res.products == (
        ProductRecord(name='Widget', qty=2, unit_price=10, tax=1, price_with_tax=21),
        ProductRecord(name='Gadget', qty=0, unit_price=0, tax=0, price_with_tax=0),
    )


def test_no_customer_means_no_customer_rows():
    text = _doc(invoice_number='INV1', items=[WIDGET])

    res = projector.project(text)

    assert res.customers == ()
    assert res.invoices[0].customer == 'Unknown'


def test_customer_without_items_or_name():
    res = projector.project(_doc(customer={}))

    assert res.customers == (CustomerRecord(name='Unknown'),)
    assert res.invoices == ()
    assert res.products == ()


def test_empty_items_list():
    res = projector.project(_doc(invoice_number='INV1', items=[]))

    assert res.ok
    assert res.invoices == ()
    assert res.products == ()


def test_missing_fields_get_defaults():
    text = _doc(invoice_number='INV1', items=[{}, None, 'stray text'])

    res = projector.project(text)

    assert len(res.invoices) == 3
    assert res.invoices[0] == InvoiceRecord(
        serial='INV1', customer='Unknown', product='N/A', qty=0, tax=0, total=0, date='N/A',
    )
    assert all(p == ProductRecord('N/A', 0, 0, 0, 0) for p in res.products)


def test_falsy_invoice_number_skips_invoices():
    res = projector.project(_doc(invoice_number='', items=[WIDGET]))

    assert res.invoices == ()
    assert len(res.products) == 1


def test_empty_object_yields_empty_collections():
    res = projector.project("{}")

    assert res.ok
    assert res.to_dict() == {'invoices': [], 'products': [], 'customers': []}


@pytest.mark.parametrize("text", [
    "",
    "not json at all",
    '{"invoice_number": "INV1", ',
    "[1, 2, 3]",
    '{"items": [{"quantity": Infinity}]}',
    '{"invoice_number": "INV1", "items": [{"quantity": 1, "rate": NaN}]}',
    '{"total": {"amount": -Infinity}}',
])
def test_invalid_text_yields_empty_result(text):
    res = projector.project(text)

    assert not res.ok
    assert res.error
    assert res.to_dict() == {'invoices': [], 'products': [], 'customers': []}


def test_items_of_wrong_type_yield_empty_result():
    res = projector.project(_doc(invoice_number='INV1', customer={'name': 'Acme'}, items={'a': 1}))

    assert not res.ok
    assert res.is_empty


def test_non_numeric_customer_sum_yields_empty_result():
    text = _doc(customer={'name': 'Acme'}, items=[{'quantity': 'two'}])

    res = projector.project(text)

    assert not res.ok
    assert res.to_dict() == {'invoices': [], 'products': [], 'customers': []}


def test_project_is_repeatable():
    text = _doc(invoice_number='INV1', customer={'name': 'Acme'}, items=[WIDGET])

    assert projector.project(text) == projector.project(text)
    assert projector.project(text).to_dict() == projector.project(text).to_dict()
