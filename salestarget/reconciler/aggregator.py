# ==============================================================================
# salestarget/reconciler/aggregator.py
# ------------------------------------------------------------------------------
# Groups one salesperson's rows into invoices.
#
# An invoice spans several rows: the first carries the invoice number and the
# invoice-level amounts, continuation rows leave the number blank and only add
# line items.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Dict, Optional

from .normalize import canonical_invoice_no, canonical_name, cell_text, is_blank, to_number
from .schema import COLUMN_ALIASES, DEFAULT_INVOICE_MARKER_CHARS, INVOICE_MONETARY_FIELDS
from .types import Invoice, LineItem


def resolve(row, field_name, aliases=COLUMN_ALIASES):
    """
    Returns the value of the first accepted spelling of a field holding
    something. Zero falls through to the next spelling, like a blank.
    """
    for label in aliases[field_name]:
        value = row.get(label)
        if is_blank(value):
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
            continue
        return value
    return None


def _line_item(row):
    return LineItem(
        model=cell_text(resolve(row, 'model')),
        brand=cell_text(resolve(row, 'brand')),
        net_amount=to_number(resolve(row, 'net_amount')),
    )


def _new_invoice(invoice_no, row):
    invoice = Invoice(invoice_no=invoice_no, customer=canonical_name(resolve(row, 'customer')))
    for name in INVOICE_MONETARY_FIELDS:
        setattr(invoice, name, to_number(resolve(row, name)))
    return invoice


def _fill_missing_amounts(invoice, row):
    for name in INVOICE_MONETARY_FIELDS:
        candidate = to_number(resolve(row, name))
        if not getattr(invoice, name) and candidate:
            setattr(invoice, name, candidate)


@dataclass
class _InvoiceFold:
    last_invoice_no: Optional[str] = None
    invoices: Dict[str, Invoice] = field(default_factory=dict)


def _step(fold, row, markers):
    raw_no = resolve(row, 'invoice_no')
    own_no = canonical_invoice_no(raw_no, markers)
    if raw_no is not None and not own_no:
        # only marker characters in the cell: not a continuation row
        return fold
    invoice_no = own_no or fold.last_invoice_no
    if not invoice_no:
        # continuation row before any invoice number: belongs nowhere
        return fold
    if own_no:
        fold.last_invoice_no = own_no

    invoice = fold.invoices.get(invoice_no)
    if invoice is None:
        invoice = fold.invoices[invoice_no] = _new_invoice(invoice_no, row)
    else:
        _fill_missing_amounts(invoice, row)

    invoice.items.append(_line_item(row))
    return fold


def aggregate_invoices(rows, markers=DEFAULT_INVOICE_MARKER_CHARS):
    """
    Args:
        rows (list): Row dicts of one salesperson block, in sheet order.
        markers (str): Trailing marker characters stripped from invoice numbers.

    Returns:
        dict: Canonical invoice number -> Invoice, in order of first appearance.
    """
    fold = _InvoiceFold()
    for row in rows:
        fold = _step(fold, row, markers)
    return fold.invoices
