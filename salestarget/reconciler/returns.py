# ==============================================================================
# salestarget/reconciler/returns.py
# ------------------------------------------------------------------------------
# Parses the sales-return / credit-note export into the set of invoice numbers
# that must be left out of the achievements.
#
# Only the "Ref. Doc. Info." column matters. Its cells look like
# "GI/16909*  02-11-2025": the bill number is the first token.
# ==============================================================================

import logging

from .normalize import canonical_invoice_no, cell_text
from .schema import DEFAULT_INVOICE_MARKER_CHARS, DEFAULT_RETURN_REF_COLUMN_PREFIX


def find_reference_column(header_row, prefix=DEFAULT_RETURN_REF_COLUMN_PREFIX):
    """Index of the first header starting with the prefix, or 0 when absent."""
    prefix = prefix.upper()
    for index, label in enumerate(header_row):
        if cell_text(label).upper().startswith(prefix):
            return index
    return 0


def extract_return_set(rows, prefix=DEFAULT_RETURN_REF_COLUMN_PREFIX,
                       markers=DEFAULT_INVOICE_MARKER_CHARS):
    """
    Builds the set of canonical invoice numbers listed in a return sheet.

    Args:
        rows (list): Row-major cell grid of the return sheet's first sheet,
            header row first.
        prefix (str): Header prefix identifying the reference column.
        markers (str): Trailing marker characters stripped from bill numbers.

    Returns:
        set: Canonical invoice numbers. Blank or malformed cells contribute nothing.
    """
    return_set = set()
    rows = [list(r) for r in rows]
    if not rows:
        logging.warning("Return file has no rows.")
        return return_set

    ref_col = find_reference_column(rows[0], prefix)
    logging.info(f"Return file using column index {ref_col} (header: {[cell_text(c) for c in rows[0]]})")

    for row in rows[1:]:
        raw = cell_text(row[ref_col]) if ref_col < len(row) else ''
        if not raw:
            continue
        invoice_no = canonical_invoice_no(raw.split()[0], markers)
        if invoice_no:
            return_set.add(invoice_no)

    logging.info(f"Extracted {len(return_set)} returned invoices. Sample: {sorted(return_set)[:10]}")
    return return_set
