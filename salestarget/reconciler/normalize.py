# ==============================================================================
# salestarget/reconciler/normalize.py
# ------------------------------------------------------------------------------
# Coerces raw spreadsheet cells into numbers and canonical identifiers.
# Parsing is permissive: malformed cells become 0 or "" and never raise.
# ==============================================================================

import math
import string

import pandas as pd

from .schema import DEFAULT_INVOICE_MARKER_CHARS, DEFAULT_SPARES_PREFIX


def is_blank(value):
    """True for None, NaN and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value):
    """Renders a cell as stripped text. Integral floats lose their '.0'."""
    if is_blank(value):
        return ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def to_number(value):
    """
    Parses a locale-formatted cell ("1,25,000.50") into a float.
    Blank, unparseable and non-finite values all yield 0.
    """
    if is_blank(value) or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).replace(',', '').strip())
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def canonical_invoice_no(value, markers=DEFAULT_INVOICE_MARKER_CHARS):
    """
    Canonical invoice number: trimmed, uppercased, trailing marker characters
    removed. canonical_invoice_no("gi/16909*  ") == "GI/16909".
    """
    text = cell_text(value).upper()
    if markers:
        # whitespace between markers goes too, so the result is stable
        text = text.rstrip(markers + string.whitespace)
    return text


def canonical_name(value):
    return cell_text(value).upper()


def is_spares_line(model, prefix=DEFAULT_SPARES_PREFIX):
    if is_blank(model):
        return False
    return cell_text(model).upper().startswith(prefix.upper())


def round_half_up(value):
    # Halves go toward +infinity, unlike round() which rounds to even.
    return math.floor(value + 0.5)
