# ==============================================================================
# salestarget/reconciler/schema.py
# ------------------------------------------------------------------------------
# Defines the expected structure of the sales and return exports.
# The column spellings differ between source files; this table is the single
# source of truth for which header names feed each invoice field.
# ==============================================================================

# canonical field -> accepted header spellings, most specific first
COLUMN_ALIASES = {
    'invoice_no': ['Invoice No.', 'Invoice No', 'INVOICE NO', 'Invoice', 'Inv No'],
    'customer': ['Customer', 'Financier/Customer', 'Financier / Customer', 'Party'],
    'net_invoice': ['Net Invoice', 'Net Inv'],
    'amount_realised': ['Amount Realised', 'Amt Realised'],
    'invoice_value': ['Invoice Value', 'Inv Value'],
    'credit_card_charges': ['(+) CREDIT CARD CHARGES'],
    'negative_round_off': ['(-) Round Off'],
    'positive_round_off': ['(+) Round Off'],
    'cash_discount': ['(-) CASH DISCOUNT'],
    'model': ['Item/Model', 'Item'],
    'brand': ['Brand'],
    'net_amount': ['Net Amount', 'Net Amt'],
}

# Invoice-level amounts, filled from the first row that carries a non-zero value
INVOICE_MONETARY_FIELDS = [
    'net_invoice',
    'amount_realised',
    'invoice_value',
    'credit_card_charges',
    'negative_round_off',
    'positive_round_off',
    'cash_discount',
]

# --- Sales sheet markers ---
HEADER_FIRST_CELL = 'date'
SALESPERSON_LABEL = 'salesperson'
META_FIRST_CELLS = {'total', 'grand total'}
META_FIRST_CELL_PREFIXES = ('branch', 'period')

# --- Business rule defaults (overridable through AppSetting) ---
DEFAULT_FINANCE_CUSTOMERS = ['BAJAJ FINANCE LTD', 'TVS FINANCE LTD', 'HDB FINANCE LTD']
DEFAULT_SPARES_PREFIX = 'SPARES'
DEFAULT_INVOICE_MARKER_CHARS = '*'
DEFAULT_RETURN_REF_COLUMN_PREFIX = 'REF. DOC'
