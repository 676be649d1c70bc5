from .normalize import canonical_invoice_no, canonical_name, is_spares_line, to_number
from .segmenter import segment_rows
from .returns import extract_return_set
from .aggregator import aggregate_invoices
from .engine import (ReconciliationConfig, process_sales_grid, process_salesperson_block,
                     reconcile_invoices)
from .trace import ReconciliationTrace, TraceEvent
from .types import AchievementDelta, BlockResult, Invoice, LineItem, ReconciliationReport
