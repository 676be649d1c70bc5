# ==============================================================================
# salestarget/reconciler/engine.py
# ------------------------------------------------------------------------------
# Reconciles invoices into own-brand / other-brand achievement deltas.
# ==============================================================================

import logging

from .aggregator import aggregate_invoices
from .normalize import canonical_name, is_spares_line, round_half_up
from .schema import (DEFAULT_FINANCE_CUSTOMERS, DEFAULT_INVOICE_MARKER_CHARS,
                     DEFAULT_RETURN_REF_COLUMN_PREFIX, DEFAULT_SPARES_PREFIX)
from .segmenter import segment_rows
from .trace import ReconciliationTrace
from .types import AchievementDelta, BlockResult, ReconciliationReport

# --- Configuration Loader Class ---


class ReconciliationConfig:
    """
    Business rules used by the engine. A plain instance carries the built-in
    defaults; load() returns a shared instance populated from the AppSetting
    table, so the database is queried once until reset() is called.
    """
    _instance = None

    def __init__(self, settings=None):
        settings = settings or {}
        self.FINANCE_CUSTOMERS = {canonical_name(c) for c in settings.get('FINANCE_CUSTOMERS', DEFAULT_FINANCE_CUSTOMERS)}
        self.SPARES_PREFIX = settings.get('SPARES_PREFIX', DEFAULT_SPARES_PREFIX)
        self.INVOICE_MARKER_CHARS = settings.get('INVOICE_MARKER_CHARS', DEFAULT_INVOICE_MARKER_CHARS)
        self.RETURN_REF_COLUMN_PREFIX = settings.get('RETURN_REF_COLUMN_PREFIX', DEFAULT_RETURN_REF_COLUMN_PREFIX)

    @classmethod
    def load(cls):
        if cls._instance is None:
            from salestarget.models import AppSetting
            logging.info("Creating and loading ReconciliationConfig instance...")
            try:
                settings = {s.key: s.get_value() for s in AppSetting.query.all()}
            except Exception as e:
                logging.error(f"Could not load reconciliation settings from database: {e}", exc_info=True)
                raise
            cls._instance = cls(settings)
            logging.info("ReconciliationConfig loaded successfully.")
        return cls._instance

    @classmethod
    def reset(cls):
        cls._instance = None


# --- Invoice Reconciliation ---

def _split_lines(invoice, own_brand, config, trace):
    spares_total, own_net, other_net = 0.0, 0.0, 0.0
    for item in invoice.items:
        if not item.net_amount:
            continue
        model = item.model or ''

        if is_spares_line(model, config.SPARES_PREFIX):
            spares_total += item.net_amount
            trace.emit('spares_line', "SPARES line", invoice=invoice.invoice_no, model=model, net_amount=item.net_amount)
            continue

        if own_brand and model.upper().startswith(own_brand):
            own_net += item.net_amount
            trace.emit('own_line', "OWN line", invoice=invoice.invoice_no, model=model, net_amount=item.net_amount)
        else:
            other_net += item.net_amount
            trace.emit('other_line', "OTHER line", invoice=invoice.invoice_no, model=model, net_amount=item.net_amount)
    return spares_total, own_net, other_net


def reconcile_invoices(invoices, brand, return_set=frozenset(), config=None, trace=None):
    """
    Sums the own-brand and other-brand net amounts of the invoices that pass
    the return, credit-mismatch and empty-invoice gates.

    Args:
        invoices (dict): Canonical invoice number -> Invoice.
        brand (str or None): The salesperson's brand; None makes every line 'other'.
        return_set (set): Canonical invoice numbers to skip.
        config (ReconciliationConfig, optional): Business rules, defaults when omitted.
        trace (ReconciliationTrace, optional): Diagnostic sink.

    Returns:
        AchievementDelta: The block's own and other totals.
    """
    config = config or ReconciliationConfig()
    trace = trace or ReconciliationTrace(enabled=False)
    own_brand = canonical_name(brand) or None

    total = AchievementDelta()
    for invoice_no, invoice in invoices.items():
        if invoice_no in return_set:
            trace.emit('return_skip', "Skipping invoice due to SALES RETURN list", invoice=invoice_no)
            continue

        spares_total, own_net, other_net = _split_lines(invoice, own_brand, config, trace)
        final_value = invoice.final_invoice_value
        adjusted_value = final_value - spares_total

        is_mismatch = round_half_up(invoice.net_invoice) != round_half_up(invoice.amount_realised)
        is_finance_customer = invoice.customer in config.FINANCE_CUSTOMERS

        trace.emit('invoice', "Invoice", invoice=invoice_no, customer=invoice.customer,
                   final_invoice_value=final_value, spares_total=spares_total,
                   adjusted_invoice=adjusted_value, own=own_net, other=other_net,
                   mismatch=is_mismatch, finance_customer=is_finance_customer)

        if is_mismatch and not is_finance_customer:
            trace.emit('mismatch_skip', "Skipping invoice due to credit mismatch", invoice=invoice_no,
                       net_invoice=invoice.net_invoice, amount_realised=invoice.amount_realised)
            continue

        if own_net == 0 and other_net == 0:
            trace.emit('empty_skip', "No non-spare lines with value, skipping invoice", invoice=invoice_no)
            continue

        total = total + AchievementDelta(own=own_net, other=other_net)

    return total


# --- Block and Sheet Orchestration ---

def process_salesperson_block(rows, salesperson_name, directory, return_set=frozenset(),
                              factor=1, config=None, trace=None):
    """
    Reconciles one salesperson block.

    Args:
        rows (list): Row dicts of the block.
        salesperson_name (str): Name from the block's marker row.
        directory (Mapping): Canonical name -> salesperson object with a `brand`.
        factor (int): Multiplier applied to the deltas (+1 adds, -1 reverses).

    Returns:
        BlockResult or None: None when the salesperson is not in the directory.
    """
    config = config or ReconciliationConfig()
    trace = trace or ReconciliationTrace(enabled=False)
    name = canonical_name(salesperson_name)

    invoices = aggregate_invoices(rows, config.INVOICE_MARKER_CHARS)
    trace.emit('block', "Processing salesperson block", salesperson=name, rows=len(rows),
               invoices=len(invoices), factor=factor)

    salesperson = directory.get(name)
    if salesperson is None:
        logging.warning(f"Salesperson not found: '{name}'. Skipping entire block.")
        trace.emit('unknown_salesperson', "Skipping entire block for unknown salesperson", salesperson=name)
        return None

    brand = getattr(salesperson, 'brand', None)
    delta = reconcile_invoices(invoices, brand, return_set, config, trace)
    trace.emit('block_totals', "Totals", salesperson=name, own=delta.own, other=delta.other, factor=factor)
    return BlockResult(salesperson=salesperson, delta=delta.scaled(factor))


def process_sales_grid(grid, year, month, directory, accumulator, return_set=frozenset(),
                       factor=1, config=None, trace=None):
    """
    Segments a sales sheet, reconciles every salesperson block and merges the
    resulting deltas into the accumulator. Unknown salespersons only drop
    their own block.

    Returns:
        ReconciliationReport
    """
    config = config or ReconciliationConfig()
    trace = trace or ReconciliationTrace(enabled=False)
    report = ReconciliationReport(year=year, month=month, returned_invoice_count=len(return_set))

    logging.info("=" * 80)
    logging.info(f"RECONCILING SALES SHEET FOR {year}-{month} ({len(return_set)} returned invoices)")
    logging.info("=" * 80)

    blocks = segment_rows(grid, trace)
    logging.info(f"Salesperson blocks in this file: {[(n, len(r)) for n, r in blocks.items()]}")

    for name, rows in blocks.items():
        if not rows:
            continue
        result = process_salesperson_block(rows, name, directory, return_set, factor, config, trace)
        if result is None:
            report.skipped.append(name)
            continue
        accumulator.merge(result.salesperson.id, year, month, result.delta.own, result.delta.other)
        report.deltas[name] = report.deltas.get(name, AchievementDelta()) + result.delta
        logging.info(f"  {name}: own={result.delta.own:,.2f} other={result.delta.other:,.2f}")

    logging.info(f"--- Reconciliation finished: {len(report.deltas)} salespersons, {len(report.skipped)} skipped. ---")
    return report
